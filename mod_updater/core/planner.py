"""
Turns classifications into concrete actions and guards against manifests
whose entries overlap on disk.
"""

from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path

from mod_updater.exceptions import InternalConsistencyError, TargetCollisionError
from mod_updater.models.entry import ManifestEntry
from mod_updater.models.outcome import PlannedAction
from mod_updater.models.state import Classification


def plan(
    classification: Classification, entry: ManifestEntry, root: Path
) -> PlannedAction:
    """Maps every classification to exactly one action."""
    if classification is Classification.SATISFIED:
        return PlannedAction.none()
    if classification in (Classification.MISSING, Classification.STALE):
        return PlannedAction.fetch_and_replace(entry)
    if classification is Classification.OBSOLETE_PRESENT:
        return PlannedAction.delete(entry.target_path(root))
    raise InternalConsistencyError(
        f"No action defined for classification {classification!r} of '{entry.name}'."
    )


def detect_collisions(entries: Iterable[ManifestEntry], root: Path) -> None:
    """
    Raises TargetCollisionError if two entries resolve to the same target path,
    or if one entry's temporary download path is another entry's target.

    Paths are compared case-insensitively so that a manifest behaves the same
    on case-insensitive filesystems.
    """
    entries = list(entries)
    by_path: dict[str, list[str]] = defaultdict(list)
    display: dict[str, str] = {}
    for entry in entries:
        target = entry.target_path(root)
        key = str(target).casefold()
        by_path[key].append(entry.name)
        display.setdefault(key, str(target))

    for entry in entries:
        key = str(entry.temp_path(root)).casefold()
        if key in by_path:
            by_path[key].append(entry.name)

    collisions = {display[key]: names for key, names in by_path.items() if len(names) > 1}
    if collisions:
        raise TargetCollisionError(collisions)
