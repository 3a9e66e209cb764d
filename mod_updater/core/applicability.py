"""
Decides whether a manifest entry should exist on disk in the active mode.
"""

from mod_updater.models.entry import ManifestEntry
from mod_updater.models.state import Applicability, Mode


def resolve_applicability(entry: ManifestEntry, mode: Mode) -> Applicability:
    """Deprecated entries never apply; otherwise the mode's own flag decides."""
    if entry.deprecated:
        return Applicability.DEPRECATED
    enabled = entry.applies_to_server if mode is Mode.SERVER else entry.applies_to_client
    return Applicability.APPLICABLE if enabled else Applicability.NOT_APPLICABLE


def is_applicable(entry: ManifestEntry, mode: Mode) -> bool:
    return resolve_applicability(entry, mode).should_exist
