"""
Compares a manifest entry with what is on disk and classifies the difference.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from mod_updater.models.entry import ManifestEntry
from mod_updater.models.state import Applicability, Classification, Mode
from mod_updater.transfer.integrity import ContentHasher

from .applicability import resolve_applicability

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observation:
    """Filesystem facts gathered for one entry."""

    target_path: Path
    applicability: Applicability
    exists: bool
    hash_matches: bool | None


def classify_state(
    applicability: Applicability, exists: bool, hash_matches: bool | None
) -> Classification:
    """
    Applies the reconciliation decision table; the first matching row wins.

    | applicable | exists | hash matches | result           |
    |------------|--------|--------------|------------------|
    | no         | yes    | -            | obsolete-present |
    | no         | no     | -            | satisfied        |
    | yes        | no     | -            | missing          |
    | yes        | yes    | yes          | satisfied        |
    | yes        | yes    | no           | stale            |
    """
    if not applicability.should_exist:
        return Classification.OBSOLETE_PRESENT if exists else Classification.SATISFIED
    if not exists:
        return Classification.MISSING
    return Classification.SATISFIED if hash_matches else Classification.STALE


def classify(
    entry: ManifestEntry, mode: Mode, exists: bool, hash_matches: bool | None
) -> Classification:
    return classify_state(resolve_applicability(entry, mode), exists, hash_matches)


def observe(entry: ManifestEntry, mode: Mode, root: Path) -> Observation:
    """
    Looks at the entry's target path. The digest is only computed for an
    applicable entry whose target exists.

    An existing target that cannot be read is reported as a hash mismatch so
    that it gets replaced. A target whose existence cannot be checked at all
    is reported as absent; fetching it then fails for this entry alone.
    """
    applicability = resolve_applicability(entry, mode)
    target = entry.target_path(root)
    try:
        exists = target.exists()
    except OSError as e:
        log.warning(f"Could not inspect '{target}', treating it as absent: {e}")
        exists = False

    hash_matches = None
    if exists and applicability.should_exist:
        try:
            hash_matches = ContentHasher.verify(target, entry.content_hash)
        except OSError as e:
            log.warning(f"Could not read '{target}', treating it as stale: {e}")
            hash_matches = False

    return Observation(target, applicability, exists, hash_matches)
