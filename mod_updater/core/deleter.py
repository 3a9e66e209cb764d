"""
Removes files that the manifest no longer wants on disk.
"""

import logging
from pathlib import Path

from mod_updater.exceptions import DeletionError
from mod_updater.models.outcome import EntryOutcome
from mod_updater.models.state import FailureKind, OutcomeStatus

log = logging.getLogger(__name__)


class Deleter:
    """Idempotent file removal with per-entry failure reporting."""

    def remove(self, path: Path, name: str | None = None) -> EntryOutcome:
        """
        Deletes ``path``. A path that is already gone counts as removed.

        Args:
            path: The target path to delete.
            name: Entry label used in the outcome; defaults to the file name.
        """
        name = name or path.name
        try:
            existed = self._unlink(path)
        except DeletionError as e:
            return EntryOutcome(
                name, path, OutcomeStatus.FAILED, failure=FailureKind.DELETE, detail=str(e)
            )
        detail = "" if existed else "already absent"
        return EntryOutcome(name, path, OutcomeStatus.REMOVED, detail=detail)

    @staticmethod
    def _unlink(path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise DeletionError(f"Could not delete '{path}': {e}") from e
        log.debug(f"Deleted '{path}'")
        return True
