"""
Downloads manifest entries into place without ever exposing a partial or
unverified file at the target path.
"""

import asyncio
import logging
import os
from pathlib import Path

from mod_updater.cli.progress_manager import ProgressManager
from mod_updater.exceptions import (
    DirectoryCreationError,
    DownloadError,
    EntryError,
    PromotionError,
    VerificationError,
)
from mod_updater.models.entry import ManifestEntry
from mod_updater.models.outcome import EntryOutcome
from mod_updater.models.state import FailureKind, OutcomeStatus
from mod_updater.transfer import ContentHasher, Downloader
from mod_updater.utils.path import create_dir

log = logging.getLogger(__name__)

_FAILURE_KINDS = {
    DirectoryCreationError: FailureKind.DIRECTORY,
    DownloadError: FailureKind.DOWNLOAD,
    VerificationError: FailureKind.VERIFICATION,
    PromotionError: FailureKind.PROMOTE,
}


class TransactionalWrite:
    """
    Owns a temporary file next to a target path.

    The target only changes through ``commit()``, which atomically renames the
    temporary file over it. Leaving the block by any route, including errors
    and task cancellation, removes whatever is left at the temporary path.

    Usage:
        async with TransactionalWrite(target, temp) as txn:
            await write_somehow(txn.temp_path)
            txn.commit()
    """

    def __init__(self, target_path: Path, temp_path: Path):
        self.target_path = target_path
        self.temp_path = temp_path
        self.committed = False

    async def __aenter__(self) -> "TransactionalWrite":
        return self

    def commit(self) -> None:
        """Promotes the temporary file to the target path, replacing it."""
        try:
            os.replace(self.temp_path, self.target_path)
        except OSError as e:
            raise PromotionError(
                f"Could not move '{self.temp_path.name}' to '{self.target_path.name}': {e}"
            ) from e
        self.committed = True

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        if not self.committed:
            log.debug(f"Discarding temporary file '{self.temp_path.name}'")
        try:
            self.temp_path.unlink(missing_ok=True)
        except OSError as e:
            log.warning(f"Could not remove temporary file '{self.temp_path}': {e}")
        return False


class FetchAndReplace:
    """Downloads, verifies and installs a single manifest entry."""

    def __init__(
        self,
        root: Path,
        downloader: Downloader,
        progress_manager: ProgressManager | None = None,
    ):
        self.root = root
        self.downloader = downloader
        self.progress_manager = progress_manager

    async def apply(self, entry: ManifestEntry) -> EntryOutcome:
        """
        Brings one entry's target path up to date.

        Every failure is confined to this entry and returned as a failed
        outcome; the previous target file (if any) is left untouched.
        """
        target = entry.target_path(self.root)
        try:
            size = await self._fetch(entry, target)
        except EntryError as e:
            return EntryOutcome(
                entry.name,
                target,
                OutcomeStatus.FAILED,
                failure=_FAILURE_KINDS[type(e)],
                detail=str(e),
            )
        return EntryOutcome(entry.name, target, OutcomeStatus.FETCHED, size=size)

    async def _fetch(self, entry: ManifestEntry, target: Path) -> int:
        try:
            create_dir(target.parent)
        except OSError as e:
            raise DirectoryCreationError(
                f"Could not create '{target.parent}': {e}"
            ) from e

        task_id = None
        if self.progress_manager:
            task_id = self.progress_manager.add_transfer_task(entry.name)

        try:
            async with TransactionalWrite(target, entry.temp_path(self.root)) as txn:
                size = await self.downloader.download_file(
                    entry.url, txn.temp_path, self.progress_manager, task_id
                )
                await self._verify(entry, txn.temp_path)
                txn.commit()
            return size
        finally:
            if self.progress_manager and task_id is not None:
                self.progress_manager.remove_task(task_id)

    async def _verify(self, entry: ManifestEntry, path: Path) -> None:
        try:
            matches = await asyncio.to_thread(
                ContentHasher.verify, path, entry.content_hash
            )
        except OSError as e:
            raise VerificationError(f"Could not read '{path.name}': {e}") from e
        if not matches:
            raise VerificationError(
                f"Digest of downloaded '{entry.filename}' does not match {entry.content_hash}"
            )
        log.debug(f"Verified '{path.name}'")
