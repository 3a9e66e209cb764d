"""Shared test fixtures for mod-updater."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

import pytest

from mod_updater.exceptions import DownloadError
from mod_updater.models.config import UpdaterConfig
from mod_updater.models.entry import ManifestEntry
from mod_updater.models.state import Mode

MOD_BYTES = b"PK\x03\x04 sodium fabric build 0.5.8"
OTHER_BYTES = b"PK\x03\x04 something else entirely"


def md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()  # noqa: S324


def make_entry(**overrides: Any) -> ManifestEntry:
    """Build a manifest entry from its JSON field names."""
    raw: dict[str, Any] = {
        "url": "https://cdn.example.com/sodium.jar",
        "name": "Sodium",
        "version": "0.5.8",
        "filename": "sodium.jar",
        "md5": md5(MOD_BYTES),
        "destination": "mods",
        "server": True,
        "client": True,
        "deprecated": False,
    }
    raw.update(overrides)
    return ManifestEntry.model_validate(raw)


def make_config(root: Path, mode: Mode = Mode.CLIENT, **overrides: Any) -> UpdaterConfig:
    return UpdaterConfig(
        manifest_location="manifest.json", root=str(root), mode=mode, **overrides
    )


class FakeDownloader:
    """Writes canned payloads instead of touching the network.

    URLs listed in ``failures`` write a few bytes and then raise, mimicking a
    connection that drops mid-transfer.
    """

    def __init__(
        self,
        payloads: dict[str, bytes] | None = None,
        failures: set[str] | None = None,
    ) -> None:
        self.payloads = payloads or {}
        self.failures = failures or set()
        self.calls: list[tuple[str, Path]] = []

    async def download_file(
        self,
        url: str,
        destination_path: Any,
        progress_manager: Any = None,
        task_id: Any = None,
    ) -> int:
        destination = Path(destination_path)
        self.calls.append((url, destination))
        if url in self.failures:
            destination.write_bytes(b"PK\x03")
            raise DownloadError(f"Connection reset while fetching {url}")
        data = self.payloads[url]
        destination.write_bytes(data)
        return len(data)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    managed = tmp_path / "minecraft"
    managed.mkdir()
    return managed


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader({"https://cdn.example.com/sodium.jar": MOD_BYTES})
