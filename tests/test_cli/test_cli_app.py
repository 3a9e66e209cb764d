"""End-to-end tests for the Typer command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from mod_updater import __version__
from mod_updater.cli import app as cli_app
from mod_updater.exceptions import DownloadError
from mod_updater.transfer.downloader import Downloader
from tests.conftest import MOD_BYTES, md5

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_file = tmp_path / "config" / "config.ini"
    monkeypatch.setattr(cli_app, "CONFIG_FILE", config_file)
    return config_file


def _write_manifest(path: Path, entries: list[dict[str, Any]]) -> Path:
    path.write_text(json.dumps(entries), encoding="utf-8")
    return path


def _entry(**overrides: Any) -> dict[str, Any]:
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
    return raw


def test_version() -> None:
    result = runner.invoke(cli_app.app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


class TestSync:
    def test_removes_deprecated_file(self, tmp_path: Path, root: Path) -> None:
        target = root / "mods" / "sodium.jar"
        target.parent.mkdir()
        target.write_bytes(MOD_BYTES)
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry(deprecated=True)])

        result = runner.invoke(cli_app.app, ["sync", str(manifest), str(root)])

        assert result.exit_code == 0, result.output
        assert not target.exists()

    def test_satisfied_entry_leaves_file_alone(self, tmp_path: Path, root: Path) -> None:
        target = root / "mods" / "sodium.jar"
        target.parent.mkdir()
        target.write_bytes(MOD_BYTES)
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry()])

        result = runner.invoke(cli_app.app, ["sync", str(manifest), str(root)])

        assert result.exit_code == 0, result.output
        assert target.read_bytes() == MOD_BYTES

    def test_download_failure_still_exits_zero(
        self, tmp_path: Path, root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def _refuse(self: Downloader, url: str, *args: Any, **kwargs: Any) -> int:
            raise DownloadError(f"HTTP 503 for {url}")

        monkeypatch.setattr(Downloader, "download_file", _refuse)
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry()])

        result = runner.invoke(cli_app.app, ["sync", str(manifest), str(root)])

        assert result.exit_code == 0, result.output
        assert "Failed" in result.output
        assert not (root / "mods" / "sodium.jar").exists()
        assert not (root / "mods" / "sodium.jar.tmp").exists()

    def test_dry_run_touches_nothing(self, tmp_path: Path, root: Path) -> None:
        target = root / "mods" / "sodium.jar"
        target.parent.mkdir()
        target.write_bytes(MOD_BYTES)
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry(deprecated=True)])

        result = runner.invoke(
            cli_app.app, ["sync", str(manifest), str(root), "--dry-run"]
        )

        assert result.exit_code == 0, result.output
        assert target.exists()
        assert "Dry Run" in result.output

    def test_verbose_run_lists_entries(
        self, tmp_path: Path, root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: dict[str, Any] = {}
        original_init = cli_app.Reconciler.__init__

        def _spy(self: Any, *args: Any, **kwargs: Any) -> None:
            seen.update(kwargs)
            original_init(self, *args, **kwargs)

        monkeypatch.setattr(cli_app.Reconciler, "__init__", _spy)
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry(deprecated=True)])

        result = runner.invoke(cli_app.app, ["-v", "sync", str(manifest), str(root)])

        assert result.exit_code == 0, result.output
        assert seen["report_entries"] is True

    def test_missing_manifest_exits_one(self, tmp_path: Path, root: Path) -> None:
        result = runner.invoke(
            cli_app.app, ["sync", str(tmp_path / "absent.json"), str(root)]
        )

        assert result.exit_code == 1

    def test_invalid_json_exits_one(self, tmp_path: Path, root: Path) -> None:
        manifest = tmp_path / "manifest.json"
        manifest.write_text("{ nope", encoding="utf-8")

        result = runner.invoke(cli_app.app, ["sync", str(manifest), str(root)])

        assert result.exit_code == 1
        assert "ManifestParseError" in result.output

    def test_strict_rejects_invalid_entry(self, tmp_path: Path, root: Path) -> None:
        broken = _entry(name="Iris", filename="iris.jar")
        del broken["md5"]
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry(), broken])

        result = runner.invoke(
            cli_app.app, ["sync", str(manifest), str(root), "--strict"]
        )

        assert result.exit_code == 1

    def test_colliding_targets_exit_one(self, tmp_path: Path, root: Path) -> None:
        manifest = _write_manifest(
            tmp_path / "manifest.json",
            [_entry(), _entry(name="Sodium (copy)", filename="Sodium.jar")],
        )

        result = runner.invoke(cli_app.app, ["sync", str(manifest), str(root)])

        assert result.exit_code == 1
        assert "TargetCollisionError" in result.output

    def test_missing_arguments_is_usage_error(self) -> None:
        result = runner.invoke(cli_app.app, ["sync"])

        assert result.exit_code == 2

    def test_uses_configured_locations(
        self, tmp_path: Path, root: Path, isolated_config: Path
    ) -> None:
        target = root / "mods" / "sodium.jar"
        target.parent.mkdir()
        target.write_bytes(MOD_BYTES)
        manifest = _write_manifest(tmp_path / "manifest.json", [_entry(deprecated=True)])
        runner.invoke(
            cli_app.app,
            ["init", "--manifest", str(manifest), "--root", str(root), "--force"],
        )

        result = runner.invoke(cli_app.app, ["sync"])

        assert result.exit_code == 0, result.output
        assert not target.exists()


def test_plan_reports_without_changing_files(tmp_path: Path, root: Path) -> None:
    stale = root / "mods" / "sodium.jar"
    stale.parent.mkdir()
    stale.write_bytes(b"old build")
    manifest = _write_manifest(tmp_path / "manifest.json", [_entry()])

    result = runner.invoke(cli_app.app, ["plan", str(manifest), str(root)])

    assert result.exit_code == 0, result.output
    assert "stale" in result.output
    assert stale.read_bytes() == b"old build"


def test_validate_lists_entries_and_counts_skipped(tmp_path: Path) -> None:
    broken = _entry(name="Iris", filename="iris.jar")
    del broken["md5"]
    manifest = _write_manifest(tmp_path / "manifest.json", [_entry(), broken])

    result = runner.invoke(cli_app.app, ["validate", str(manifest)])

    assert result.exit_code == 0, result.output
    assert "Sodium" in result.output
    assert "1 invalid" in result.output


def test_init_writes_config(tmp_path: Path, isolated_config: Path) -> None:
    result = runner.invoke(
        cli_app.app,
        ["init", "--manifest", "https://packs.example.com/manifest.json", "--server"],
    )

    assert result.exit_code == 0, result.output
    text = isolated_config.read_text(encoding="utf-8")
    assert "manifest_location = https://packs.example.com/manifest.json" in text
    assert "mode = server" in text


def test_init_refuses_to_overwrite_without_confirmation(isolated_config: Path) -> None:
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text("[DEFAULT]\nmode = server\n", encoding="utf-8")

    result = runner.invoke(cli_app.app, ["init"], input="n\n")

    assert result.exit_code == 1
    assert isolated_config.read_text(encoding="utf-8") == "[DEFAULT]\nmode = server\n"
