"""Tests for the ManifestEntry model."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from mod_updater.models.entry import ManifestEntry
from tests.conftest import make_entry


class TestFieldNames:
    def test_accepts_original_manifest_field_names(self) -> None:
        entry = make_entry()

        assert entry.url == "https://cdn.example.com/sodium.jar"
        assert entry.destination_subpath == "mods"
        assert entry.applies_to_server is True
        assert entry.applies_to_client is True
        assert entry.deprecated is False

    def test_accepts_descriptive_field_names(self) -> None:
        entry = ManifestEntry.model_validate(
            {
                "url": "https://cdn.example.com/shader.zip",
                "filename": "shader.zip",
                "contentHash": "ABCDEF0123456789ABCDEF0123456789",
                "destinationSubpath": "shaderpacks",
                "appliesToClient": True,
            }
        )

        assert entry.content_hash == "abcdef0123456789abcdef0123456789"
        assert entry.destination_subpath == "shaderpacks"
        assert entry.applies_to_client is True
        assert entry.applies_to_server is False

    def test_unknown_fields_are_ignored(self) -> None:
        entry = make_entry(homepage="https://example.com", sha1="deadbeef")

        assert not hasattr(entry, "homepage")

    def test_name_defaults_to_filename(self) -> None:
        entry = make_entry(name="")

        assert entry.name == "sodium.jar"


class TestRequiredFields:
    @pytest.mark.parametrize("field", ["url", "filename", "md5", "destination"])
    def test_missing_required_field_fails(self, field: str) -> None:
        raw = make_entry().model_dump()
        raw = {
            "url": raw["url"],
            "filename": raw["filename"],
            "md5": raw["content_hash"],
            "destination": raw["destination_subpath"],
        }
        del raw[field]

        with pytest.raises(ValidationError):
            ManifestEntry.model_validate(raw)

    def test_empty_url_fails(self) -> None:
        with pytest.raises(ValidationError):
            make_entry(url="")


class TestPathSafety:
    @pytest.mark.parametrize("filename", ["..", "mods/sodium.jar", "a\\b.jar", ""])
    def test_rejects_unsafe_filenames(self, filename: str) -> None:
        with pytest.raises(ValidationError):
            make_entry(filename=filename)

    @pytest.mark.parametrize("destination", ["../outside", "/etc", "mods/../../x", "C:/games"])
    def test_rejects_destinations_leaving_the_root(self, destination: str) -> None:
        with pytest.raises(ValidationError):
            make_entry(destination=destination)

    def test_normalizes_backslash_destinations(self) -> None:
        entry = make_entry(destination="config\\sodium\\")

        assert entry.destination_subpath == "config/sodium"


class TestPaths:
    def test_target_path_joins_root_destination_and_filename(self, tmp_path: Path) -> None:
        entry = make_entry(destination="resourcepacks/extra")

        assert entry.target_path(tmp_path) == tmp_path / "resourcepacks" / "extra" / "sodium.jar"

    def test_empty_destination_targets_the_root(self, tmp_path: Path) -> None:
        entry = make_entry(destination="")

        assert entry.target_path(tmp_path) == tmp_path / "sodium.jar"

    def test_temp_path_is_next_to_target(self, tmp_path: Path) -> None:
        entry = make_entry()

        assert entry.temp_path(tmp_path) == tmp_path / "mods" / "sodium.jar.tmp"

    def test_entries_are_immutable(self) -> None:
        entry = make_entry()

        with pytest.raises(ValidationError):
            entry.url = "https://elsewhere.example.com/"  # type: ignore[misc]
