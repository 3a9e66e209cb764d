"""Tests for manifest parsing and its invalid-entry policy."""

from __future__ import annotations

import json
import logging

import pytest

from mod_updater.exceptions import ManifestParseError
from mod_updater.manifest.parser import parse_manifest
from tests.conftest import MOD_BYTES, md5

VALID = {
    "url": "https://cdn.example.com/sodium.jar",
    "name": "Sodium",
    "version": "0.5.8",
    "filename": "sodium.jar",
    "md5": md5(MOD_BYTES),
    "destination": "mods",
    "server": False,
    "client": True,
    "deprecated": False,
}
MISSING_HASH = {
    "url": "https://cdn.example.com/iris.jar",
    "name": "Iris",
    "filename": "iris.jar",
    "destination": "mods",
}


def test_parses_entries_in_order() -> None:
    second = {**VALID, "name": "Lithium", "filename": "lithium.jar"}

    entries = parse_manifest(json.dumps([VALID, second]).encode())

    assert [e.name for e in entries] == ["Sodium", "Lithium"]
    assert entries[0].applies_to_client is True
    assert entries[0].applies_to_server is False


def test_accepts_text_input() -> None:
    assert len(parse_manifest(json.dumps([VALID]))) == 1


def test_empty_manifest_is_valid() -> None:
    assert parse_manifest(b"[]") == []


def test_invalid_json_is_fatal() -> None:
    with pytest.raises(ManifestParseError, match="not valid JSON"):
        parse_manifest(b"{ not json")


@pytest.mark.parametrize("document", [b"{}", b'"mods"', b"42", b"null"])
def test_non_array_document_is_fatal(document: bytes) -> None:
    with pytest.raises(ManifestParseError, match="JSON array"):
        parse_manifest(document)


def test_non_array_document_is_fatal_even_when_lenient() -> None:
    with pytest.raises(ManifestParseError):
        parse_manifest(b'{"mods": []}', strict=False)


class TestInvalidEntryPolicy:
    def test_lenient_parse_skips_invalid_entry_with_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        document = json.dumps([MISSING_HASH, VALID]).encode()

        with caplog.at_level(logging.WARNING, logger="mod_updater"):
            entries = parse_manifest(document)

        assert [e.name for e in entries] == ["Sodium"]
        warnings = [r.getMessage() for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "Iris" in warnings[0]
        assert "md5" in warnings[0] or "content_hash" in warnings[0]

    def test_strict_parse_rejects_whole_manifest(self) -> None:
        document = json.dumps([VALID, MISSING_HASH]).encode()

        with pytest.raises(ManifestParseError, match="Iris"):
            parse_manifest(document, strict=True)

    def test_non_object_entries_are_skipped(self) -> None:
        entries = parse_manifest(json.dumps(["sodium.jar", VALID]).encode())

        assert len(entries) == 1

    def test_unsafe_destination_is_an_invalid_entry(self) -> None:
        escaping = {**VALID, "destination": "../../.ssh"}

        assert parse_manifest(json.dumps([escaping]).encode()) == []
        with pytest.raises(ManifestParseError):
            parse_manifest(json.dumps([escaping]).encode(), strict=True)
