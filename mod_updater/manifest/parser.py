"""
Parses a manifest document into validated entries.

A manifest is a JSON array of objects. Unknown fields are ignored. An object
missing a required field (url, filename, hash, destination) or carrying an
unsafe path is skipped with a warning, unless strict parsing is requested, in
which case the whole manifest is rejected.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from mod_updater.exceptions import ManifestParseError
from mod_updater.models.entry import ManifestEntry

log = logging.getLogger(__name__)


def _describe(raw: Any, index: int) -> str:
    if isinstance(raw, dict):
        label = raw.get("name") or raw.get("filename")
        if label:
            return f"#{index} ('{label}')"
    return f"#{index}"


def _summarize(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'entry'}: {err['msg']}"
        for err in error.errors()
    )


def parse_manifest(data: bytes | str, strict: bool = False) -> list[ManifestEntry]:
    """
    Converts raw manifest content into a list of ManifestEntry objects.

    Args:
        data: The manifest document.
        strict: Reject the whole manifest if any entry is invalid.

    Raises:
        ManifestParseError: If the document is not a JSON array, or if
        ``strict`` is set and an entry fails validation.
    """
    try:
        document = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(document, list):
        raise ManifestParseError(
            f"Manifest must be a JSON array of entries, got {type(document).__name__}."
        )

    entries = []
    for index, raw in enumerate(document):
        try:
            entries.append(ManifestEntry.model_validate(raw))
        except ValidationError as e:
            message = f"Invalid manifest entry {_describe(raw, index)}: {_summarize(e)}"
            if strict:
                raise ManifestParseError(message) from e
            log.warning(f"[yellow]Skipping {message}[/yellow]")

    log.debug(f"Parsed {len(entries)} of {len(document)} manifest entries.")
    return entries
