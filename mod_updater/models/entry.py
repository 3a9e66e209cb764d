"""
Pydantic model for a single manifest entry.
"""

from pathlib import Path, PurePosixPath
from typing import Any

from pathvalidate import ValidationError as PathValidationError
from pathvalidate import validate_filename
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

TEMP_SUFFIX = ".tmp"


class ManifestEntry(BaseModel):
    """One file managed by the updater, as described by the manifest."""

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    url: str = Field(..., min_length=1)
    name: str = ""
    version: str = ""
    filename: str
    content_hash: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("md5", "contentHash", "content_hash"),
    )
    destination_subpath: str = Field(
        ...,
        validation_alias=AliasChoices(
            "destination", "destinationSubpath", "destination_subpath"
        ),
    )
    applies_to_server: bool = Field(
        False,
        validation_alias=AliasChoices("server", "appliesToServer", "applies_to_server"),
    )
    applies_to_client: bool = Field(
        False,
        validation_alias=AliasChoices("client", "appliesToClient", "applies_to_client"),
    )
    deprecated: bool = False

    @model_validator(mode="before")
    @classmethod
    def default_name_to_filename(cls, data: Any) -> Any:
        """Entries without a display name are labelled by their file name."""
        if isinstance(data, dict) and not data.get("name") and data.get("filename"):
            data = {**data, "name": data["filename"]}
        return data

    @field_validator("filename")
    @classmethod
    def check_filename(cls, v: str) -> str:
        """Ensures the file name is a single, valid path component."""
        if v in ("", ".", ".."):
            raise ValueError(f"Invalid file name: '{v}'.")
        try:
            validate_filename(v, platform="universal")
        except PathValidationError as e:
            raise ValueError(f"Invalid file name '{v}': {e}") from e
        return v

    @field_validator("content_hash")
    @classmethod
    def normalize_hash(cls, v: str) -> str:
        return v.lower()

    @field_validator("destination_subpath")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        """Ensures the destination stays inside the managed root."""
        normalized = v.replace("\\", "/")
        if normalized.startswith("/") or (len(normalized) > 1 and normalized[1] == ":"):
            raise ValueError(f"Destination must be a relative path, got '{v}'.")
        if ".." in PurePosixPath(normalized).parts:
            raise ValueError(f"Destination cannot contain '..': '{v}'.")
        return normalized.strip("/")

    def target_path(self, root: Path) -> Path:
        """The location this entry occupies under the managed root."""
        return Path(root, *PurePosixPath(self.destination_subpath).parts, self.filename)

    def temp_path(self, root: Path) -> Path:
        """Download location next to the target, on the same volume."""
        target = self.target_path(root)
        return target.with_name(target.name + TEMP_SUFFIX)
