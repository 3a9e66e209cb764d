"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class ModUpdaterError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(ModUpdaterError):
    """Raised for issues related to configuration loading or validation."""


class ManifestFetchError(ModUpdaterError):
    """Raised when the manifest cannot be retrieved from its location."""


class ManifestParseError(ModUpdaterError):
    """Raised when the manifest is not a valid list of entries."""


class TargetCollisionError(ModUpdaterError):
    """Raised when two manifest entries resolve to the same target path."""

    def __init__(self, collisions: dict[str, list[str]]):
        self.collisions = collisions
        details = "; ".join(
            f"{path} <- {', '.join(names)}" for path, names in collisions.items()
        )
        super().__init__(f"Manifest entries share a target path: {details}")


class InternalConsistencyError(ModUpdaterError):
    """Raised on a state the reconciliation engine should never reach."""


class EntryError(ModUpdaterError):
    """Base class for failures confined to a single manifest entry."""


class DirectoryCreationError(EntryError):
    """Raised when the target directory of an entry cannot be created."""


class DownloadError(EntryError):
    """Raised when a file cannot be downloaded."""


class VerificationError(EntryError):
    """Raised when a downloaded file does not match its expected digest."""


class PromotionError(EntryError):
    """Raised when a verified download cannot be moved onto its target path."""


class DeletionError(EntryError):
    """Raised when an obsolete file cannot be removed."""
