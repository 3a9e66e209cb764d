"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .state import Mode

MIN_CHUNK_SIZE = 16384  # 16 KB
MAX_CHUNK_SIZE = 4194304  # 4 MB


class UpdaterConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Run Settings
    manifest_location: str = ""
    root: str = ""
    mode: Mode = Mode.CLIENT
    strict_manifest: bool = False
    dry_run: bool = False

    # Network Settings
    connect_timeout: float = 15.0
    read_timeout: float = 90.0
    chunk_size: int = 131072  # 128 KB

    # Logging
    log_dir: str = ""

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive.")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Keeps the download buffer within sane bounds."""
        if v < MIN_CHUNK_SIZE or v > MAX_CHUNK_SIZE:
            raise ValueError(
                f"Chunk size must be between {MIN_CHUNK_SIZE} and {MAX_CHUNK_SIZE}."
            )
        return v

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        if v and Path(v).expanduser().is_file():
            raise ValueError(f"Managed root '{v}' is a file, not a directory.")
        return v

    @property
    def root_path(self) -> Path:
        return Path(self.root).expanduser()

    @property
    def log_path(self) -> Path | None:
        return Path(self.log_dir).expanduser() if self.log_dir else None

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "dry_run"}
        return {key for key in cls.model_fields if key not in internal_fields}
