"""
Utilities for handling file paths and manifest locations.
"""

import re
from pathlib import Path

_REMOTE_LOCATION = re.compile(r"^https?://", re.IGNORECASE)


def is_remote_location(location: str) -> bool:
    """True for http(s) URLs, False for local paths and file:// URLs."""
    return bool(_REMOTE_LOCATION.match(location))


def local_path_from_location(location: str) -> Path:
    """Strips an optional file:// prefix from a local manifest location."""
    if location.lower().startswith("file://"):
        location = location[len("file://") :]
    return Path(location).expanduser()


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def display_path(path: Path, root: Path) -> str:
    """Renders a path relative to the managed root when possible."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
