"""
Provides content digests for verifying downloaded and installed files.

Manifests identify file contents by MD5. MD5 is kept for compatibility with
existing manifests: it reliably detects stale or corrupted files, but it is
collision-prone and gives no protection against a deliberately crafted file.
"""

import hashlib
import logging
from pathlib import Path

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1048576  # 1 MB


class ContentHasher:
    """A collection of static methods for computing and checking file digests."""

    @staticmethod
    def digest(filepath: str | Path) -> str:
        """
        Computes the MD5 digest of a file, reading it in chunks.

        Args:
            filepath: Path to the file.

        Returns:
            The digest as a lowercase hex string.

        Raises:
            OSError: If the file cannot be read.
        """
        md5 = hashlib.md5()  # noqa: S324
        with open(filepath, "rb") as f:
            for chunk in iter(lambda: f.read(READ_CHUNK_SIZE), b""):
                md5.update(chunk)
        return md5.hexdigest()

    @staticmethod
    def verify(filepath: str | Path, expected_hash: str) -> bool:
        """
        Checks whether a file's digest equals the expected one.

        The comparison is exact; manifest hashes are lowercased when parsed.

        Raises:
            OSError: If the file cannot be read.
        """
        actual = ContentHasher.digest(filepath)
        if actual != expected_hash:
            log.debug(
                f"Digest mismatch for '{filepath}': expected {expected_hash}, got {actual}"
            )
            return False
        return True
