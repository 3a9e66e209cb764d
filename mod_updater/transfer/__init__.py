"""
Transfer Layer.

This package is responsible for moving file contents: streaming downloads
over HTTP and computing content digests for verification.
"""

from .downloader import Downloader
from .integrity import ContentHasher

__all__ = ["ContentHasher", "Downloader"]
