"""
Manifest Layer.

This package retrieves the manifest document and turns it into validated
`ManifestEntry` objects.
"""

from .fetcher import ManifestFetcher
from .parser import parse_manifest

__all__ = ["ManifestFetcher", "parse_manifest"]
