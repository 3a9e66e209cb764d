"""
Retrieves the raw manifest document from a URL or a local file.
"""

import asyncio
import logging

import aiofiles
import aiohttp

from mod_updater.exceptions import ManifestFetchError
from mod_updater.utils.path import is_remote_location, local_path_from_location

log = logging.getLogger(__name__)


class ManifestFetcher:
    """Fetches manifest bytes. A failure here is fatal to the run."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    async def fetch(self, location: str) -> bytes:
        """
        Returns the manifest content found at ``location``.

        http(s) URLs are requested once; anything else is read as a local
        path, with or without a file:// prefix.

        Raises:
            ManifestFetchError: If the manifest cannot be retrieved.
        """
        if not location:
            raise ManifestFetchError("No manifest location given.")
        if is_remote_location(location):
            return await self._fetch_remote(location)
        return await self._read_local(location)

    async def _fetch_remote(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        log.debug(f"Fetching manifest from {url}")
        try:
            async with (
                aiohttp.ClientSession(timeout=timeout) as session,
                session.get(url, allow_redirects=True) as response,
            ):
                response.raise_for_status()
                data = await response.read()
        except aiohttp.ClientResponseError as e:
            raise ManifestFetchError(
                f"Manifest server answered HTTP {e.status} for {url}"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ManifestFetchError(
                f"Could not reach manifest at {url}: {e or type(e).__name__}"
            ) from e

        log.debug(f"Fetched manifest ({len(data)} bytes).")
        return data

    async def _read_local(self, location: str) -> bytes:
        path = local_path_from_location(location)
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except OSError as e:
            raise ManifestFetchError(f"Could not read manifest '{path}': {e}") from e

        log.debug(f"Read manifest from '{path}' ({len(data)} bytes).")
        return data
