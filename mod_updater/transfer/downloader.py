"""
Handles the low-level downloading of files over HTTP, streaming each response
body to disk in fixed-size chunks.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp
from rich.progress import TaskID

from mod_updater.cli.progress_manager import ProgressManager
from mod_updater.exceptions import DownloadError

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(
    connect_timeout: float = 15.0, read_timeout: float = 90.0
) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    This function ensures that only one connection pool is created for the
    lifetime of the application run. Timeouts apply to the session created by
    the first call.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=4,
            ttl_dns_cache=600,  # 10 minutes
            keepalive_timeout=30,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(
            total=None, sock_connect=connect_timeout, sock_read=read_timeout
        )
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug(
            f"Created download pool (connect={connect_timeout}s, read={read_timeout}s)"
        )

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


class Downloader:
    """A low-level file downloader. Each call makes exactly one attempt."""

    def __init__(
        self,
        chunk_size: int = 131072,
        connect_timeout: float = 15.0,
        read_timeout: float = 90.0,
    ):
        self.chunk_size = chunk_size
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    async def download_file(
        self,
        url: str,
        destination_path: str | os.PathLike,
        progress_manager: ProgressManager | None = None,
        task_id: TaskID | None = None,
    ) -> int:
        """
        Streams a URL to a local file, updating a Rich Progress task if given.

        Returns:
            The number of bytes written.

        Raises:
            DownloadError: On any network, HTTP status or local I/O failure.
        """
        try:
            session = await get_connection_pool(self.connect_timeout, self.read_timeout)
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()

                if progress_manager and task_id is not None:
                    total = response.content_length
                    progress_manager.update_task_total(task_id, total=total)

                bytes_downloaded = 0
                async with aiofiles.open(destination_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)

                        if progress_manager and task_id is not None:
                            progress_manager.update_task_progress(
                                task_id, completed=bytes_downloaded
                            )
        except aiohttp.ClientResponseError as e:
            raise DownloadError(f"HTTP {e.status} for {url}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadError(f"Network error for {url}: {e or type(e).__name__}") from e
        except OSError as e:
            raise DownloadError(
                f"Could not write '{os.path.basename(destination_path)}': {e}"
            ) from e

        log.debug(
            f"Downloaded {bytes_downloaded} bytes to "
            f"'{os.path.basename(destination_path)}'"
        )
        return bytes_downloaded
