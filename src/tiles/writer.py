"""Background writer thread for non-blocking cache inserts.

This module provides CacheWriter class that performs tile inserts
in a background thread so request dispatch never waits on disk I/O.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared.constants import TILE_WRITE_QUEUE_SIZE

if TYPE_CHECKING:
    from tiles.base import TileCacheBase, TileKey

logger = logging.getLogger(__name__)


@dataclass
class TileWriteRequest:
    """Request to write a tile to cache."""

    key: TileKey
    data: bytes


class CacheWriter:
    """Background writer thread for a tile cache.

    Features:
    - Non-blocking put() method
    - Graceful shutdown with flush
    - Queue size monitoring

    Usage:
        cache = FileCache('.cache/tiles', 'png')
        writer = CacheWriter(cache)
        writer.start()

        # Non-blocking writes
        writer.put(TileKey('15', 200, 100), tile_bytes)

        # Shutdown
        writer.stop()  # Waits for queue to drain
    """

    POLL_TIMEOUT = 1.0  # Seconds between checks of the running flag

    def __init__(
        self,
        cache: TileCacheBase,
        max_queue_size: int | None = None,
    ) -> None:
        """Initialize cache writer.

        Args:
            cache: Cache to write to.
            max_queue_size: Maximum queue size. Defaults to TILE_WRITE_QUEUE_SIZE.
        """
        self.cache = cache
        self.max_queue_size = max_queue_size or TILE_WRITE_QUEUE_SIZE
        self._queue: queue.Queue[TileWriteRequest | None] = queue.Queue(
            maxsize=self.max_queue_size
        )
        self._thread: threading.Thread | None = None
        self._running = False
        self._stats_lock = threading.Lock()
        self._stats_written = 0
        self._stats_dropped = 0
        self._stats_failed = 0

    def start(self) -> None:
        """Start the background writer thread."""
        if self._running:
            return
        self._drop_stale_sentinels()
        self._running = True
        self._thread = threading.Thread(
            target=self._writer_loop, name='tile-cache-writer', daemon=True
        )
        self._thread.start()
        logger.info('CacheWriter started')

    def stop(self, timeout: float = 30.0) -> None:
        """Stop the writer thread after the queue is drained.

        Args:
            timeout: Maximum time to wait for queue to drain.
        """
        if not self._running:
            return
        self._running = False

        # Sentinel goes behind every queued request
        try:
            self._queue.put(None, timeout=timeout)
        except queue.Full:
            logger.warning('CacheWriter queue still full, stopping without sentinel')

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning('CacheWriter thread did not stop within timeout')

        logger.info(
            'CacheWriter stopped: %d tiles written, %d dropped, %d failed',
            self._stats_written,
            self._stats_dropped,
            self._stats_failed,
        )

    def put(self, key: TileKey, data: bytes, block: bool = False) -> bool:
        """Queue a tile for writing.

        Args:
            key: Tile identity.
            data: Tile payload.
            block: If True, wait up to a second for queue space.

        Returns:
            True if tile was queued, False if the writer is not running
            or the queue was full.
        """
        if not self._running:
            with self._stats_lock:
                self._stats_dropped += 1
            logger.warning('CacheWriter not running, dropping tile %s', key)
            return False
        request = TileWriteRequest(key=key, data=data)
        try:
            self._queue.put(request, block=block, timeout=1.0 if block else None)
        except queue.Full:
            with self._stats_lock:
                self._stats_dropped += 1
            logger.warning('Write queue full, dropping tile %s', key)
            return False
        return True

    def flush(self) -> None:
        """Block until every queued tile has been handled.

        Returns at once when the writer thread is not running.
        """
        if not self.is_running():
            return
        self._queue.join()

    def _drop_stale_sentinels(self) -> None:
        # A stop() racing the idle exit of the loop can leave its sentinel behind
        pending = []
        while True:
            try:
                request = self._queue.get_nowait()
            except queue.Empty:
                break
            self._queue.task_done()
            if request is not None:
                pending.append(request)
        for request in pending:
            self._queue.put_nowait(request)

    def queue_size(self) -> int:
        """Get current queue size."""
        return self._queue.qsize()

    def is_running(self) -> bool:
        """Check if writer thread is running."""
        return self._running and self._thread is not None and self._thread.is_alive()

    @property
    def stats(self) -> dict:
        """Get writer statistics."""
        with self._stats_lock:
            return {
                'written': self._stats_written,
                'dropped': self._stats_dropped,
                'failed': self._stats_failed,
                'queue_size': self.queue_size(),
                'running': self.is_running(),
            }

    def _writer_loop(self) -> None:
        """Background thread loop that processes write requests."""
        while True:
            try:
                request = self._queue.get(timeout=self.POLL_TIMEOUT)
            except queue.Empty:
                if not self._running:
                    break
                continue

            try:
                # None signals shutdown
                if request is None:
                    break
                self._write(request)
            finally:
                self._queue.task_done()

    def _write(self, request: TileWriteRequest) -> None:
        try:
            self.cache.insert(request.key, request.data)
        except Exception:
            with self._stats_lock:
                self._stats_failed += 1
            logger.exception('Error writing tile %s to cache', request.key)
            return
        with self._stats_lock:
            self._stats_written += 1

    def __enter__(self) -> CacheWriter:
        """Context manager entry - starts the writer."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - stops the writer."""
        self.stop()
