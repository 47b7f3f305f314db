"""In-memory tile cache with LRU eviction."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import TYPE_CHECKING

from tiles.base import TileCacheBase, TileInfo, TileKey

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class MemoryCache(TileCacheBase):
    """Process-local tile cache.

    When max_entries is set it is enforced on every insert by evicting the
    least recently used tile; ``find`` counts as a use.
    """

    def __init__(
        self,
        max_age_seconds: float | None = None,
        max_entries: int | None = None,
    ) -> None:
        super().__init__(max_age_seconds=max_age_seconds, max_entries=max_entries)
        # key -> (payload, stored at)
        self._tiles: OrderedDict[TileKey, tuple[bytes, float]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def insert(self, key: TileKey, data: bytes) -> None:
        with self._lock:
            self._tiles.pop(key, None)
            self._tiles[key] = (bytes(data), time.time())
            if self.max_entries is not None:
                while len(self._tiles) > self.max_entries:
                    evicted, _ = self._tiles.popitem(last=False)
                    logger.debug('Evicted tile %s', evicted)

    def find(self, key: TileKey) -> bytes | None:
        with self._lock:
            entry = self._tiles.get(key)
            if entry is None:
                self._misses += 1
                return None
            data, stored_at = entry
            if self.is_expired(stored_at, time.time()):
                del self._tiles[key]
                self._misses += 1
                return None
            self._tiles.move_to_end(key)
            self._hits += 1
            return data

    def remove(self, key: TileKey) -> None:
        with self._lock:
            self._tiles.pop(key, None)

    def get_info(self, key: TileKey) -> TileInfo | None:
        with self._lock:
            entry = self._tiles.get(key)
        if entry is None:
            return None
        data, stored_at = entry
        if self.is_expired(stored_at, time.time()):
            return None
        return TileInfo(key=key, size_bytes=len(data), modified_at=stored_at)

    def iter_info(self) -> Iterator[TileInfo]:
        with self._lock:
            snapshot = list(self._tiles.items())
        for key, (data, stored_at) in snapshot:
            yield TileInfo(key=key, size_bytes=len(data), modified_at=stored_at)

    def cleanup_lru(self, max_entries: int | None = None) -> int:
        max_entries = self._entry_limit(max_entries)
        if max_entries is None:
            return 0
        removed = 0
        with self._lock:
            while len(self._tiles) > max_entries:
                self._tiles.popitem(last=False)
                removed += 1
        if removed:
            logger.info('LRU cleanup: removed %d tiles (limit: %d)', removed, max_entries)
        return removed

    def clear(self) -> int:
        with self._lock:
            count = len(self._tiles)
            self._tiles.clear()
        logger.info('Cleared memory tile cache: %d tiles deleted', count)
        return count

    @property
    def stats(self) -> dict:
        """Hit/miss counters."""
        with self._lock:
            return {'hits': self._hits, 'misses': self._misses, 'size': len(self._tiles)}

    def __len__(self) -> int:
        return len(self._tiles)
