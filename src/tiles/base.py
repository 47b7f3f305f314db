"""Tile cache contract shared by all storage backends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shared.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class TileKey:
    """Identity of one cached tile: pyramid level, row and column."""

    level: str
    row: int
    col: int

    def __post_init__(self) -> None:
        if not isinstance(self.level, str) or not self.level:
            msg = f'Tile level must be a non-empty string, got {self.level!r}'
            raise ValueError(msg)
        for name in ('row', 'col'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f'Tile {name} must be an integer, got {value!r}'
                raise TypeError(msg)

    def __str__(self) -> str:
        return f'{self.level}/{self.row}/{self.col}'


@dataclass
class TileInfo:
    """Information about a cached tile."""

    key: TileKey
    size_bytes: int
    modified_at: float


@dataclass
class CacheStats:
    """Statistics about a tile cache."""

    total_tiles: int = 0
    total_size_bytes: int = 0
    tiles_by_level: dict[str, int] = field(default_factory=dict)
    size_by_level: dict[str, int] = field(default_factory=dict)
    oldest_tile: float | None = None
    newest_tile: float | None = None

    def add(self, info: TileInfo) -> None:
        level = info.key.level
        self.total_tiles += 1
        self.total_size_bytes += info.size_bytes
        self.tiles_by_level[level] = self.tiles_by_level.get(level, 0) + 1
        self.size_by_level[level] = self.size_by_level.get(level, 0) + info.size_bytes
        if self.oldest_tile is None or info.modified_at < self.oldest_tile:
            self.oldest_tile = info.modified_at
        if self.newest_tile is None or info.modified_at > self.newest_tile:
            self.newest_tile = info.modified_at


class TileCacheBase(ABC):
    """Key/value store of raw tile payloads addressed by TileKey.

    A missing tile is a normal outcome: ``find`` returns None and ``remove``
    of an absent key does nothing.

    Optional bounds:
    - max_age_seconds: older entries are reported absent.
    - max_entries: ``cleanup_lru`` trims the cache to this many entries.
    """

    def __init__(
        self,
        max_age_seconds: float | None = None,
        max_entries: int | None = None,
    ) -> None:
        if max_entries is not None and max_entries < 0:
            msg = f'max_entries must not be negative, got {max_entries}'
            raise ConfigurationError(msg)
        if max_age_seconds is not None and max_age_seconds <= 0:
            msg = f'max_age_seconds must be positive, got {max_age_seconds}'
            raise ConfigurationError(msg)
        self.max_age_seconds = max_age_seconds
        self.max_entries = max_entries

    @abstractmethod
    def insert(self, key: TileKey, data: bytes) -> None:
        """Store or overwrite the payload for ``key``."""

    @abstractmethod
    def find(self, key: TileKey) -> bytes | None:
        """Return the payload for ``key``, or None if it is not cached."""

    @abstractmethod
    def remove(self, key: TileKey) -> None:
        """Delete ``key`` if present."""

    @abstractmethod
    def get_info(self, key: TileKey) -> TileInfo | None:
        """Metadata for ``key`` without reading the payload."""

    @abstractmethod
    def iter_info(self) -> Iterator[TileInfo]:
        """Metadata of every stored tile, expired ones included."""

    @abstractmethod
    def clear(self) -> int:
        """Delete every tile. Returns the number of tiles deleted."""

    def exists(self, key: TileKey) -> bool:
        return self.get_info(key) is not None

    def get_stats(self) -> CacheStats:
        stats = CacheStats()
        for info in self.iter_info():
            stats.add(info)
        return stats

    def is_expired(self, modified_at: float, now: float) -> bool:
        if self.max_age_seconds is None:
            return False
        return now - modified_at > self.max_age_seconds

    def _entry_limit(self, max_entries: int | None) -> int | None:
        if max_entries is None:
            max_entries = self.max_entries
        if max_entries is not None and max_entries < 0:
            msg = f'max_entries must not be negative, got {max_entries}'
            raise ConfigurationError(msg)
        return max_entries

    def cleanup_lru(self, max_entries: int | None = None) -> int:
        """Remove the oldest tiles until at most ``max_entries`` remain.

        Args:
            max_entries: Entry limit. Defaults to the cache's max_entries;
                nothing is removed when neither is set.

        Returns:
            Number of tiles removed.

        Raises:
            ConfigurationError: The limit is negative.
        """
        max_entries = self._entry_limit(max_entries)
        if max_entries is None:
            return 0

        tiles = sorted(self.iter_info(), key=lambda info: info.modified_at)
        excess = len(tiles) - max_entries
        if excess <= 0:
            return 0

        for info in tiles[:excess]:
            self.remove(info.key)
        logger.info('LRU cleanup: removed %d tiles (limit: %d)', excess, max_entries)
        return excess

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> TileCacheBase:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
