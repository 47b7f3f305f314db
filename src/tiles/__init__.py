"""Tile caching.

This module provides:
- TileCacheBase: the insert/find/remove contract shared by all backends
- FileCache: one file per tile under a root directory
- MemoryCache: process-local LRU cache
- CacheWriter: background thread for non-blocking inserts
- create_cache: backend selection from CacheSettings
"""

from tiles.base import CacheStats, TileCacheBase, TileInfo, TileKey
from tiles.cache import FileCache
from tiles.factory import create_cache
from tiles.memory import MemoryCache
from tiles.writer import CacheWriter, TileWriteRequest

__all__ = [
    'CacheStats',
    'CacheWriter',
    'FileCache',
    'MemoryCache',
    'TileCacheBase',
    'TileInfo',
    'TileKey',
    'TileWriteRequest',
    'create_cache',
]
