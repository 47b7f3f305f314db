"""Tests for MemoryCache."""

from __future__ import annotations

import time

import pytest

from shared.errors import ConfigurationError
from tiles.base import TileKey
from tiles.memory import MemoryCache


class TestMemoryCache:
    """Tests for MemoryCache class."""

    def test_insert_and_find(self):
        cache = MemoryCache()
        cache.insert(TileKey('4', 3, 2), b'payload')
        assert cache.find(TileKey('4', 3, 2)) == b'payload'
        assert len(cache) == 1

    def test_stores_a_copy(self):
        cache = MemoryCache()
        data = bytearray(b'abc')
        cache.insert(TileKey('1', 0, 0), data)
        data[0] = ord('z')
        assert cache.find(TileKey('1', 0, 0)) == b'abc'

    def test_evicts_least_recently_used(self):
        cache = MemoryCache(max_entries=2)
        a, b, c = TileKey('1', 0, 0), TileKey('1', 0, 1), TileKey('1', 0, 2)
        cache.insert(a, b'a')
        cache.insert(b, b'b')
        # Touch a so that b becomes the oldest
        assert cache.find(a) == b'a'
        cache.insert(c, b'c')

        assert cache.find(b) is None
        assert cache.find(a) == b'a'
        assert cache.find(c) == b'c'
        assert len(cache) == 2

    def test_overwrite_does_not_grow(self):
        cache = MemoryCache(max_entries=2)
        key = TileKey('1', 0, 0)
        cache.insert(key, b'one')
        cache.insert(key, b'two')
        assert len(cache) == 1
        assert cache.find(key) == b'two'

    def test_max_age(self):
        cache = MemoryCache(max_age_seconds=60)
        key = TileKey('1', 0, 0)
        cache.insert(key, b'data')
        assert cache.exists(key)

        # Age the entry
        cache._tiles[key] = (b'data', time.time() - 3600)
        assert not cache.exists(key)
        assert cache.find(key) is None
        assert len(cache) == 0

    def test_hit_miss_stats(self):
        cache = MemoryCache()
        key = TileKey('1', 0, 0)
        cache.find(key)
        cache.insert(key, b'x')
        cache.find(key)
        cache.find(key)
        assert cache.stats == {'hits': 2, 'misses': 1, 'size': 1}

    def test_cleanup_lru(self):
        cache = MemoryCache()
        keys = [TileKey('2', i, 0) for i in range(5)]
        for key in keys:
            cache.insert(key, b'x')
        assert cache.cleanup_lru(max_entries=3) == 2
        assert [info.key for info in cache.iter_info()] == keys[2:]

    @pytest.mark.parametrize('max_entries', [-1, -3])
    def test_cleanup_lru_negative_limit(self, max_entries):
        """Test that a negative limit is rejected and nothing is evicted."""
        cache = MemoryCache()
        cache.insert(TileKey('2', 0, 0), b'x')
        with pytest.raises(ConfigurationError):
            cache.cleanup_lru(max_entries)
        assert len(cache) == 1

    def test_cleanup_lru_zero_limit(self):
        cache = MemoryCache()
        cache.insert(TileKey('2', 0, 0), b'x')
        cache.insert(TileKey('2', 0, 1), b'y')
        assert cache.cleanup_lru(0) == 2
        assert len(cache) == 0

    def test_get_stats(self):
        cache = MemoryCache()
        cache.insert(TileKey('a', 0, 0), b'123')
        cache.insert(TileKey('b', 0, 0), b'45')
        stats = cache.get_stats()
        assert stats.total_tiles == 2
        assert stats.total_size_bytes == 5
        assert stats.tiles_by_level == {'a': 1, 'b': 1}

    @pytest.mark.parametrize('max_entries', [-1, -10])
    def test_invalid_max_entries(self, max_entries):
        with pytest.raises(ValueError):
            MemoryCache(max_entries=max_entries)
