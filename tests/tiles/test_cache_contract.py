"""Insert/find/remove contract shared by every cache backend."""

from __future__ import annotations

import pytest

from domain.models import CacheSettings
from tiles.base import TileCacheBase, TileKey
from tiles.cache import FileCache
from tiles.factory import create_cache
from tiles.memory import MemoryCache


@pytest.fixture(params=['file', 'memory'])
def cache(request, tmp_path) -> TileCacheBase:
    settings = CacheSettings(backend=request.param, directory=str(tmp_path / 'tiles'), file_suffix='png')
    with create_cache(settings) as backend:
        yield backend


class TestCacheContract:
    def test_round_trip_is_byte_exact(self, cache):
        payload = bytes(range(256)) + b'\x00\xff' * 100
        key = TileKey('7', 41, 63)
        cache.insert(key, payload)
        assert cache.find(key) == payload

    def test_miss_is_none(self, cache):
        assert cache.find(TileKey('7', 0, 0)) is None
        assert not cache.exists(TileKey('7', 0, 0))

    def test_removed_is_none(self, cache):
        key = TileKey('7', 1, 1)
        cache.insert(key, b'x')
        cache.remove(key)
        assert cache.find(key) is None

    def test_remove_is_idempotent(self, cache):
        key = TileKey('7', 2, 2)
        cache.insert(key, b'x')
        cache.remove(key)
        cache.remove(key)
        cache.remove(TileKey('never', 0, 0))
        assert cache.find(key) is None

    def test_overwrite_last_write_wins(self, cache):
        key = TileKey('7', 3, 3)
        cache.insert(key, b'first')
        cache.insert(key, b'second')
        assert cache.find(key) == b'second'

    def test_keys_do_not_collide(self, cache):
        keys = [TileKey('1', 2, 3), TileKey('1', 3, 2), TileKey('2', 2, 3), TileKey('12', 3, 0)]
        for i, key in enumerate(keys):
            cache.insert(key, bytes([i]))
        for i, key in enumerate(keys):
            assert cache.find(key) == bytes([i])

    def test_clear(self, cache):
        cache.insert(TileKey('1', 0, 0), b'a')
        cache.insert(TileKey('2', 0, 0), b'b')
        assert cache.clear() == 2
        assert cache.get_stats().total_tiles == 0


class TestCreateCache:
    def test_file_backend(self, tmp_path):
        settings = CacheSettings(directory=str(tmp_path / 'c'), file_suffix='jpg', max_entries=10)
        cache = create_cache(settings)
        assert isinstance(cache, FileCache)
        assert cache.directory == tmp_path / 'c'
        assert cache.file_suffix == 'jpg'
        assert cache.max_entries == 10

    def test_memory_backend(self):
        cache = create_cache(CacheSettings(backend='memory', max_age_seconds=5))
        assert isinstance(cache, MemoryCache)
        assert cache.max_age_seconds == 5
