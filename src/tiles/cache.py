"""Filesystem-based tile cache.

This module provides FileCache class for storing and retrieving tile
payloads as plain files, one directory per pyramid level.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote, unquote

from shared.constants import TILE_CACHE_DIR, TILE_FILE_SUFFIX, TILE_TMP_SUFFIX
from shared.errors import ConfigurationError, StorageUnavailableError
from tiles.base import TileCacheBase, TileInfo, TileKey

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class FileCache(TileCacheBase):
    """Tile cache with one file per tile under a root directory.

    Layout: ``<root>/<level>/<col>/<row>.<suffix>``. Level ids are
    percent-quoted, so any id maps to a single directory name and the key
    can be rebuilt from the path. A file's existence is the entry's
    existence; there is no index.

    Writes go to a temporary file that is then renamed over the target, so a
    reader never sees a partial payload and concurrent writes to one key
    end with exactly one of them (last write wins).

    Usage:
        cache = FileCache('.cache/tiles', 'png')
        cache.insert(TileKey('14', 5230, 9012), tile_bytes)
        tile_data = cache.find(TileKey('14', 5230, 9012))
    """

    def __init__(
        self,
        directory: str | Path | None = None,
        file_suffix: str | None = None,
        max_age_seconds: float | None = None,
        max_entries: int | None = None,
    ) -> None:
        """Initialize file cache.

        Args:
            directory: Cache root, created if absent. Defaults to TILE_CACHE_DIR.
            file_suffix: Extension of tile files. Defaults to TILE_FILE_SUFFIX.
            max_age_seconds: Tiles older than this are treated as missing.
            max_entries: Default limit for cleanup_lru.

        Raises:
            StorageUnavailableError: The root cannot be created or written.
        """
        super().__init__(max_age_seconds=max_age_seconds, max_entries=max_entries)
        suffix = (file_suffix or TILE_FILE_SUFFIX).lstrip('.')
        separators = {'/', os.sep, os.altsep} - {None}
        if not suffix or f'.{suffix}' == TILE_TMP_SUFFIX or separators & set(suffix):
            msg = f'Invalid tile file suffix: {file_suffix!r}'
            raise ConfigurationError(msg)
        self.file_suffix = suffix
        self.directory = Path(directory or TILE_CACHE_DIR)
        self._ensure_root()
        logger.info('FileCache initialized at %s (*.%s)', self.directory, self.file_suffix)

    def _ensure_root(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f'Cannot create tile cache directory {self.directory}: {exc}'
            raise StorageUnavailableError(msg, exc) from exc
        if not self.directory.is_dir() or not os.access(self.directory, os.W_OK | os.X_OK):
            msg = f'Tile cache directory is not writable: {self.directory}'
            raise StorageUnavailableError(msg)

    def _level_dir(self, level: str) -> Path:
        name = quote(level, safe='')
        if name in ('.', '..'):
            name = name.replace('.', '%2E')
        return self.directory / name

    def file_path(self, key: TileKey) -> Path:
        """Path of the file holding ``key``."""
        return self._level_dir(key.level) / str(key.col) / f'{key.row}.{self.file_suffix}'

    def insert(self, key: TileKey, data: bytes) -> None:
        path = self.file_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f'{key.row}.', suffix=TILE_TMP_SUFFIX
        )
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        logger.debug('Stored tile %s (%d bytes)', key, len(data))

    def find(self, key: TileKey) -> bytes | None:
        path = self.file_path(key)
        try:
            if self.is_expired(path.stat().st_mtime, time.time()):
                logger.debug('Tile %s expired', key)
                return None
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def remove(self, key: TileKey) -> None:
        self.file_path(key).unlink(missing_ok=True)

    def get_info(self, key: TileKey) -> TileInfo | None:
        try:
            st = self.file_path(key).stat()
        except FileNotFoundError:
            return None
        if self.is_expired(st.st_mtime, time.time()):
            return None
        return TileInfo(key=key, size_bytes=st.st_size, modified_at=st.st_mtime)

    def iter_keys(self) -> Iterator[TileKey]:
        for info in self.iter_info():
            yield info.key

    def iter_info(self) -> Iterator[TileInfo]:
        for level_dir in self._iter_dirs(self.directory):
            yield from self._iter_level(level_dir)

    def _iter_level(self, level_dir: Path) -> Iterator[TileInfo]:
        level = unquote(level_dir.name)
        ending = f'.{self.file_suffix}'
        for col_dir in self._iter_dirs(level_dir):
            try:
                col = int(col_dir.name)
            except ValueError:
                continue
            for tile_file in col_dir.iterdir():
                name = tile_file.name
                if not name.endswith(ending):
                    continue
                try:
                    row = int(name[: -len(ending)])
                    st = tile_file.stat()
                except (ValueError, FileNotFoundError):
                    continue
                yield TileInfo(
                    key=TileKey(level=level, row=row, col=col),
                    size_bytes=st.st_size,
                    modified_at=st.st_mtime,
                )

    @staticmethod
    def _iter_dirs(parent: Path) -> Iterator[Path]:
        if not parent.is_dir():
            return
        for child in sorted(parent.iterdir()):
            if child.is_dir():
                yield child

    def clear_level(self, level: str) -> int:
        """Delete all tiles for one pyramid level.

        Returns:
            Number of tiles deleted.
        """
        level_dir = self._level_dir(level)
        if not level_dir.exists():
            return 0
        count = sum(1 for _ in self._iter_level(level_dir))
        shutil.rmtree(level_dir)
        logger.info('Cleared level %s: %d tiles deleted', level, count)
        return count

    def clear(self) -> int:
        count = sum(1 for _ in self.iter_info())
        if self.directory.exists():
            try:
                shutil.rmtree(self.directory)
            except OSError as exc:
                msg = f'Cannot clear tile cache {self.directory}: {exc}'
                raise StorageUnavailableError(msg, exc) from exc
        self._ensure_root()
        logger.info('Cleared tile cache at %s: %d tiles deleted', self.directory, count)
        return count

    def __repr__(self) -> str:
        return f'FileCache({str(self.directory)!r}, {self.file_suffix!r})'
