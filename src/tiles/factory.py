from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tiles.cache import FileCache
from tiles.memory import MemoryCache

if TYPE_CHECKING:
    from domain.models import CacheSettings
    from tiles.base import TileCacheBase

logger = logging.getLogger(__name__)


def create_cache(settings: CacheSettings) -> TileCacheBase:
    """Build the cache backend selected by ``settings.backend``."""
    if settings.backend == 'memory':
        logger.info('Using in-memory tile cache')
        return MemoryCache(
            max_age_seconds=settings.max_age_seconds,
            max_entries=settings.max_entries,
        )
    return FileCache(
        settings.directory,
        settings.file_suffix,
        max_age_seconds=settings.max_age_seconds,
        max_entries=settings.max_entries,
    )
