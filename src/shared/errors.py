"""Error taxonomy shared by the resolver and the tile caches.

A missing tile on lookup and removing an absent tile are not errors and
have no exception here.
"""

from __future__ import annotations


class TilePyramidError(Exception):
    """Base error."""

    def __init__(self, message: str, original_exception: Exception | None = None) -> None:
        super().__init__(message)
        self.original_exception = original_exception


class ConfigurationError(TilePyramidError, ValueError):
    """Raised when the pyramid or cache configuration is unusable.

    Retrying cannot succeed without correcting the configuration.
    """


class InternalInvariantError(TilePyramidError, RuntimeError):
    """Raised when level selection fails to produce a candidate."""


class StorageUnavailableError(TilePyramidError, OSError):
    """Raised when a cache cannot create or access its storage root."""
