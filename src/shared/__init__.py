"""Shared constants and errors."""
from shared.constants import ZoomResolutionBias, default_zoom_resolution_bias
from shared.errors import (
    ConfigurationError,
    InternalInvariantError,
    StorageUnavailableError,
    TilePyramidError,
)

__all__ = [
    'ConfigurationError',
    'InternalInvariantError',
    'StorageUnavailableError',
    'TilePyramidError',
    'ZoomResolutionBias',
    'default_zoom_resolution_bias',
]
