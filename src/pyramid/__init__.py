"""Pyramid level selection by display scale."""
from pyramid.resolution import LevelResolver, Resolution, get_nearest_level

__all__ = [
    'LevelResolver',
    'Resolution',
    'get_nearest_level',
]
