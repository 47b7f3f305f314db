"""Domain layer - settings models and profiles."""
from domain.models import AppSettings, CacheSettings, PyramidSettings
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
    web_mercator_resolutions,
)

__all__ = [
    'AppSettings',
    'CacheSettings',
    'PyramidSettings',
    'delete_profile',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'save_profile',
    'web_mercator_resolutions',
]
