import logging
import os
from pathlib import Path

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from domain.models import AppSettings
from shared.constants import PROFILES_DIR, WEB_MERCATOR_LEVELS, WEB_MERCATOR_MAX_RESOLUTION
from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

PROFILES_DIR_ENV = 'TILE_PYRAMID_PROFILES_DIR'


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) TILE_PYRAMID_PROFILES_DIR, if set.
    2) <project_root>/configs/profiles, if it exists (run-from-repo setups).
    3) Otherwise ~/.config/tile-pyramid/profiles.
    """
    override = os.getenv(PROFILES_DIR_ENV)
    if override:
        return Path(override)

    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / PROFILES_DIR
    if local_profiles.exists():
        return local_profiles

    return Path.home() / '.config' / 'tile-pyramid' / 'profiles'


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Profile names without extension."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str) -> Path:
    """Path of a profile file by name."""
    return ensure_profiles_dir() / f'{name}.toml'


def web_mercator_resolutions(levels: int = WEB_MERCATOR_LEVELS) -> dict[str, float]:
    """Units per pixel of the standard Web Mercator ladder, level 0 coarsest."""
    return {str(z): WEB_MERCATOR_MAX_RESOLUTION / 2**z for z in range(levels)}


def load_profile(name_or_path: str | Path) -> AppSettings:
    """
    Load and validate a TOML profile.

    Accepts a profile name (without .toml) from the profiles directory
    or a path to a TOML file.

    Raises:
        FileNotFoundError: The profile does not exist.
        ConfigurationError: The file is not valid TOML or fails validation.
    """
    p = Path(name_or_path)
    path = p if p.suffix.lower() == '.toml' and p.exists() else profile_path(str(name_or_path))
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)

    text = path.read_text(encoding='utf-8')
    try:
        data = tomlkit.parse(text).unwrap()
        settings = AppSettings.model_validate(data)
    except TOMLKitError as exc:
        msg = f'Malformed profile {path}: {exc}'
        raise ConfigurationError(msg, exc) from exc
    except ValidationError as exc:
        msg = f'Invalid profile {path}: {exc}'
        raise ConfigurationError(msg, exc) from exc

    logger.info(
        'Profile %s loaded: %d levels, bias=%s, cache=%s',
        path,
        len(settings.pyramid.resolutions),
        settings.pyramid.bias.value,
        settings.cache.backend,
    )
    return settings


def save_profile(name: str, settings: AppSettings) -> Path:
    """Save a profile as TOML (no atomicity or backups)."""
    path = profile_path(name)
    data = settings.model_dump(mode='json', exclude_none=True)
    text = tomlkit.dumps(data)
    path.write_text(text, encoding='utf-8')
    return path


def delete_profile(name: str) -> None:
    """Delete a profile file if it exists."""
    path = profile_path(name)
    if path.exists():
        path.unlink()
