import math
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from shared.constants import (
    TILE_CACHE_BACKEND,
    TILE_CACHE_DIR,
    TILE_FILE_SUFFIX,
    ZoomResolutionBias,
    default_zoom_resolution_bias,
    parse_zoom_resolution_bias,
)


class PyramidSettings(BaseModel):
    """Resolution ladder of one tile pyramid and its level selection rule."""

    model_config = {'extra': 'ignore'}

    # Plain keys before the resolutions table when saved as TOML
    bias: ZoomResolutionBias = Field(default_factory=default_zoom_resolution_bias)
    # Level id -> units (e.g. meters) per pixel
    resolutions: dict[str, float]

    @field_validator('resolutions')
    @classmethod
    def validate_resolutions(cls, v: dict[str, float]) -> dict[str, float]:
        if not v:
            msg = 'No tile resolutions'
            raise ValueError(msg)
        for level_id, upp in v.items():
            if not math.isfinite(upp) or upp <= 0:
                msg = f'Level {level_id!r}: units per pixel must be positive, got {upp}'
                raise ValueError(msg)
        return v

    @field_validator('bias', mode='before')
    @classmethod
    def validate_bias(cls, v: ZoomResolutionBias | str) -> ZoomResolutionBias:
        return parse_zoom_resolution_bias(v)


class CacheSettings(BaseModel):
    """Tile cache backend and its optional bounds."""

    model_config = {'extra': 'ignore'}

    backend: Literal['file', 'memory'] = TILE_CACHE_BACKEND
    directory: str = TILE_CACHE_DIR
    file_suffix: str = TILE_FILE_SUFFIX
    # Unbounded unless set
    max_age_seconds: float | None = None
    max_entries: int | None = None

    @field_validator('file_suffix')
    @classmethod
    def validate_file_suffix(cls, v: str) -> str:
        v = v.strip().lstrip('.')
        if not v:
            msg = 'file_suffix must not be empty'
            raise ValueError(msg)
        if {'/', '\\'} & set(v):
            msg = f'file_suffix must not contain path separators, got {v!r}'
            raise ValueError(msg)
        return v

    @field_validator('max_age_seconds', 'max_entries')
    @classmethod
    def validate_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            msg = 'Value must be positive'
            raise ValueError(msg)
        return v


class AppSettings(BaseModel):
    """Contents of one profile."""

    model_config = {'extra': 'ignore'}

    pyramid: PyramidSettings
    cache: CacheSettings = Field(default_factory=CacheSettings)
