"""Pyramid level selection by display scale.

Resolution sets of tile pyramids usually span several orders of magnitude,
so besides the linear distance a log10 distance is available. It is the
better choice for power-of-two ladders such as Web Mercator.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from shared.constants import (
    ZoomResolutionBias,
    default_zoom_resolution_bias,
    parse_zoom_resolution_bias,
)
from shared.errors import ConfigurationError, InternalInvariantError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from domain.models import PyramidSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Scale of one pyramid level."""

    id: str
    units_per_pixel: float

    def __post_init__(self) -> None:
        upp = self.units_per_pixel
        if isinstance(upp, bool) or not isinstance(upp, (int, float)):
            msg = f'Resolution {self.id!r}: units_per_pixel must be a number, got {upp!r}'
            raise ConfigurationError(msg)
        if not math.isfinite(upp) or upp <= 0:
            msg = f'Resolution {self.id!r}: units_per_pixel must be positive, got {upp!r}'
            raise ConfigurationError(msg)


def _as_resolution(level_id: str, value: Resolution | float) -> Resolution:
    if isinstance(value, Resolution):
        return value
    return Resolution(id=level_id, units_per_pixel=value)


def _ordered(resolutions: Mapping[str, Resolution | float]) -> list[tuple[str, float]]:
    """(level id, units per pixel) pairs, coarsest first; stable for equal values."""
    items = [
        (level_id, _as_resolution(level_id, value).units_per_pixel)
        for level_id, value in resolutions.items()
    ]
    return sorted(items, key=lambda item: item[1], reverse=True)


def _nearest(
    ordered: list[tuple[str, float]],
    units_per_pixel: float,
    distance: Callable[[float, float], float],
) -> str:
    result: str | None = None
    result_distance = math.inf
    for level_id, level_upp in ordered:
        d = distance(level_upp, units_per_pixel)
        # Strict comparison: of two equidistant levels the coarser one wins
        if d < result_distance:
            result = level_id
            result_distance = d
    if result is None:
        msg = 'Unexpected error when calculating nearest level'
        raise InternalInvariantError(msg)
    return result


def _linear_distance(a: float, b: float) -> float:
    return abs(a - b)


def _log_distance(a: float, b: float) -> float:
    return abs(math.log10(a) - math.log10(b))


def get_nearest_level(
    resolutions: Mapping[str, Resolution | float],
    units_per_pixel: float,
    bias: ZoomResolutionBias | str | None = None,
) -> str:
    """Pick the pyramid level whose resolution best matches a display scale.

    Args:
        resolutions: Level id -> Resolution (or plain units per pixel).
        units_per_pixel: Requested scale, finite and positive.
        bias: Selection rule. Defaults to MIDWAY_RESOLUTION.

    Returns:
        One of the keys of ``resolutions``.

    Raises:
        ConfigurationError: ``resolutions`` is empty or holds an invalid value.
        ValueError: ``units_per_pixel`` is not a finite positive number.
        InternalInvariantError: No candidate was selected.
    """
    if len(resolutions) == 0:
        msg = 'No tile resolutions'
        raise ConfigurationError(msg)
    if not math.isfinite(units_per_pixel) or units_per_pixel <= 0:
        msg = f'units_per_pixel must be a finite positive number, got {units_per_pixel!r}'
        raise ValueError(msg)

    bias = default_zoom_resolution_bias() if bias is None else parse_zoom_resolution_bias(bias)
    ordered = _ordered(resolutions)
    coarsest_id, coarsest_upp = ordered[0]
    finest_id, finest_upp = ordered[-1]

    # Finer than the finest level
    if finest_upp > units_per_pixel:
        return finest_id
    # Coarser than the coarsest level
    if coarsest_upp < units_per_pixel:
        return coarsest_id

    if bias is ZoomResolutionBias.HIGH_RESOLUTION:
        for level_id, level_upp in ordered:
            if level_upp < units_per_pixel:
                return level_id
        # Only reachable when the request equals the finest resolution
        return _nearest(ordered, units_per_pixel, _linear_distance)
    if bias is ZoomResolutionBias.MIDWAY_LOG_RESOLUTION:
        return _nearest(ordered, units_per_pixel, _log_distance)
    return _nearest(ordered, units_per_pixel, _linear_distance)


class LevelResolver:
    """Level selection for one pyramid with its own bias policy.

    Usage:
        resolver = LevelResolver({'0': 156543.03, '1': 78271.52})
        level = resolver.nearest_level(100000.0)
    """

    def __init__(
        self,
        resolutions: Mapping[str, Resolution | float],
        bias: ZoomResolutionBias | str | None = None,
    ) -> None:
        if len(resolutions) == 0:
            msg = 'No tile resolutions'
            raise ConfigurationError(msg)
        self._resolutions: Mapping[str, Resolution] = MappingProxyType(
            {level_id: _as_resolution(level_id, value) for level_id, value in resolutions.items()}
        )
        self._bias = default_zoom_resolution_bias() if bias is None else parse_zoom_resolution_bias(bias)
        logger.debug(
            'LevelResolver with %d levels, bias=%s', len(self._resolutions), self._bias.value
        )

    @classmethod
    def from_settings(cls, settings: PyramidSettings) -> LevelResolver:
        return cls(settings.resolutions, bias=settings.bias)

    @property
    def bias(self) -> ZoomResolutionBias:
        return self._bias

    @property
    def resolutions(self) -> Mapping[str, Resolution]:
        return self._resolutions

    @property
    def levels(self) -> list[str]:
        """Level ids, coarsest first."""
        return [level_id for level_id, _ in _ordered(self._resolutions)]

    def resolution(self, level_id: str) -> Resolution:
        return self._resolutions[level_id]

    def nearest_level(self, units_per_pixel: float) -> str:
        return get_nearest_level(self._resolutions, units_per_pixel, self._bias)

    def with_bias(self, bias: ZoomResolutionBias | str) -> LevelResolver:
        """Same pyramid, different bias."""
        return LevelResolver(self._resolutions, bias=bias)

    def __len__(self) -> int:
        return len(self._resolutions)

    def __repr__(self) -> str:
        return f'LevelResolver(levels={len(self._resolutions)}, bias={self._bias.value})'
