from enum import Enum

# Default root directory of the on-disk tile cache
TILE_CACHE_DIR = '.cache/tiles'

# Default file suffix (payload format) of cached tiles
TILE_FILE_SUFFIX = 'png'

# Suffix of in-flight writes; such files are never reported as tiles
TILE_TMP_SUFFIX = '.tmp'

# Maximum number of pending writes in the background cache writer
TILE_WRITE_QUEUE_SIZE = 1000

# Default storage backend of the tile cache ('file' or 'memory')
TILE_CACHE_BACKEND = 'file'

# Web Mercator: units (meters) per pixel at level 0 for 256 px tiles
WEB_MERCATOR_MAX_RESOLUTION = 156543.03392804097

# Number of levels in the default Web Mercator ladder (0..19)
WEB_MERCATOR_LEVELS = 20

PROFILES_DIR = 'configs/profiles'

DEFAULT_PROFILE = 'default'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LOG_FILE_NAME = 'tile_pyramid.log'


class ZoomResolutionBias(str, Enum):
    """Rule for picking a pyramid level when a scale falls between two levels."""

    HIGH_RESOLUTION = 'HIGH_RESOLUTION'  # Coarsest level still finer than requested
    MIDWAY_RESOLUTION = 'MIDWAY_RESOLUTION'  # Nearest by linear distance
    MIDWAY_LOG_RESOLUTION = 'MIDWAY_LOG_RESOLUTION'  # Nearest by log10 distance


ZOOM_RESOLUTION_BIAS_LABELS: dict[ZoomResolutionBias, str] = {
    ZoomResolutionBias.HIGH_RESOLUTION: 'High resolution',
    ZoomResolutionBias.MIDWAY_RESOLUTION: 'Midway (linear)',
    ZoomResolutionBias.MIDWAY_LOG_RESOLUTION: 'Midway (logarithmic)',
}


def default_zoom_resolution_bias() -> ZoomResolutionBias:
    return ZoomResolutionBias.MIDWAY_RESOLUTION


def parse_zoom_resolution_bias(value: ZoomResolutionBias | str) -> ZoomResolutionBias:
    """Returns the bias for an enum member, its value or a case-insensitive name."""
    if isinstance(value, ZoomResolutionBias):
        return value
    normalized = str(value).strip().upper().replace('-', '_')
    try:
        return ZoomResolutionBias(normalized)
    except ValueError:
        msg = f'Unknown zoom resolution bias: {value!r}'
        raise ValueError(msg) from None
