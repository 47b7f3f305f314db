"""Tests for constants and errors modules."""

import pytest

from shared.constants import (
    ZOOM_RESOLUTION_BIAS_LABELS,
    ZoomResolutionBias,
    default_zoom_resolution_bias,
    parse_zoom_resolution_bias,
)
from shared.errors import (
    ConfigurationError,
    InternalInvariantError,
    StorageUnavailableError,
    TilePyramidError,
)


class TestZoomResolutionBias:
    """Tests for ZoomResolutionBias enum."""

    def test_members(self):
        assert {b.value for b in ZoomResolutionBias} == {
            'HIGH_RESOLUTION',
            'MIDWAY_RESOLUTION',
            'MIDWAY_LOG_RESOLUTION',
        }

    def test_all_have_labels(self):
        for bias in ZoomResolutionBias:
            assert bias in ZOOM_RESOLUTION_BIAS_LABELS

    def test_default_is_midway(self):
        assert default_zoom_resolution_bias() is ZoomResolutionBias.MIDWAY_RESOLUTION

    def test_parse_member(self):
        bias = ZoomResolutionBias.HIGH_RESOLUTION
        assert parse_zoom_resolution_bias(bias) is bias

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match='Unknown zoom resolution bias'):
            parse_zoom_resolution_bias('lowest')


class TestErrors:
    """Tests for the error hierarchy."""

    def test_hierarchy(self):
        assert issubclass(ConfigurationError, TilePyramidError)
        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(InternalInvariantError, RuntimeError)
        assert issubclass(StorageUnavailableError, OSError)

    def test_original_exception(self):
        cause = PermissionError('denied')
        err = StorageUnavailableError('cannot create root', cause)
        assert err.original_exception is cause
        assert str(err) == 'cannot create root'

    def test_message(self):
        assert str(ConfigurationError('No tile resolutions')) == 'No tile resolutions'
