"""Tests for settings models."""

import pytest
from pydantic import ValidationError

from domain.models import AppSettings, CacheSettings, PyramidSettings
from shared.constants import TILE_CACHE_DIR, TILE_FILE_SUFFIX, ZoomResolutionBias


class TestPyramidSettings:
    def test_defaults_to_midway(self):
        settings = PyramidSettings(resolutions={'0': 100.0})
        assert settings.bias is ZoomResolutionBias.MIDWAY_RESOLUTION

    @pytest.mark.parametrize(
        'raw',
        ['MIDWAY_LOG_RESOLUTION', 'midway_log_resolution', 'midway-log-resolution'],
    )
    def test_bias_parsing(self, raw):
        settings = PyramidSettings(resolutions={'0': 100.0}, bias=raw)
        assert settings.bias is ZoomResolutionBias.MIDWAY_LOG_RESOLUTION

    def test_unknown_bias(self):
        with pytest.raises(ValidationError):
            PyramidSettings(resolutions={'0': 100.0}, bias='closest')

    def test_empty_resolutions(self):
        with pytest.raises(ValidationError, match='No tile resolutions'):
            PyramidSettings(resolutions={})

    @pytest.mark.parametrize('value', [0.0, -2.5, float('inf')])
    def test_non_positive_resolution(self, value):
        with pytest.raises(ValidationError):
            PyramidSettings(resolutions={'0': 100.0, '1': value})

    def test_integer_resolutions_coerced(self):
        settings = PyramidSettings(resolutions={'0': 100})
        assert settings.resolutions == {'0': 100.0}


class TestCacheSettings:
    def test_defaults(self):
        settings = CacheSettings()
        assert settings.backend == 'file'
        assert settings.directory == TILE_CACHE_DIR
        assert settings.file_suffix == TILE_FILE_SUFFIX
        assert settings.max_age_seconds is None
        assert settings.max_entries is None

    def test_suffix_normalized(self):
        assert CacheSettings(file_suffix=' .jpeg ').file_suffix == 'jpeg'

    def test_empty_suffix(self):
        with pytest.raises(ValidationError):
            CacheSettings(file_suffix='.')

    @pytest.mark.parametrize('suffix', ['png/gz', 'png\\gz'])
    def test_suffix_with_separator(self, suffix):
        with pytest.raises(ValidationError):
            CacheSettings(file_suffix=suffix)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            CacheSettings(backend='s3')

    @pytest.mark.parametrize('field', ['max_age_seconds', 'max_entries'])
    def test_bounds_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            CacheSettings(**{field: 0})


class TestAppSettings:
    def test_cache_defaults(self):
        settings = AppSettings(pyramid={'resolutions': {'0': 1.0}})
        assert settings.cache == CacheSettings()

    def test_extra_ignored(self):
        settings = AppSettings.model_validate(
            {'pyramid': {'resolutions': {'0': 1.0}, 'legacy': True}, 'ui': {'theme': 'dark'}}
        )
        assert settings.pyramid.resolutions == {'0': 1.0}

    def test_pyramid_required(self):
        with pytest.raises(ValidationError):
            AppSettings()
