"""Pytest configuration and fixtures for tile pyramid tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


@pytest.fixture
def profiles_dir(tmp_path, monkeypatch):
    """Point profile lookup at a temporary directory."""
    folder = tmp_path / 'profiles'
    monkeypatch.setenv('TILE_PYRAMID_PROFILES_DIR', str(folder))
    return folder
