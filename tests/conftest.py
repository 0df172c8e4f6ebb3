"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from mapforge.config import MapConfig  # noqa: TC001 - fixture return type
from tests.fixtures.map_fixtures import make_config


@pytest.fixture
def small_config() -> MapConfig:
    """Width 5, four layers, exactly three starting columns and two pre-boss anchors."""
    return make_config()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
