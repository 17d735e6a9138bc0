"""
Pytest configuration and fixtures for file cache tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from fcache.cache.file_cache import FileCache
from fcache.config import Settings, clear_settings_cache


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def cache_root(temp_dir: Path) -> Path:
    """Root directory for a test cache (not created up front)."""
    return temp_dir / "cache"


@pytest.fixture
def cache(cache_root: Path) -> FileCache:
    """Provide a FileCache with a 60 second default lifetime."""
    return FileCache(cache_root, default_ttl=60, default_extension=".py")


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "CACHE_DIR": str(temp_dir / "env_cache"),
        "CACHE_LIFE": "120",
        "DEFAULT_EXTENSION": "php",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance built from the mock environment."""
    from fcache.config import get_settings

    settings = get_settings()
    yield settings
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
