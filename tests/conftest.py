"""Shared pytest fixtures for codelight tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from dotenv import load_dotenv

from codelight.config import get_settings

load_dotenv()


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None]:
    """Ensure no test sees settings cached by another."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
