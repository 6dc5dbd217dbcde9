"""Shared fixtures."""

import pytest

from toolsystem.registry import reset_registry
from toolsystem.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def clean_state() -> object:
    """Reset global registry and settings cache around each test."""
    reset_registry()
    clear_settings_cache()
    yield
    reset_registry()
    clear_settings_cache()
