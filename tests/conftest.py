# tests/conftest.py

"""Shared pytest fixtures for all ecoshop tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def no_retry_backoff() -> Generator[None, None, None]:
    """Zero the AI retry backoff so retry loops run instantly."""
    with patch.object(Settings, "AI_RETRY_BACKOFF", 0.0):
        yield
