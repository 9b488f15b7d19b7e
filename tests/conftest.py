"""Shared fixtures."""

import pytest

from mcp_boilerplate.config import Settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    """Default settings, as loaded from an empty environment."""
    return Settings()


@pytest.fixture
def prefixed_settings():
    """Settings with a greeting prefix configured."""
    return Settings(greeting_prefix="[bot] ")
