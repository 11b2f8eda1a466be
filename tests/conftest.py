"""
Pytest configuration for meshprobe tests.

Configures pytest-asyncio for async test support.
"""

import tempfile
from typing import Generator

import pytest

from meshprobe.logging import LoggingConfig


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    config = LoggingConfig()
    config.update(log_level="critical")
    yield config
    config.update(log_level="info")


@pytest.fixture
def temp_log_directory() -> Generator[str, None, None]:
    with tempfile.TemporaryDirectory() as temp_directory:
        yield temp_directory
