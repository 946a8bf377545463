"""
Main pytest configuration for all backend tests.

Fixtures, configuration, and utilities for unit tests.
"""

import os

import pytest

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["CACHE_ADMIN_ENABLED"] = "true"

from ments.core.config import Settings  # noqa: E402
from ments.services.cache.ttl_cache import TTLCache  # noqa: E402


class FakeClock:
    """Manually advanced wall clock in epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Simulated clock for TTL tests."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """TTL cache driven by the simulated clock."""
    ttl_cache = TTLCache(clock=clock)
    yield ttl_cache
    ttl_cache.stop()


@pytest.fixture
def test_settings():
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, ENVIRONMENT="test", LOG_LEVEL="DEBUG")


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
