"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from ments.core.config import Settings
from ments.domain.cache.value_objects import CacheDomain


class TestSettings:
    """Test Settings validation and defaults."""

    def test_cache_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.CACHE_SWEEP_INTERVAL_SECONDS == 60.0
        assert settings.CACHE_ADMIN_ENABLED is True
        assert settings.cache_ttl_overrides[CacheDomain.ENVIRONMENTS] == 300
        assert settings.cache_ttl_overrides[CacheDomain.JOBS] == 60

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_STARTUPS", "45")
        monkeypatch.setenv("CACHE_SWEEP_INTERVAL_SECONDS", "5")

        settings = Settings(_env_file=None)

        assert settings.cache_ttl_overrides[CacheDomain.STARTUPS] == 45
        assert settings.CACHE_SWEEP_INTERVAL_SECONDS == 5.0

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="verbose")

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ENVIRONMENT="qa")

    def test_sweep_interval_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CACHE_SWEEP_INTERVAL_SECONDS=0)

    def test_ttl_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CACHE_TTL_JOBS=0)

    def test_environment_flags(self):
        assert Settings(_env_file=None, ENVIRONMENT="production").is_production
        assert Settings(_env_file=None, ENVIRONMENT="development").is_development
