"""
Unit tests for cache administration and health endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from ments.main import create_app


class TestCacheEndpoints:
    """Test /api/cache routes."""

    @pytest.fixture
    def app(self, test_settings, cache):
        return create_app(settings=test_settings, cache=cache)

    @pytest.fixture
    def client(self, app):
        with TestClient(app) as test_client:
            yield test_client

    @pytest.fixture
    def populated(self, cache):
        cache.set("trending:limit=5&offset=0", {"posts": []}, 60)
        cache.set("trending:limit=10&offset=0", {"posts": []}, 60)
        cache.set("jobs:active=true", {"data": []}, 60)
        return cache

    def test_stats(self, client, populated):
        response = client.get("/api/cache/clear")

        assert response.status_code == 200
        body = response.json()
        assert body["size"] == 3
        assert sorted(body["keys"]) == [
            "jobs:active=true",
            "trending:limit=10&offset=0",
            "trending:limit=5&offset=0",
        ]

    def test_stats_excludes_expired(self, client, populated, clock):
        populated.set("environments:", [], 300)
        clock.advance(61)

        body = client.get("/api/cache/clear").json()

        assert body == {"size": 1, "keys": ["environments:"]}

    def test_clear_by_prefix(self, client, populated):
        response = client.post("/api/cache/clear", params={"prefix": "trending"})

        assert response.status_code == 200
        assert response.json() == {"cleared": 2, "remaining": 1, "prefix": "trending"}
        assert populated.get("jobs:active=true") == {"data": []}

    def test_clear_all(self, client, populated):
        response = client.post("/api/cache/clear")

        assert response.status_code == 200
        assert response.json() == {"cleared": 3, "remaining": 0, "prefix": None}

    def test_empty_prefix_clears_all(self, client, populated):
        response = client.post("/api/cache/clear", params={"prefix": ""})

        assert response.json() == {"cleared": 3, "remaining": 0, "prefix": None}

    def test_metrics(self, client):
        response = client.get("/api/cache/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")

    def test_admin_router_can_be_disabled(self, test_settings, cache):
        settings = test_settings.model_copy(update={"CACHE_ADMIN_ENABLED": False})
        app = create_app(settings=settings, cache=cache)

        with TestClient(app) as client:
            assert client.get("/api/cache/clear").status_code == 404
            assert client.get("/health").status_code == 200


class TestHealthEndpoint:
    """Test /health route."""

    def test_health_reports_cache(self, test_settings, cache):
        cache.set("jobs:active=true", {"data": []}, 60)
        app = create_app(settings=test_settings, cache=cache)

        with TestClient(app) as client:
            body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["environment"] == "test"
        assert body["cache"] == {"entries": 1, "sweeping": True}


class TestLifespan:
    """Test application shutdown behaviour."""

    def test_shutdown_stops_sweeper(self, test_settings, cache):
        app = create_app(settings=test_settings, cache=cache)

        with TestClient(app):
            cache.set("jobs:active=true", {"data": []}, 60)
            assert cache.is_sweeping is True

        assert cache.is_sweeping is False

    def test_app_owns_independent_cache(self, test_settings):
        first = create_app(settings=test_settings)
        second = create_app(settings=test_settings)

        assert first.state.ttl_cache is not second.state.ttl_cache
        assert first.state.response_cache.cache is first.state.ttl_cache


class TestCreateApp:
    """Test application factory wiring."""

    def test_debug_follows_settings(self, test_settings):
        app = create_app(settings=test_settings.model_copy(update={"DEBUG": True}))

        assert app.debug is True

    def test_debug_off_by_default(self, test_settings):
        app = create_app(settings=test_settings.model_copy(update={"DEBUG": False}))

        assert app.debug is False

    def test_state_holds_only_cache_wiring(self, test_settings):
        app = create_app(settings=test_settings)

        assert app.state.settings is not None
        assert not hasattr(app.state, "startup_time")
