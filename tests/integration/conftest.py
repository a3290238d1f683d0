"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import get_settings
from app.core.dependencies import get_leaderboard_service
from app.main import app
from app.services.leaderboard_cache import LeaderboardCache


@pytest.fixture
def service_options():
    """
    Keyword arguments for the LeaderboardService built on each request.

    Tests put a discovery or fake repositories here before calling the API.
    """
    return {}


@pytest.fixture
async def client(make_service, service_options, test_settings):
    """
    HTTP client for testing API endpoints.

    The leaderboard service dependency is overridden with one wired to fakes;
    the cache is shared across requests the way app.state shares it.
    """
    cache = LeaderboardCache(ttl_seconds=30)

    def override_service():
        return make_service(cache=cache, **service_options)

    app.dependency_overrides[get_leaderboard_service] = override_service
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
