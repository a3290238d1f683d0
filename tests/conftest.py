"""
Pytest fixtures and configuration for all tests.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.config import Settings
from app.models.session import Session
from app.services.leaderboard_cache import LeaderboardCache
from app.services.leaderboard_service import LeaderboardService
from tests.fakes import (
    FakeBurnRepository,
    FakeCreatorRepository,
    FakeDiscovery,
    FakeSessionRepository,
    FakeUserRepository,
)

# MongoDB test database
TEST_DB_URI = os.getenv("TEST_MONGODB_URI", "mongodb://localhost:27017")
TEST_DB_NAME = "burn_leaderboard_test"

MINT = "MintM111111111111111111111111111111111111"
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def worker_id(request):
    """
    Return the worker ID when using pytest-xdist, otherwise 'master'.
    This allows each worker to use its own test database.
    """
    if hasattr(request.config, 'workerinput'):
        return request.config.workerinput['workerid']
    return 'master'


@pytest.fixture(scope="function")
async def test_db(worker_id) -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean test database for each test.

    Skips the test when no MongoDB is reachable at TEST_MONGODB_URI.
    Automatically cleans up after each test.
    """
    client = AsyncIOMotorClient(TEST_DB_URI, serverSelectionTimeoutMS=500)
    try:
        await client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip("MongoDB not available")

    db_name = f"{TEST_DB_NAME}_{worker_id}" if worker_id != "master" else TEST_DB_NAME
    db = client[db_name]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()

    client.close()


@pytest.fixture
def test_settings():
    """Settings with no delays so fetch loops run instantly."""
    return Settings(
        _env_file=None,
        helius_api_key="test-key",
        signature_page_delay_seconds=0,
        transaction_fetch_delay_seconds=0,
        slow_path_chunk_delay_seconds=0,
        leaderboard_cache_ttl_seconds=30,
    )


@pytest.fixture
def mint():
    return MINT


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_session():
    """Ended session: one hour window that closed an hour before NOW."""
    return Session(
        _id=str(ObjectId()),
        creatorMint=MINT,
        startTime=NOW - timedelta(hours=2),
        endTime=NOW - timedelta(hours=1),
        isActive=False,
        totalBurns=150,
        participantCount=2,
    )


@pytest.fixture
def active_session():
    """Session started thirty minutes before NOW and still open."""
    return Session(
        _id=str(ObjectId()),
        creatorMint=MINT,
        startTime=NOW - timedelta(minutes=30),
        isActive=True,
    )


@pytest.fixture
def repos():
    """Empty fake repositories; tests fill in what they need."""
    return {
        "session_repo": FakeSessionRepository(),
        "creator_repo": FakeCreatorRepository(),
        "burn_repo": FakeBurnRepository(),
        "user_repo": FakeUserRepository(),
    }


@pytest.fixture
def make_service(test_settings, repos):
    """Factory for a LeaderboardService wired to fakes and a fixed clock."""

    def _make(discovery=None, settings=None, cache=None, **overrides):
        wiring = {**repos, **overrides}
        return LeaderboardService(
            None,
            discovery=discovery,
            cache=cache if cache is not None else LeaderboardCache(ttl_seconds=30),
            settings=settings or test_settings,
            now=lambda: NOW,
            **wiring,
        )

    return _make


@pytest.fixture
def discovery_factory():
    return FakeDiscovery
