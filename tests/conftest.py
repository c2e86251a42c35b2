"""
FOCUSFLOW Analytics API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from focusflow.main import app
from focusflow.auth.tokens import encode_token
from focusflow.clock import get_clock
from focusflow.database import get_database
from focusflow.analytics.bucket_cache import InMemoryBucketCache
from focusflow.analytics.insight_cache import InMemoryInsightCache
from focusflow.analytics.router import get_bucket_cache, get_insight_cache
from focusflow.analytics.service import AnalyticsService
from focusflow.moods.repository import InMemoryMoodRepository
from focusflow.moods.router import get_mood_repository
from focusflow.tasks.repository import InMemoryTaskRepository
from focusflow.tasks.router import get_task_repository


# Time control fixtures for deterministic bucketing
class FrozenClock:
    """A clock that returns a fixed time for deterministic testing."""

    def __init__(self, frozen_time: datetime):
        self._frozen_time = frozen_time

    def __call__(self) -> datetime:
        return self._frozen_time

    def set(self, new_time: datetime) -> None:
        self._frozen_time = new_time

    def advance(self, delta: timedelta) -> None:
        self._frozen_time += delta


@pytest.fixture
def frozen_now() -> datetime:
    """A fixed 'now': Wednesday 2025-01-15 12:00 UTC."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock(frozen_now) -> FrozenClock:
    return FrozenClock(frozen_now)


@pytest.fixture
def owner_id() -> str:
    return "user-123"


@pytest.fixture
def task_repository():
    """Provide a fresh in-memory task repository for each test."""
    return InMemoryTaskRepository()


@pytest.fixture
def mood_repository():
    return InMemoryMoodRepository()


@pytest.fixture
def bucket_cache():
    return InMemoryBucketCache()


@pytest.fixture
def insight_cache():
    return InMemoryInsightCache()


@pytest.fixture
def service(task_repository, mood_repository, bucket_cache, insight_cache, frozen_clock):
    """Analytics service wired to in-memory stores and the frozen clock."""
    return AnalyticsService(
        task_repository=task_repository,
        mood_repository=mood_repository,
        bucket_cache=bucket_cache,
        insight_cache=insight_cache,
        clock=frozen_clock,
    )


@pytest.fixture
def client(task_repository, mood_repository, bucket_cache, insight_cache, frozen_clock):
    """Create test client with in-memory stores and a frozen clock."""
    app.dependency_overrides[get_task_repository] = lambda: task_repository
    app.dependency_overrides[get_mood_repository] = lambda: mood_repository
    app.dependency_overrides[get_bucket_cache] = lambda: bucket_cache
    app.dependency_overrides[get_insight_cache] = lambda: insight_cache
    app.dependency_overrides[get_clock] = lambda: frozen_clock
    # Repositories are overridden, so the database is never touched
    app.dependency_overrides[get_database] = lambda: MagicMock()

    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(owner_id):
    """Authorization headers carrying a token for ``owner_id``."""
    return {"Authorization": f"Bearer {encode_token(owner_id)}"}


@pytest.fixture
def second_auth_headers():
    return {"Authorization": f"Bearer {encode_token('user-456')}"}
