"""
FOCUSFLOW Analytics API - Task Endpoint Tests
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from focusflow.analytics.errors import StoreUnavailable
from focusflow.tasks.enums import TaskCategory, TaskStatus
from focusflow.tasks.models import TaskEvent
from focusflow.tasks.repository import TaskRepository


class TestTaskEndpoints:
    """Tests for logging and listing tasks."""

    def test_create_task(self, client, auth_headers, owner_id):
        response = client.post(
            "/tasks",
            json={"title": "Go for a run", "category": "health", "created_at": "2025-01-14T07:30:00Z"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["owner_id"] == owner_id
        assert data["category"] == "health"
        assert data["status"] == "pending"

    def test_create_requires_auth(self, client):
        response = client.post("/tasks", json={"title": "x"})
        assert response.status_code == 401

    def test_create_rejects_unknown_category(self, client, auth_headers):
        response = client.post(
            "/tasks", json={"title": "x", "category": "hobby"}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_create_rejects_empty_title(self, client, auth_headers):
        response = client.post("/tasks", json={"title": ""}, headers=auth_headers)
        assert response.status_code == 422

    def test_update_status(self, client, auth_headers):
        created = client.post(
            "/tasks", json={"title": "Read chapter 3", "category": "study"}, headers=auth_headers
        ).json()

        response = client.patch(
            f"/tasks/{created['id']}/status",
            json={"status": "completed"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"

    def test_update_status_of_other_users_task(self, client, auth_headers, second_auth_headers):
        created = client.post("/tasks", json={"title": "Mine"}, headers=auth_headers).json()

        response = client.patch(
            f"/tasks/{created['id']}/status",
            json={"status": "completed"},
            headers=second_auth_headers,
        )

        assert response.status_code == 404

    def test_list_tasks_in_range(self, client, auth_headers):
        for created_at in ("2025-01-14T09:00:00Z", "2025-01-10T09:00:00Z", "2024-12-01T09:00:00Z"):
            client.post(
                "/tasks", json={"title": "t", "created_at": created_at}, headers=auth_headers
            )

        week = client.get("/tasks?range=7days", headers=auth_headers).json()
        everything = client.get("/tasks?range=all", headers=auth_headers).json()

        assert week["total"] == 2
        assert week["tasks"][0]["created_at"].startswith("2025-01-14")
        assert everything["total"] == 3

    def test_list_tasks_rejects_unknown_range(self, client, auth_headers):
        response = client.get("/tasks?range=forever", headers=auth_headers)
        assert response.status_code == 400


class TestTaskRepository:
    """MongoDB task repository against a mocked collection."""

    @pytest.fixture
    def collection(self):
        return MagicMock()

    @pytest.fixture
    def repository(self, collection):
        db = MagicMock()
        db.__getitem__.return_value = collection
        return TaskRepository(db)

    async def test_create_wraps_driver_errors(self, repository, collection):
        collection.insert_one = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        task = TaskEvent.create(owner_id="user-123", title="t")

        with pytest.raises(StoreUnavailable):
            await repository.create(task)

    async def test_update_status_returns_none_when_missing(self, repository, collection):
        collection.find_one_and_update = AsyncMock(return_value=None)

        result = await repository.update_status("missing", "user-123", TaskStatus.COMPLETED)

        assert result is None

    async def test_update_status_parses_document(self, repository, collection):
        created = datetime(2025, 1, 13, 9, tzinfo=timezone.utc)
        collection.find_one_and_update = AsyncMock(
            return_value={
                "_id": "task-1",
                "owner_id": "user-123",
                "title": "t",
                "category": "chores",
                "status": "in_progress",
                "created_at": created,
                "updated_at": created,
            }
        )

        task = await repository.update_status("task-1", "user-123", TaskStatus.IN_PROGRESS)

        assert task.category == TaskCategory.CHORES
        assert task.status == TaskStatus.IN_PROGRESS
        query = collection.find_one_and_update.call_args.args[0]
        assert query == {"_id": "task-1", "owner_id": "user-123"}


class TestTaskModel:

    def test_round_trip_through_document(self):
        task = TaskEvent.create(owner_id="user-123", title="t", category=TaskCategory.SOCIAL)

        doc = task.to_dict()

        assert doc["_id"] == task.id
        assert doc["category"] == "social"
        assert TaskEvent.from_dict(doc) == task

    def test_missing_category_defaults_to_other(self):
        created = datetime(2025, 1, 13, tzinfo=timezone.utc)
        task = TaskEvent.from_dict(
            {"_id": "t", "owner_id": "u", "status": "pending", "created_at": created}
        )
        assert task.category == TaskCategory.OTHER
        assert task.updated_at == created
