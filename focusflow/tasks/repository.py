"""
FOCUSFLOW Analytics API - Task Repository

Raw event store for tasks.
Includes MongoDB implementation for runtime and an in-memory one for testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from focusflow.analytics.errors import StoreUnavailable
from focusflow.analytics.time_range import as_utc
from focusflow.tasks.enums import TaskStatus
from focusflow.tasks.models import TaskEvent


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for the task event store.

    All operations are scoped by owner_id; analytics never aggregates across users.
    """

    @abstractmethod
    async def create(self, task: TaskEvent) -> TaskEvent:
        pass

    @abstractmethod
    async def update_status(
        self, task_id: str, owner_id: str, status: TaskStatus
    ) -> Optional[TaskEvent]:
        pass

    @abstractmethod
    async def list_tasks(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[TaskEvent]:
        """List tasks created in ``[start, end)``, newest first. ``None`` bounds are open."""
        pass


class TaskRepository(TaskRepositoryInterface):
    """MongoDB implementation of the task event store."""

    COLLECTION_NAME = "tasks"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, task: TaskEvent) -> TaskEvent:
        try:
            await self.collection.insert_one(task.to_dict())
        except PyMongoError as exc:
            raise StoreUnavailable("create task", exc) from exc
        return task

    async def update_status(
        self, task_id: str, owner_id: str, status: TaskStatus
    ) -> Optional[TaskEvent]:
        try:
            result = await self.collection.find_one_and_update(
                {"_id": task_id, "owner_id": owner_id},
                {"$set": {"status": status.value, "updated_at": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StoreUnavailable("update task status", exc) from exc
        if result is None:
            return None
        return TaskEvent.from_dict(result)

    async def list_tasks(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[TaskEvent]:
        query: dict = {"owner_id": owner_id}
        created: dict = {}
        if start is not None:
            created["$gte"] = start
        if end is not None:
            created["$lt"] = end
        if created:
            query["created_at"] = created

        tasks: List[TaskEvent] = []
        try:
            cursor = self.collection.find(query).sort("created_at", -1)
            async for doc in cursor:
                tasks.append(TaskEvent.from_dict(doc))
        except PyMongoError as exc:
            raise StoreUnavailable("list tasks", exc) from exc
        return tasks


class InMemoryTaskRepository(TaskRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._tasks: dict[str, TaskEvent] = {}

    def clear(self) -> None:
        self._tasks.clear()

    async def create(self, task: TaskEvent) -> TaskEvent:
        self._tasks[task.id] = task
        return task

    async def update_status(
        self, task_id: str, owner_id: str, status: TaskStatus
    ) -> Optional[TaskEvent]:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return None
        task.status = status
        task.updated_at = datetime.now(timezone.utc)
        return task

    async def list_tasks(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[TaskEvent]:
        results: List[TaskEvent] = []
        for task in self._tasks.values():
            if task.owner_id != owner_id:
                continue
            created = as_utc(task.created_at)
            if start is not None and created < start:
                continue
            if end is not None and created >= end:
                continue
            results.append(task)

        results.sort(key=lambda t: as_utc(t.created_at), reverse=True)
        return results
