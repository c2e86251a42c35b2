"""
FOCUSFLOW Analytics API - Mood Repository

Raw event store for mood entries.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from focusflow.analytics.errors import StoreUnavailable
from focusflow.analytics.time_range import as_utc
from focusflow.moods.models import MoodEvent


class MoodRepositoryInterface(ABC):
    """Abstract interface for the mood event store. Scoped by owner_id."""

    @abstractmethod
    async def create(self, mood: MoodEvent) -> MoodEvent:
        pass

    @abstractmethod
    async def list_moods(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[MoodEvent]:
        """List moods logged in ``[start, end)``, newest first."""
        pass


class MoodRepository(MoodRepositoryInterface):
    """MongoDB implementation of the mood event store."""

    COLLECTION_NAME = "moods"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, mood: MoodEvent) -> MoodEvent:
        try:
            await self.collection.insert_one(mood.to_dict())
        except PyMongoError as exc:
            raise StoreUnavailable("create mood", exc) from exc
        return mood

    async def list_moods(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[MoodEvent]:
        query: dict = {"owner_id": owner_id}
        logged: dict = {}
        if start is not None:
            logged["$gte"] = start
        if end is not None:
            logged["$lt"] = end
        if logged:
            query["timestamp"] = logged

        moods: List[MoodEvent] = []
        try:
            async for doc in self.collection.find(query).sort("timestamp", -1):
                moods.append(MoodEvent.from_dict(doc))
        except PyMongoError as exc:
            raise StoreUnavailable("list moods", exc) from exc
        return moods


class InMemoryMoodRepository(MoodRepositoryInterface):
    """In-memory implementation for CI-safe testing."""

    def __init__(self):
        self._moods: dict[str, MoodEvent] = {}

    def clear(self) -> None:
        self._moods.clear()

    async def create(self, mood: MoodEvent) -> MoodEvent:
        self._moods[mood.id] = mood
        return mood

    async def list_moods(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[MoodEvent]:
        results = [
            mood
            for mood in self._moods.values()
            if mood.owner_id == owner_id
            and (start is None or as_utc(mood.timestamp) >= start)
            and (end is None or as_utc(mood.timestamp) < end)
        ]
        results.sort(key=lambda m: as_utc(m.timestamp), reverse=True)
        return results
