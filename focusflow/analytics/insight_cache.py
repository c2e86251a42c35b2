"""
FOCUSFLOW Analytics API - Insight Cache

The most recently generated insight set per ``(owner_id, time_range)``.
A write replaces the stored set wholesale; sets are never merged.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from focusflow.analytics.errors import StoreUnavailable
from focusflow.analytics.models import Insight, InsightSet


class InsightCacheInterface(ABC):
    """Abstract interface for insight persistence."""

    @abstractmethod
    async def read(self, owner_id: str, time_range: str) -> Optional[InsightSet]:
        pass

    @abstractmethod
    async def write(
        self,
        owner_id: str,
        time_range: str,
        insights: List[Insight],
        generated_at: datetime,
    ) -> None:
        pass


class MongoInsightCache(InsightCacheInterface):
    """MongoDB implementation backed by ``productivity_insights``."""

    COLLECTION_NAME = "productivity_insights"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[self.COLLECTION_NAME]

    async def read(self, owner_id: str, time_range: str) -> Optional[InsightSet]:
        try:
            doc = await self.collection.find_one({"owner_id": owner_id, "time_range": time_range})
        except PyMongoError as exc:
            raise StoreUnavailable("read insights", exc) from exc
        if doc is None:
            return None
        return InsightSet(
            owner_id=doc["owner_id"],
            time_range=doc["time_range"],
            insights=[Insight.from_dict(item) for item in doc.get("insights", [])],
            generated_at=doc.get("last_generated_at"),
        )

    async def write(
        self,
        owner_id: str,
        time_range: str,
        insights: List[Insight],
        generated_at: datetime,
    ) -> None:
        now = datetime.now(timezone.utc)
        try:
            await self.collection.update_one(
                {"owner_id": owner_id, "time_range": time_range},
                {
                    "$set": {
                        "owner_id": owner_id,
                        "time_range": time_range,
                        "insights": [insight.to_dict() for insight in insights],
                        "last_generated_at": generated_at,
                        "updated_at": now,
                    },
                    "$setOnInsert": {"created_at": now},
                },
                upsert=True,
            )
        except PyMongoError as exc:
            raise StoreUnavailable("write insights", exc) from exc


class InMemoryInsightCache(InsightCacheInterface):
    """In-memory implementation for CI-safe testing."""

    def __init__(self):
        self._sets: Dict[Tuple[str, str], InsightSet] = {}

    def clear(self) -> None:
        self._sets.clear()

    async def read(self, owner_id: str, time_range: str) -> Optional[InsightSet]:
        return self._sets.get((owner_id, time_range))

    async def write(
        self,
        owner_id: str,
        time_range: str,
        insights: List[Insight],
        generated_at: datetime,
    ) -> None:
        self._sets[(owner_id, time_range)] = InsightSet(
            owner_id=owner_id,
            time_range=time_range,
            insights=list(insights),
            generated_at=generated_at,
        )
