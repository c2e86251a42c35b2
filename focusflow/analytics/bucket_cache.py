"""
FOCUSFLOW Analytics API - Bucket Cache

Persisted bucket rows, upserted on their natural key:

- daily:    (owner_id, date)
- weekly:   (owner_id, week_start)
- mood:     (owner_id, mood_name, date)
- category: (owner_id, category, date)

Writing a row twice replaces it. Two concurrent cold reads may both compute
and write the same rows; the last writer wins with identical values.

A read only counts as a hit once the family has been computed for that range
as of the window's day. That fact is kept as a coverage marker, one per
``(owner_id, family, time_range)``, whose ``as_of`` day is overwritten on
each write. The marker is written after the rows it vouches for.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import UpdateOne
from pymongo.errors import PyMongoError

from focusflow.analytics.errors import StoreUnavailable
from focusflow.analytics.models import (
    BUCKET_TYPES,
    BucketFamily,
    DailyBucket,
    WeeklyBucket,
    bucket_sort_key,
)
from focusflow.analytics.time_range import DateWindow, week_start_for


def _date_field(family: BucketFamily) -> str:
    return "week_start" if family == BucketFamily.WEEKLY else "date"


def _date_bounds(family: BucketFamily, window: DateWindow) -> Tuple[Optional[str], str]:
    """Inclusive ISO bounds on the family's date field."""
    if family == BucketFamily.WEEKLY:
        upper = week_start_for(window.today)
        lower = week_start_for(window.first_day) if window.first_day else None
    else:
        upper = window.today
        lower = window.first_day
    return (lower.isoformat() if lower else None), upper.isoformat()


def is_visible(bucket, window: DateWindow) -> bool:
    """
    Whether a stored row belongs in a read for ``window``.

    Bounded ranges write zero-filled daily and weekly rows; the ``all`` range
    only reports periods that actually have data.
    """
    if window.is_bounded:
        return True
    if isinstance(bucket, DailyBucket):
        return bucket.has_data
    if isinstance(bucket, WeeklyBucket):
        return bucket.total_tasks > 0 or bucket.most_common_mood is not None
    return True


def _coverage_key(owner_id: str, family: BucketFamily, window: DateWindow) -> dict:
    return {
        "owner_id": owner_id,
        "family": family.value,
        "time_range": window.time_range.value,
    }


class BucketCacheInterface(ABC):
    """Abstract interface for bucket persistence."""

    @abstractmethod
    async def read(
        self, owner_id: str, family: BucketFamily, window: DateWindow
    ) -> Optional[list]:
        """Cached rows for the window, oldest first, or None on a miss."""
        pass

    @abstractmethod
    async def write(
        self,
        owner_id: str,
        family: BucketFamily,
        window: DateWindow,
        buckets: Sequence,
    ) -> None:
        """Upsert rows on their natural key, then mark the window as computed."""
        pass


class MongoBucketCache(BucketCacheInterface):
    """MongoDB implementation; one collection per family plus a coverage collection."""

    COVERAGE_COLLECTION = "analytics_coverage"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.coverage = db[self.COVERAGE_COLLECTION]

    async def read(
        self, owner_id: str, family: BucketFamily, window: DateWindow
    ) -> Optional[list]:
        try:
            marker = await self.coverage.find_one(_coverage_key(owner_id, family, window))
            if marker is None or marker.get("as_of") != window.today.isoformat():
                return None

            field = _date_field(family)
            lower, upper = _date_bounds(family, window)
            date_query: dict = {"$lte": upper}
            if lower is not None:
                date_query["$gte"] = lower

            bucket_type = BUCKET_TYPES[family]
            rows = []
            cursor = self.db[family.collection_name].find({"owner_id": owner_id, field: date_query})
            async for doc in cursor:
                doc.pop("_id", None)
                doc.pop("updated_at", None)
                rows.append(bucket_type.from_dict(doc))
        except PyMongoError as exc:
            raise StoreUnavailable(f"read {family.value} buckets", exc) from exc

        rows = [row for row in rows if is_visible(row, window)]
        return sorted(rows, key=bucket_sort_key)

    async def write(
        self,
        owner_id: str,
        family: BucketFamily,
        window: DateWindow,
        buckets: Sequence,
    ) -> None:
        now = datetime.now(timezone.utc)
        operations = [
            UpdateOne(
                bucket.natural_key(),
                {"$set": {**bucket.to_dict(), "updated_at": now}},
                upsert=True,
            )
            for bucket in buckets
        ]
        key = _coverage_key(owner_id, family, window)
        try:
            if operations:
                await self.db[family.collection_name].bulk_write(operations, ordered=False)
            await self.coverage.update_one(
                key,
                {"$set": {**key, "as_of": window.today.isoformat(), "computed_at": now}},
                upsert=True,
            )
        except PyMongoError as exc:
            raise StoreUnavailable(f"write {family.value} buckets", exc) from exc


class InMemoryBucketCache(BucketCacheInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._rows: Dict[BucketFamily, Dict[tuple, object]] = {family: {} for family in BucketFamily}
        self._coverage: Dict[tuple, str] = {}

    def clear(self) -> None:
        for rows in self._rows.values():
            rows.clear()
        self._coverage.clear()

    def row_count(self, family: BucketFamily) -> int:
        return len(self._rows[family])

    def coverage_count(self) -> int:
        return len(self._coverage)

    async def read(
        self, owner_id: str, family: BucketFamily, window: DateWindow
    ) -> Optional[list]:
        as_of = self._coverage.get(tuple(_coverage_key(owner_id, family, window).values()))
        if as_of != window.today.isoformat():
            return None

        field = _date_field(family)
        lower, upper = _date_bounds(family, window)
        rows: List = []
        for bucket in self._rows[family].values():
            if bucket.owner_id != owner_id:
                continue
            day = getattr(bucket, field).isoformat()
            if day > upper or (lower is not None and day < lower):
                continue
            if is_visible(bucket, window):
                rows.append(bucket)
        return sorted(rows, key=bucket_sort_key)

    async def write(
        self,
        owner_id: str,
        family: BucketFamily,
        window: DateWindow,
        buckets: Sequence,
    ) -> None:
        for bucket in buckets:
            self._rows[family][tuple(bucket.natural_key().values())] = bucket
        self._coverage[tuple(_coverage_key(owner_id, family, window).values())] = window.today.isoformat()
