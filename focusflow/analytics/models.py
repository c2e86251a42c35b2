"""
FOCUSFLOW Analytics API - Analytics Models

Bucket rows and insights. Buckets are owned by the cache and are only ever
recomputed and upserted on their natural key, never patched in place.
Dates are stored as ISO strings.
"""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Tuple


class BucketFamily(str, Enum):
    """The four bucket families and their collections."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MOOD = "mood"
    CATEGORY = "category"

    @property
    def collection_name(self) -> str:
        return f"analytics_{self.value}"


class InsightType(str, Enum):
    PRODUCTIVITY = "productivity"
    TIME = "time"
    CATEGORY = "category"
    MOOD = "mood"
    GENERAL = "general"


@dataclass(frozen=True)
class DailyBucket:
    """Task and mood statistics for one owner on one UTC day."""

    owner_id: str
    date: date
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    pending_tasks: int = 0
    completion_rate: float = 0.0
    most_productive_hour: Optional[int] = None
    most_common_category: Optional[str] = None
    most_common_mood: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.total_tasks > 0 or self.most_common_mood is not None

    def natural_key(self) -> dict:
        return {"owner_id": self.owner_id, "date": self.date.isoformat()}

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "DailyBucket":
        return cls(
            owner_id=data["owner_id"],
            date=date.fromisoformat(data["date"]),
            total_tasks=data.get("total_tasks", 0),
            completed_tasks=data.get("completed_tasks", 0),
            in_progress_tasks=data.get("in_progress_tasks", 0),
            pending_tasks=data.get("pending_tasks", 0),
            completion_rate=float(data.get("completion_rate", 0)),
            most_productive_hour=data.get("most_productive_hour"),
            most_common_category=data.get("most_common_category"),
            most_common_mood=data.get("most_common_mood"),
        )


@dataclass(frozen=True)
class WeeklyBucket:
    """Statistics for one Sunday-anchored week (Sunday to Saturday)."""

    owner_id: str
    week_start: date
    week_end: date
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    pending_tasks: int = 0
    completion_rate: float = 0.0
    most_productive_day: Optional[str] = None
    most_common_category: Optional[str] = None
    most_common_mood: Optional[str] = None

    def natural_key(self) -> dict:
        return {"owner_id": self.owner_id, "week_start": self.week_start.isoformat()}

    def to_dict(self) -> dict:
        data = asdict(self)
        data["week_start"] = self.week_start.isoformat()
        data["week_end"] = self.week_end.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyBucket":
        return cls(
            owner_id=data["owner_id"],
            week_start=date.fromisoformat(data["week_start"]),
            week_end=date.fromisoformat(data["week_end"]),
            total_tasks=data.get("total_tasks", 0),
            completed_tasks=data.get("completed_tasks", 0),
            in_progress_tasks=data.get("in_progress_tasks", 0),
            pending_tasks=data.get("pending_tasks", 0),
            completion_rate=float(data.get("completion_rate", 0)),
            most_productive_day=data.get("most_productive_day"),
            most_common_category=data.get("most_common_category"),
            most_common_mood=data.get("most_common_mood"),
        )


@dataclass(frozen=True)
class MoodBucket:
    """
    Tasks created on a day the mood was logged.

    ``position`` is the order the mood was first logged that day.
    """

    owner_id: str
    mood_name: str
    date: date
    task_count: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0
    position: int = 0

    def natural_key(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "mood_name": self.mood_name,
            "date": self.date.isoformat(),
        }

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MoodBucket":
        return cls(
            owner_id=data["owner_id"],
            mood_name=data["mood_name"],
            date=date.fromisoformat(data["date"]),
            task_count=data.get("task_count", 0),
            completed_tasks=data.get("completed_tasks", 0),
            completion_rate=float(data.get("completion_rate", 0)),
            position=data.get("position", 0),
        )


@dataclass(frozen=True)
class CategoryBucket:
    """
    Tasks of one category created on one day.

    ``position`` is the order the category was first seen that day.
    """

    owner_id: str
    category: str
    date: date
    task_count: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0
    position: int = 0

    def natural_key(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "category": self.category,
            "date": self.date.isoformat(),
        }

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryBucket":
        return cls(
            owner_id=data["owner_id"],
            category=data["category"],
            date=date.fromisoformat(data["date"]),
            task_count=data.get("task_count", 0),
            completed_tasks=data.get("completed_tasks", 0),
            completion_rate=float(data.get("completion_rate", 0)),
            position=data.get("position", 0),
        )


BUCKET_TYPES = {
    BucketFamily.DAILY: DailyBucket,
    BucketFamily.WEEKLY: WeeklyBucket,
    BucketFamily.MOOD: MoodBucket,
    BucketFamily.CATEGORY: CategoryBucket,
}


def bucket_sort_key(bucket) -> Tuple:
    """
    Chronological order used for every family read from a cache.

    Mood and category rows on the same day keep the order their first event
    was seen in, so first-seen tie-breaks survive a cache round trip.
    """
    if isinstance(bucket, WeeklyBucket):
        return (bucket.week_start,)
    if isinstance(bucket, (MoodBucket, CategoryBucket)):
        return (bucket.date, bucket.position)
    return (bucket.date,)


@dataclass(frozen=True)
class Insight:
    """A rendered sentence plus an optional actionable tip."""

    text: str
    type: InsightType
    recommendation: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "type": self.type.value,
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Insight":
        return cls(
            text=data["text"],
            type=InsightType(data["type"]),
            recommendation=data.get("recommendation"),
        )


@dataclass
class InsightSet:
    """The cached insights for one ``(owner_id, time_range)``."""

    owner_id: str
    time_range: str
    insights: List[Insight] = field(default_factory=list)
    generated_at: Optional[datetime] = None
