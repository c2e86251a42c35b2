"""
FOCUSFLOW Analytics API - Mood Models

Mood entries are immutable once logged.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MoodEvent:
    """Mood entry for database storage."""

    id: str
    owner_id: str
    mood_name: str
    timestamp: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        owner_id: str,
        mood_name: str,
        timestamp: Optional[datetime] = None,
    ) -> "MoodEvent":
        """Create a new mood entry with generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            mood_name=mood_name,
            timestamp=timestamp or _utcnow(),
        )

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "owner_id": self.owner_id,
            "name": self.mood_name,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MoodEvent":
        return cls(
            id=data["_id"],
            owner_id=data["owner_id"],
            mood_name=data["name"],
            timestamp=data["timestamp"],
        )
