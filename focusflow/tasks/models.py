"""
FOCUSFLOW Analytics API - Task Models

Task event as seen by analytics: the fields needed to bucket and score tasks.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid

from focusflow.tasks.enums import TaskStatus, TaskCategory


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class TaskEvent:
    """Task entity for database storage."""

    id: str
    owner_id: str
    title: str
    category: TaskCategory
    status: TaskStatus
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        owner_id: str,
        title: str,
        category: TaskCategory = TaskCategory.OTHER,
        status: TaskStatus = TaskStatus.PENDING,
        created_at: Optional[datetime] = None,
    ) -> "TaskEvent":
        """Create a new task with generated ID."""
        now = created_at or _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            category=category,
            status=status,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert task to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "category": self.category.value,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TaskEvent":
        """Create task from MongoDB document."""
        return cls(
            id=data["_id"],
            owner_id=data["owner_id"],
            title=data.get("title", ""),
            category=TaskCategory(data.get("category") or TaskCategory.OTHER.value),
            status=TaskStatus(data["status"]),
            created_at=data["created_at"],
            updated_at=data.get("updated_at", data["created_at"]),
        )
