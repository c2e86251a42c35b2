"""
FOCUSFLOW Analytics API - Task Enums

Enums for task fields as stored by the task list.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status values."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskCategory(str, Enum):
    """Task category classifications."""
    WORK = "work"
    STUDY = "study"
    CHORES = "chores"
    HEALTH = "health"
    SOCIAL = "social"
    OTHER = "other"
