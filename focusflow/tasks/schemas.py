"""
FOCUSFLOW Analytics API - Task Schemas

Pydantic models for task API requests and responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from focusflow.tasks.enums import TaskStatus, TaskCategory


class TaskCreateRequest(BaseModel):
    """Request model for logging a task."""

    title: str = Field(min_length=1, max_length=500, description="Task title")
    category: TaskCategory = Field(default=TaskCategory.OTHER, description="Task category")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Task status")
    created_at: Optional[datetime] = Field(
        default=None, description="Creation time; defaults to now (for backfilling)"
    )


class TaskStatusUpdateRequest(BaseModel):
    """Request model for a status transition."""

    status: TaskStatus = Field(description="New task status")


class TaskResponse(BaseModel):
    """Response model for a single task."""

    id: str = Field(description="Task ID")
    owner_id: str = Field(description="Owner user ID")
    title: str = Field(description="Task title")
    category: TaskCategory = Field(description="Task category")
    status: TaskStatus = Field(description="Task status")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class TaskListResponse(BaseModel):
    """Response model for a list of tasks."""

    tasks: List[TaskResponse] = Field(description="List of tasks")
    total: int = Field(description="Total number of tasks in the list")
