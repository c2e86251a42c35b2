"""
FOCUSFLOW Analytics API - Task Router

Endpoints for logging tasks and their status transitions.
All endpoints are JWT-protected and user-scoped.
"""

from typing import Annotated

from fastapi import APIRouter, HTTPException, status, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from focusflow.database import get_database
from focusflow.auth.dependencies import CurrentOwner
from focusflow.clock import Clock, get_clock
from focusflow.analytics.errors import InvalidRange
from focusflow.analytics.time_range import resolve_time_range
from focusflow.tasks.models import TaskEvent
from focusflow.tasks.repository import TaskRepository, TaskRepositoryInterface
from focusflow.tasks.schemas import (
    TaskCreateRequest,
    TaskStatusUpdateRequest,
    TaskResponse,
    TaskListResponse,
)


router = APIRouter(prefix="/tasks", tags=["Tasks"])


async def get_task_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> TaskRepositoryInterface:
    """Dependency to get task repository instance."""
    return TaskRepository(db)


def _to_response(task: TaskEvent) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        owner_id=task.owner_id,
        title=task.title,
        category=task.category,
        status=task.status,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a task",
)
async def create_task(
    request: TaskCreateRequest,
    current_owner: CurrentOwner,
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
) -> TaskResponse:
    task = TaskEvent.create(
        owner_id=current_owner,
        title=request.title,
        category=request.category,
        status=request.status,
        created_at=request.created_at,
    )
    return _to_response(await repository.create(task))


@router.patch(
    "/{task_id}/status",
    response_model=TaskResponse,
    summary="Change a task's status",
)
async def update_task_status(
    task_id: str,
    request: TaskStatusUpdateRequest,
    current_owner: CurrentOwner,
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
) -> TaskResponse:
    """
    Move a task between pending, in_progress and completed.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    task = await repository.update_status(task_id, current_owner, request.status)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return _to_response(task)


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks in a time range",
)
async def list_tasks(
    current_owner: CurrentOwner,
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
    clock: Annotated[Clock, Depends(get_clock)],
    time_range: str = Query(default="7days", alias="range", description="7days, 30days, 90days or all"),
) -> TaskListResponse:
    try:
        window = resolve_time_range(time_range, clock())
    except InvalidRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    tasks = await repository.list_tasks(current_owner, window.start, window.end)
    return TaskListResponse(tasks=[_to_response(t) for t in tasks], total=len(tasks))
