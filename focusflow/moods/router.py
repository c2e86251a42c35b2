"""
FOCUSFLOW Analytics API - Mood Router

Endpoints for logging moods. JWT-protected and user-scoped.
"""

from typing import Annotated

from fastapi import APIRouter, HTTPException, status, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from focusflow.database import get_database
from focusflow.auth.dependencies import CurrentOwner
from focusflow.clock import Clock, get_clock
from focusflow.analytics.errors import InvalidRange
from focusflow.analytics.time_range import resolve_time_range
from focusflow.moods.enums import canonical_mood_name
from focusflow.moods.models import MoodEvent
from focusflow.moods.repository import MoodRepository, MoodRepositoryInterface
from focusflow.moods.schemas import MoodCreateRequest, MoodResponse, MoodListResponse


router = APIRouter(prefix="/moods", tags=["Moods"])


async def get_mood_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> MoodRepositoryInterface:
    """Dependency to get mood repository instance."""
    return MoodRepository(db)


def _to_response(mood: MoodEvent) -> MoodResponse:
    return MoodResponse(
        id=mood.id,
        owner_id=mood.owner_id,
        mood_name=mood.mood_name,
        timestamp=mood.timestamp,
    )


@router.post(
    "",
    response_model=MoodResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a mood",
)
async def log_mood(
    request: MoodCreateRequest,
    current_owner: CurrentOwner,
    repository: Annotated[MoodRepositoryInterface, Depends(get_mood_repository)],
) -> MoodResponse:
    mood = MoodEvent.create(
        owner_id=current_owner,
        mood_name=canonical_mood_name(request.mood_name),
        timestamp=request.timestamp,
    )
    return _to_response(await repository.create(mood))


@router.get(
    "",
    response_model=MoodListResponse,
    summary="List moods in a time range",
)
async def list_moods(
    current_owner: CurrentOwner,
    repository: Annotated[MoodRepositoryInterface, Depends(get_mood_repository)],
    clock: Annotated[Clock, Depends(get_clock)],
    time_range: str = Query(default="7days", alias="range", description="7days, 30days, 90days or all"),
) -> MoodListResponse:
    try:
        window = resolve_time_range(time_range, clock())
    except InvalidRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    moods = await repository.list_moods(current_owner, window.start, window.end)
    return MoodListResponse(moods=[_to_response(m) for m in moods], total=len(moods))
