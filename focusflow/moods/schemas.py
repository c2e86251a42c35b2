"""
FOCUSFLOW Analytics API - Mood Schemas
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MoodCreateRequest(BaseModel):
    """Request model for logging a mood."""

    mood_name: str = Field(min_length=1, max_length=50, description="Mood name, e.g. Happy")
    timestamp: Optional[datetime] = Field(default=None, description="When the mood was felt; defaults to now")


class MoodResponse(BaseModel):
    id: str
    owner_id: str
    mood_name: str
    timestamp: datetime


class MoodListResponse(BaseModel):
    moods: List[MoodResponse] = Field(description="Mood entries, newest first")
    total: int = Field(description="Number of entries")
