"""
FOCUSFLOW Analytics API - Analytics Schemas

Pydantic models for analytics and insight responses.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from focusflow.analytics.models import InsightType


class DailyBucketSchema(BaseModel):
    """Statistics for one day."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    completion_rate: float = Field(ge=0, le=100, description="Percentage, 2 decimals")
    most_productive_hour: Optional[int] = Field(default=None, ge=0, le=23)
    most_common_category: Optional[str] = None
    most_common_mood: Optional[str] = None


class WeeklyBucketSchema(BaseModel):
    """Statistics for one Sunday-to-Saturday week."""

    model_config = ConfigDict(from_attributes=True)

    week_start: date
    week_end: date
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    completion_rate: float = Field(ge=0, le=100)
    most_productive_day: Optional[str] = None
    most_common_category: Optional[str] = None
    most_common_mood: Optional[str] = None


class MoodBucketSchema(BaseModel):
    """Tasks created on a day a mood was logged."""

    model_config = ConfigDict(from_attributes=True)

    mood_name: str
    date: date
    task_count: int
    completed_tasks: int
    completion_rate: float = Field(ge=0, le=100)


class CategoryBucketSchema(BaseModel):
    """Tasks in one category on one day."""

    model_config = ConfigDict(from_attributes=True)

    category: str
    date: date
    task_count: int
    completed_tasks: int
    completion_rate: float = Field(ge=0, le=100)


class DailyAnalyticsResponse(BaseModel):
    time_range: str
    buckets: List[DailyBucketSchema]


class WeeklyAnalyticsResponse(BaseModel):
    time_range: str
    buckets: List[WeeklyBucketSchema]


class MoodAnalyticsResponse(BaseModel):
    time_range: str
    buckets: List[MoodBucketSchema]


class CategoryAnalyticsResponse(BaseModel):
    time_range: str
    buckets: List[CategoryBucketSchema]


class CategoryDistributionResponse(BaseModel):
    time_range: str
    counts: Dict[str, int] = Field(description="Task count per category, zero-filled")


class AnalyticsSummary(BaseModel):
    """Headline numbers for the analytics page."""

    time_range: str
    label: str = Field(description="Human-readable range, e.g. 'the last 7 days'")
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    completion_rate: float = Field(ge=0, le=100)
    mood_entries: int


class InsightSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    text: str
    type: InsightType
    recommendation: Optional[str] = None


class InsightsResponse(BaseModel):
    time_range: str
    generated_at: Optional[datetime] = Field(default=None, description="When the set was generated")
    insights: List[InsightSchema]
