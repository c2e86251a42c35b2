"""
FOCUSFLOW Analytics API - Analytics Router

Read endpoints for bucket families, summary and insights.
All endpoints are JWT-protected and user-scoped.
"""

from typing import Annotated, Awaitable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from focusflow.analytics.bucket_cache import BucketCacheInterface, MongoBucketCache
from focusflow.analytics.errors import InvalidRange
from focusflow.analytics.insight_cache import InsightCacheInterface, MongoInsightCache
from focusflow.analytics.models import InsightSet
from focusflow.analytics.schemas import (
    AnalyticsSummary,
    CategoryAnalyticsResponse,
    CategoryBucketSchema,
    CategoryDistributionResponse,
    DailyAnalyticsResponse,
    DailyBucketSchema,
    InsightSchema,
    InsightsResponse,
    MoodAnalyticsResponse,
    MoodBucketSchema,
    WeeklyAnalyticsResponse,
    WeeklyBucketSchema,
)
from focusflow.analytics.service import AnalyticsService
from focusflow.auth.dependencies import CurrentOwner
from focusflow.clock import Clock, get_clock
from focusflow.database import get_database
from focusflow.moods.repository import MoodRepositoryInterface
from focusflow.moods.router import get_mood_repository
from focusflow.tasks.repository import TaskRepositoryInterface
from focusflow.tasks.router import get_task_repository

T = TypeVar("T")

router = APIRouter(prefix="/analytics", tags=["Analytics"])

RangeQuery = Annotated[
    str,
    Query(alias="range", description="7days, 30days, 90days or all"),
]


async def get_bucket_cache(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> BucketCacheInterface:
    return MongoBucketCache(db)


async def get_insight_cache(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> InsightCacheInterface:
    return MongoInsightCache(db)


async def get_analytics_service(
    task_repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
    mood_repository: Annotated[MoodRepositoryInterface, Depends(get_mood_repository)],
    bucket_cache: Annotated[BucketCacheInterface, Depends(get_bucket_cache)],
    insight_cache: Annotated[InsightCacheInterface, Depends(get_insight_cache)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> AnalyticsService:
    """Dependency to get analytics service instance."""
    return AnalyticsService(
        task_repository=task_repository,
        mood_repository=mood_repository,
        bucket_cache=bucket_cache,
        insight_cache=insight_cache,
        clock=clock,
    )


Service = Annotated[AnalyticsService, Depends(get_analytics_service)]


async def _resolved(operation: Awaitable[T]) -> T:
    """Await a service call, turning an unknown range token into a 400."""
    try:
        return await operation
    except InvalidRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _insights_response(insight_set: InsightSet) -> InsightsResponse:
    return InsightsResponse(
        time_range=insight_set.time_range,
        generated_at=insight_set.generated_at,
        insights=[InsightSchema.model_validate(i) for i in insight_set.insights],
    )


@router.get("/daily", response_model=DailyAnalyticsResponse, summary="Daily buckets")
async def get_daily_analytics(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> DailyAnalyticsResponse:
    buckets = await _resolved(service.get_daily_analytics(current_owner, time_range))
    return DailyAnalyticsResponse(
        time_range=time_range,
        buckets=[DailyBucketSchema.model_validate(b) for b in buckets],
    )


@router.get("/weekly", response_model=WeeklyAnalyticsResponse, summary="Weekly buckets")
async def get_weekly_analytics(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> WeeklyAnalyticsResponse:
    """
    Sunday-to-Saturday weeks touched by the range.

    Each row counts its whole week, including days before the range starts,
    so weekly totals can exceed the daily totals for the same range.
    """
    buckets = await _resolved(service.get_weekly_analytics(current_owner, time_range))
    return WeeklyAnalyticsResponse(
        time_range=time_range,
        buckets=[WeeklyBucketSchema.model_validate(b) for b in buckets],
    )


@router.get("/moods", response_model=MoodAnalyticsResponse, summary="Mood buckets")
async def get_mood_analytics(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> MoodAnalyticsResponse:
    buckets = await _resolved(service.get_mood_analytics(current_owner, time_range))
    return MoodAnalyticsResponse(
        time_range=time_range,
        buckets=[MoodBucketSchema.model_validate(b) for b in buckets],
    )


@router.get("/categories", response_model=CategoryAnalyticsResponse, summary="Category buckets")
async def get_category_analytics(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> CategoryAnalyticsResponse:
    buckets = await _resolved(service.get_category_analytics(current_owner, time_range))
    return CategoryAnalyticsResponse(
        time_range=time_range,
        buckets=[CategoryBucketSchema.model_validate(b) for b in buckets],
    )


@router.get(
    "/distribution",
    response_model=CategoryDistributionResponse,
    summary="Task count per category",
)
async def get_category_distribution(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> CategoryDistributionResponse:
    counts = await _resolved(service.get_category_distribution(current_owner, time_range))
    return CategoryDistributionResponse(time_range=time_range, counts=counts)


@router.get("/summary", response_model=AnalyticsSummary, summary="Headline totals")
async def get_summary(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> AnalyticsSummary:
    return await _resolved(service.get_summary(current_owner, time_range))


@router.get("/insights", response_model=InsightsResponse, summary="Productivity insights")
async def get_insights(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> InsightsResponse:
    """
    Return the cached insight set for the range, generating it on first use.

    Cached insights are not revalidated against newer tasks; use the
    regenerate endpoint to refresh them.
    """
    insight_set = await _resolved(service.get_insights(current_owner, time_range))
    return _insights_response(insight_set)


@router.post(
    "/insights/regenerate",
    response_model=InsightsResponse,
    summary="Regenerate productivity insights",
)
async def regenerate_insights(
    current_owner: CurrentOwner,
    service: Service,
    time_range: RangeQuery = "7days",
) -> InsightsResponse:
    insight_set = await _resolved(service.regenerate_insights(current_owner, time_range))
    return _insights_response(insight_set)
