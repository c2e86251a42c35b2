"""
FOCUSFLOW Analytics API - Analytics Service

The analytics engine: resolves ranges, reads through the bucket cache,
aggregates raw events on a miss and generates insights.

The service keeps no state between requests. All persistence sits behind the
bucket and insight caches, whose writes are idempotent upserts, so concurrent
cold reads for the same owner and range are harmless.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from focusflow.analytics.aggregator import (
    category_distribution,
    completion_rate,
    compute_category_buckets,
    compute_daily_buckets,
    compute_mood_buckets,
    compute_weekly_buckets,
)
from focusflow.analytics.bucket_cache import BucketCacheInterface
from focusflow.analytics.errors import StoreUnavailable
from focusflow.analytics.insight_cache import InsightCacheInterface
from focusflow.analytics.insights import InsightGenerator
from focusflow.analytics.models import (
    BucketFamily,
    CategoryBucket,
    DailyBucket,
    InsightSet,
    MoodBucket,
    WeeklyBucket,
)
from focusflow.analytics.schemas import AnalyticsSummary
from focusflow.analytics.time_range import DateWindow, resolve_time_range, week_aligned_bounds
from focusflow.config import settings
from focusflow.moods.repository import MoodRepositoryInterface
from focusflow.tasks.repository import TaskRepositoryInterface

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service layer for analytics and insights."""

    def __init__(
        self,
        task_repository: TaskRepositoryInterface,
        mood_repository: MoodRepositoryInterface,
        bucket_cache: BucketCacheInterface,
        insight_cache: InsightCacheInterface,
        clock: Optional[Callable[[], datetime]] = None,
        generator: Optional[InsightGenerator] = None,
    ):
        """
        Initialize the analytics service.

        Args:
            task_repository: Task event store
            mood_repository: Mood event store
            bucket_cache: Persisted bucket rows
            insight_cache: Persisted insight sets
            clock: Optional clock function for testing (returns current datetime)
            generator: Optional insight generator (defaults to configured limits)
        """
        self.task_repository = task_repository
        self.mood_repository = mood_repository
        self.bucket_cache = bucket_cache
        self.insight_cache = insight_cache
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.generator = generator or InsightGenerator(
            limit=settings.INSIGHT_LIMIT,
            min_sample_size=settings.MIN_SAMPLE_SIZE,
        )

    def _now(self) -> datetime:
        """Get current time using the configured clock."""
        return self._clock()

    def _window(self, time_range: str) -> DateWindow:
        return resolve_time_range(time_range, self._now())

    async def _compute(self, owner_id: str, family: BucketFamily, window: DateWindow) -> list:
        """Aggregate one family from the raw event store."""
        if family == BucketFamily.CATEGORY:
            tasks = await self.task_repository.list_tasks(owner_id, window.start, window.end)
            return compute_category_buckets(owner_id, tasks, window)

        if family == BucketFamily.WEEKLY:
            start, end = week_aligned_bounds(window)
        else:
            start, end = window.start, window.end

        tasks, moods = await asyncio.gather(
            self.task_repository.list_tasks(owner_id, start, end),
            self.mood_repository.list_moods(owner_id, start, end),
        )
        if family == BucketFamily.DAILY:
            return compute_daily_buckets(owner_id, tasks, moods, window)
        if family == BucketFamily.WEEKLY:
            return compute_weekly_buckets(
                owner_id, tasks, moods, window, settings.MIN_SAMPLE_SIZE
            )
        return compute_mood_buckets(owner_id, tasks, moods, window)

    async def _load(
        self,
        owner_id: str,
        family: BucketFamily,
        window: DateWindow,
        refresh: bool = False,
    ) -> list:
        """
        Read a family through the bucket cache.

        On a miss the rows are computed once and written back. A failed write
        is logged and the computed rows are still returned; a failed read or
        event fetch propagates. ``refresh`` skips the read and recomputes.
        """
        cached = None if refresh else await self.bucket_cache.read(owner_id, family, window)
        if cached is not None:
            logger.debug(
                f"Bucket cache hit: owner={owner_id} family={family.value} range={window.time_range.value}"
            )
            return cached

        logger.debug(
            f"Bucket cache miss: owner={owner_id} family={family.value} range={window.time_range.value}"
        )
        buckets = await self._compute(owner_id, family, window)
        try:
            await self.bucket_cache.write(owner_id, family, window, buckets)
        except StoreUnavailable as e:
            logger.warning(
                f"Could not cache {family.value} buckets for owner {owner_id}: {e}",
                exc_info=True,
            )
        return buckets

    async def get_daily_analytics(self, owner_id: str, time_range: str) -> List[DailyBucket]:
        return await self._load(owner_id, BucketFamily.DAILY, self._window(time_range))

    async def get_weekly_analytics(self, owner_id: str, time_range: str) -> List[WeeklyBucket]:
        return await self._load(owner_id, BucketFamily.WEEKLY, self._window(time_range))

    async def get_mood_analytics(self, owner_id: str, time_range: str) -> List[MoodBucket]:
        return await self._load(owner_id, BucketFamily.MOOD, self._window(time_range))

    async def get_category_analytics(self, owner_id: str, time_range: str) -> List[CategoryBucket]:
        return await self._load(owner_id, BucketFamily.CATEGORY, self._window(time_range))

    async def get_category_distribution(self, owner_id: str, time_range: str) -> dict[str, int]:
        """Task count per category over the range, zero-filled."""
        return category_distribution(await self.get_category_analytics(owner_id, time_range))

    async def get_summary(self, owner_id: str, time_range: str) -> AnalyticsSummary:
        """Headline totals for the range, summed from the daily rows."""
        window = self._window(time_range)
        daily, moods = await asyncio.gather(
            self._load(owner_id, BucketFamily.DAILY, window),
            self.mood_repository.list_moods(owner_id, window.start, window.end),
        )
        total = sum(b.total_tasks for b in daily)
        completed = sum(b.completed_tasks for b in daily)
        return AnalyticsSummary(
            time_range=window.time_range.value,
            label=window.label,
            total_tasks=total,
            completed_tasks=completed,
            in_progress_tasks=sum(b.in_progress_tasks for b in daily),
            pending_tasks=sum(b.pending_tasks for b in daily),
            completion_rate=completion_rate(completed, total),
            mood_entries=len(moods),
        )

    async def get_insights(self, owner_id: str, time_range: str) -> InsightSet:
        """Cached insights for the range, generated on first request."""
        window = self._window(time_range)
        cached = await self.insight_cache.read(owner_id, window.time_range.value)
        if cached is not None:
            return cached
        return await self._generate(owner_id, window, refresh=False)

    async def regenerate_insights(self, owner_id: str, time_range: str) -> InsightSet:
        """
        Always recompute insights and replace the cached set.

        Bucket rows are recomputed from raw events too, so the new set reflects
        tasks and moods logged since the last cold read.
        """
        return await self._generate(owner_id, self._window(time_range), refresh=True)

    async def _generate(self, owner_id: str, window: DateWindow, refresh: bool) -> InsightSet:
        # All four families are loaded (and cached) together; if any fetch
        # fails the whole request fails.
        daily, _weekly, moods, categories = await asyncio.gather(
            self._load(owner_id, BucketFamily.DAILY, window, refresh),
            self._load(owner_id, BucketFamily.WEEKLY, window, refresh),
            self._load(owner_id, BucketFamily.MOOD, window, refresh),
            self._load(owner_id, BucketFamily.CATEGORY, window, refresh),
        )
        insights = self.generator.generate(daily, moods, categories)
        generated_at = self._now()
        logger.info(
            f"Generated {len(insights)} insights for owner {owner_id} ({window.time_range.value})"
        )

        try:
            await self.insight_cache.write(owner_id, window.time_range.value, insights, generated_at)
        except StoreUnavailable as e:
            logger.warning(f"Could not cache insights for owner {owner_id}: {e}", exc_info=True)

        return InsightSet(
            owner_id=owner_id,
            time_range=window.time_range.value,
            insights=insights,
            generated_at=generated_at,
        )
