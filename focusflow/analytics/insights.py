"""
FOCUSFLOW Analytics API - Insight Generator

Derives productivity insights from bucket rows.
This is a deterministic, side-effect free computation.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from focusflow.analytics.aggregator import (
    DEFAULT_MIN_SAMPLE_SIZE,
    completion_rate,
    first_mode,
    most_productive_weekday,
    weekday_name,
)
from focusflow.analytics.models import (
    CategoryBucket,
    DailyBucket,
    Insight,
    InsightType,
    MoodBucket,
)

DEFAULT_INSIGHT_LIMIT = 5

INSUFFICIENT_DATA = Insight(
    text="There isn't enough data yet to generate productivity insights.",
    type=InsightType.GENERAL,
    recommendation="Keep logging your tasks and moods to unlock personalized insights.",
)


def format_hour(hour: int) -> str:
    """0 -> '12 AM', 13 -> '1 PM'."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def time_of_day(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def rate_tier(rate: float) -> str:
    if rate >= 70:
        return "higher"
    if rate >= 50:
        return "moderate"
    return "lower"


def _percent(rate: float) -> str:
    return f"{rate:.0f}%"


def _rollup(rows: Iterable[Tuple[str, int, int]]) -> Dict[str, List[int]]:
    """Sum ``(name, task_count, completed)`` rows per name, keeping first-seen order."""
    totals: Dict[str, List[int]] = {}
    for name, count, completed in rows:
        entry = totals.setdefault(name, [0, 0])
        entry[0] += count
        entry[1] += completed
    return totals


def _most_frequent(totals: Dict[str, List[int]]) -> Optional[Tuple[str, float]]:
    best: Optional[Tuple[str, int]] = None
    for name, (count, _) in totals.items():
        if count > 0 and (best is None or count > best[1]):
            best = (name, count)
    if best is None:
        return None
    count, completed = totals[best[0]]
    return best[0], completion_rate(completed, count)


def _most_productive(
    totals: Dict[str, List[int]], min_sample_size: int
) -> Optional[Tuple[str, float]]:
    best: Optional[Tuple[str, float]] = None
    for name, (count, completed) in totals.items():
        if count < min_sample_size:
            continue
        rate = completion_rate(completed, count)
        if best is None or rate > best[1]:
            best = (name, rate)
    return best


class InsightGenerator:
    """
    Runs a fixed pipeline of analyses over bucket rows.

    Each analysis yields at most one insight. Results keep the pipeline order
    (weekday, mood, throughput, category, hour) and are truncated to ``limit``;
    there is no score-based re-ranking.
    """

    def __init__(
        self,
        limit: int = DEFAULT_INSIGHT_LIMIT,
        min_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
    ):
        self.limit = limit
        self.min_sample_size = min_sample_size

    def _weekday_insight(self, daily: Sequence[DailyBucket]) -> Optional[Insight]:
        best = most_productive_weekday(
            ((weekday_name(b.date), b.total_tasks, b.completed_tasks) for b in daily),
            self.min_sample_size,
        )
        if best is None:
            return None
        day, rate = best
        return Insight(
            text=f"You're most productive on {day}s, with a {_percent(rate)} task completion rate.",
            type=InsightType.TIME,
            recommendation=f"Schedule your most important work on {day}s to make the most of your momentum.",
        )

    def _mood_insight(self, moods: Sequence[MoodBucket]) -> Optional[Insight]:
        totals = _rollup((b.mood_name, b.task_count, b.completed_tasks) for b in moods)
        common = _most_frequent(totals)
        if common is None:
            return None
        mood, rate = common
        productive = _most_productive(totals, self.min_sample_size)

        if productive is None:
            recommendation = (
                "Log your mood on more days with tasks to discover which moods help you get things done."
            )
        elif productive[0] == mood:
            recommendation = (
                f"Feeling {mood} is also when you complete the most tasks. "
                "Build routines that help you get into this state."
            )
        else:
            recommendation = (
                f"You complete the most tasks when feeling {productive[0]} "
                f"({_percent(productive[1])}). Plan demanding work for those times."
            )

        return Insight(
            text=(
                f"Your most common mood is {mood}, and your task completion rate is "
                f"{rate_tier(rate)} when you feel this way ({_percent(rate)})."
            ),
            type=InsightType.MOOD,
            recommendation=recommendation,
        )

    def _throughput_insight(self, daily: Sequence[DailyBucket]) -> Optional[Insight]:
        days_with_data = [b for b in daily if b.total_tasks > 0]
        if not days_with_data:
            return None
        completed = sum(b.completed_tasks for b in days_with_data)
        # half-up, so 2.25 reads as 2.3
        average = (Decimal(completed) / len(days_with_data)).quantize(Decimal("0.1"), ROUND_HALF_UP)

        if average < 3:
            recommendation = "Try breaking larger tasks into smaller steps to build momentum."
        else:
            recommendation = "You're keeping a strong pace. Time-blocking your day can help you sustain it."

        return Insight(
            text=f"You complete an average of {average} tasks per day.",
            type=InsightType.PRODUCTIVITY,
            recommendation=recommendation,
        )

    def _category_insight(self, categories: Sequence[CategoryBucket]) -> Optional[Insight]:
        totals = _rollup((b.category, b.task_count, b.completed_tasks) for b in categories)
        frequent = _most_frequent(totals)
        if frequent is None:
            return None
        category, rate = frequent
        productive = _most_productive(totals, self.min_sample_size)

        if productive is None:
            recommendation = (
                f"No category has {self.min_sample_size} or more tasks yet, so completion "
                "rates can't be compared. Keep logging tasks to see where you do best."
            )
        elif productive[0] == category:
            recommendation = (
                f"You also complete {category} tasks at the highest rate. "
                "Carry that focus over to your other categories."
            )
        else:
            recommendation = (
                f"You complete {productive[0]} tasks at the highest rate "
                f"({_percent(productive[1])}). Try applying what works there to your {category} tasks."
            )

        return Insight(
            text=(
                f"Most of your tasks are in the {category} category, "
                f"with a {_percent(rate)} completion rate."
            ),
            type=InsightType.CATEGORY,
            recommendation=recommendation,
        )

    def _hour_insight(self, daily: Sequence[DailyBucket]) -> Optional[Insight]:
        hour = first_mode(
            b.most_productive_hour for b in daily if b.most_productive_hour is not None
        )
        if hour is None:
            return None
        band = time_of_day(hour)
        return Insight(
            text=f"You tend to get the most done in the {band}, around {format_hour(hour)}.",
            type=InsightType.TIME,
            recommendation=f"Protect your {band} for focused work when your energy peaks.",
        )

    def generate(
        self,
        daily: Sequence[DailyBucket],
        moods: Sequence[MoodBucket],
        categories: Sequence[CategoryBucket],
    ) -> List[Insight]:
        """
        Generate insights for one owner and range.

        Args:
            daily: Daily rows in chronological order
            moods: Mood rows in chronological order
            categories: Category rows in chronological order

        Returns:
            At most ``limit`` insights, or the single general insight when no
            day in the range has any tasks
        """
        if not any(b.total_tasks > 0 for b in daily):
            return [INSUFFICIENT_DATA]

        candidates = [
            self._weekday_insight(daily),
            self._mood_insight(moods),
            self._throughput_insight(daily),
            self._category_insight(categories),
            self._hour_insight(daily),
        ]
        return [insight for insight in candidates if insight is not None][: self.limit]
