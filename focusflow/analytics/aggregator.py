"""
FOCUSFLOW Analytics API - Bucket Aggregator

Stateless functions turning raw task and mood events into bucket rows.
Nothing here performs I/O; persistence belongs to the bucket cache.

Events are always traversed in ``(timestamp, id)`` ascending order, and every
"most common" value is a mode whose ties go to the value seen first in that
traversal. Day boundaries are UTC.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

from focusflow.analytics.models import (
    DailyBucket,
    WeeklyBucket,
    MoodBucket,
    CategoryBucket,
    bucket_sort_key,
)
from focusflow.analytics.time_range import DateWindow, as_utc, week_start_for
from focusflow.moods.models import MoodEvent
from focusflow.tasks.enums import TaskCategory, TaskStatus
from focusflow.tasks.models import TaskEvent

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

DEFAULT_MIN_SAMPLE_SIZE = 3


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[(day.weekday() + 1) % 7]


def completion_rate(completed: int | float, total: int | float) -> float:
    """Percentage in [0, 100] rounded to 2 decimals; 0 when there is nothing to complete."""
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 2)


def first_mode(values: Iterable[K]) -> Optional[K]:
    """Most frequent value; ties go to the value encountered first."""
    counts: Dict[K, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    best: Optional[K] = None
    best_count = 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def _partition(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    groups: Dict[K, List[T]] = defaultdict(list)
    for item in items:
        groups[key(item)].append(item)
    return dict(groups)


def _task_day(task: TaskEvent) -> date:
    return as_utc(task.created_at).date()


def _mood_day(mood: MoodEvent) -> date:
    return as_utc(mood.timestamp).date()


def ordered_tasks(tasks: Iterable[TaskEvent], owner_id: str) -> List[TaskEvent]:
    """The owner's tasks, oldest first, ties broken by id."""
    owned = [t for t in tasks if t.owner_id == owner_id]
    return sorted(owned, key=lambda t: (as_utc(t.created_at), t.id))


def ordered_moods(moods: Iterable[MoodEvent], owner_id: str) -> List[MoodEvent]:
    """The owner's mood entries, oldest first, ties broken by id."""
    owned = [m for m in moods if m.owner_id == owner_id]
    return sorted(owned, key=lambda m: (as_utc(m.timestamp), m.id))


class StatusTally:
    """Status counts for a group of tasks."""

    __slots__ = ("total", "completed", "in_progress", "pending")

    def __init__(self, tasks: Sequence[TaskEvent] = ()):
        self.total = len(tasks)
        self.completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
        self.in_progress = sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS)
        self.pending = sum(1 for t in tasks if t.status == TaskStatus.PENDING)

    @property
    def rate(self) -> float:
        return completion_rate(self.completed, self.total)


def _window_days(window: DateWindow, *event_days: Iterable[date]) -> List[date]:
    """Every day of a bounded window, or only days with events for ``all``."""
    if window.is_bounded:
        return list(window.days())
    seen = set()
    for days in event_days:
        seen.update(days)
    return sorted(day for day in seen if day <= window.today)


def _in_window(window: DateWindow, tasks: List[TaskEvent], moods: List[MoodEvent]):
    return (
        [t for t in tasks if window.contains(t.created_at)],
        [m for m in moods if window.contains(m.timestamp)],
    )


def compute_daily_buckets(
    owner_id: str,
    tasks: Iterable[TaskEvent],
    moods: Iterable[MoodEvent],
    window: DateWindow,
) -> List[DailyBucket]:
    """
    One row per day.

    Bounded windows always yield every day (zero-filled) so trend charts have
    no gaps; the ``all`` window yields only days with a task or a mood entry.
    """
    task_list, mood_list = _in_window(
        window, ordered_tasks(tasks, owner_id), ordered_moods(moods, owner_id)
    )
    tasks_by_day = _partition(task_list, _task_day)
    moods_by_day = _partition(mood_list, _mood_day)

    buckets: List[DailyBucket] = []
    for day in _window_days(window, tasks_by_day, moods_by_day):
        day_tasks = tasks_by_day.get(day, [])
        tally = StatusTally(day_tasks)
        buckets.append(
            DailyBucket(
                owner_id=owner_id,
                date=day,
                total_tasks=tally.total,
                completed_tasks=tally.completed,
                in_progress_tasks=tally.in_progress,
                pending_tasks=tally.pending,
                completion_rate=tally.rate,
                most_productive_hour=first_mode(
                    as_utc(t.created_at).hour
                    for t in day_tasks
                    if t.status == TaskStatus.COMPLETED
                ),
                most_common_category=first_mode(t.category.value for t in day_tasks),
                most_common_mood=first_mode(m.mood_name for m in moods_by_day.get(day, [])),
            )
        )
    return buckets


def most_productive_weekday(
    day_stats: Iterable[tuple[str, int, int]],
    min_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
) -> Optional[tuple[str, float]]:
    """
    Pick the weekday with the best completion rate.

    ``day_stats`` yields ``(weekday, total, completed)``; rows for the same
    weekday are summed. Weekdays with fewer than ``min_sample_size`` tasks are
    left out of contention entirely. Weekdays are compared Sunday first and
    the earlier one keeps a tie.
    """
    totals = {name: [0, 0] for name in WEEKDAY_NAMES}
    for name, total, completed in day_stats:
        totals[name][0] += total
        totals[name][1] += completed

    best: Optional[tuple[str, float]] = None
    for name in WEEKDAY_NAMES:
        total, completed = totals[name]
        if total < min_sample_size:
            continue
        rate = completion_rate(completed, total)
        if best is None or rate > best[1]:
            best = (name, rate)
    return best


def compute_weekly_buckets(
    owner_id: str,
    tasks: Iterable[TaskEvent],
    moods: Iterable[MoodEvent],
    window: DateWindow,
    min_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
) -> List[WeeklyBucket]:
    """
    One row per Sunday-anchored week touched by the window.

    Each row summarizes its whole week, so callers pass events for the
    week-aligned window (see ``week_aligned_bounds``).
    """
    task_list = ordered_tasks(tasks, owner_id)
    mood_list = ordered_moods(moods, owner_id)
    tasks_by_week = _partition(task_list, lambda t: week_start_for(_task_day(t)))
    moods_by_week = _partition(mood_list, lambda m: week_start_for(_mood_day(m)))

    if window.is_bounded:
        weeks = sorted({week_start_for(day) for day in window.days()})
    else:
        weeks = sorted(
            week for week in set(tasks_by_week) | set(moods_by_week)
            if week <= week_start_for(window.today)
        )

    buckets: List[WeeklyBucket] = []
    for week_start in weeks:
        week_tasks = tasks_by_week.get(week_start, [])
        tally = StatusTally(week_tasks)
        per_day = _partition(week_tasks, _task_day)
        best_day = most_productive_weekday(
            (
                (weekday_name(day), len(day_tasks), StatusTally(day_tasks).completed)
                for day, day_tasks in per_day.items()
            ),
            min_sample_size,
        )
        buckets.append(
            WeeklyBucket(
                owner_id=owner_id,
                week_start=week_start,
                week_end=week_start + timedelta(days=6),
                total_tasks=tally.total,
                completed_tasks=tally.completed,
                in_progress_tasks=tally.in_progress,
                pending_tasks=tally.pending,
                completion_rate=tally.rate,
                most_productive_day=best_day[0] if best_day else None,
                most_common_category=first_mode(t.category.value for t in week_tasks),
                most_common_mood=first_mode(
                    m.mood_name for m in moods_by_week.get(week_start, [])
                ),
            )
        )
    return buckets


def compute_mood_buckets(
    owner_id: str,
    tasks: Iterable[TaskEvent],
    moods: Iterable[MoodEvent],
    window: DateWindow,
) -> List[MoodBucket]:
    """
    One row per ``(mood, day)`` where the mood was logged and tasks were created.

    A mood's tasks are all tasks created during the UTC day on which it was
    logged. Logging the same mood twice in a day does not count tasks twice.
    """
    task_list, mood_list = _in_window(
        window, ordered_tasks(tasks, owner_id), ordered_moods(moods, owner_id)
    )
    tasks_by_day = _partition(task_list, _task_day)
    moods_by_day = _partition(mood_list, _mood_day)

    buckets: List[MoodBucket] = []
    for day in sorted(moods_by_day):
        day_tasks = tasks_by_day.get(day, [])
        if not day_tasks:
            continue
        tally = StatusTally(day_tasks)
        first_seen = dict.fromkeys(m.mood_name for m in moods_by_day[day])
        for position, mood_name in enumerate(first_seen):
            buckets.append(
                MoodBucket(
                    owner_id=owner_id,
                    mood_name=mood_name,
                    date=day,
                    task_count=tally.total,
                    completed_tasks=tally.completed,
                    completion_rate=tally.rate,
                    position=position,
                )
            )
    return sorted(buckets, key=bucket_sort_key)


def compute_category_buckets(
    owner_id: str,
    tasks: Iterable[TaskEvent],
    window: DateWindow,
) -> List[CategoryBucket]:
    """
    One row per ``(category, day)`` with at least one task.

    Rows within a day are ordered by when the category was first seen.
    """
    task_list, _ = _in_window(window, ordered_tasks(tasks, owner_id), [])

    buckets: List[CategoryBucket] = []
    for day, day_tasks in sorted(_partition(task_list, _task_day).items()):
        by_category = _partition(day_tasks, lambda t: t.category.value)
        for position, (category, category_tasks) in enumerate(by_category.items()):
            tally = StatusTally(category_tasks)
            buckets.append(
                CategoryBucket(
                    owner_id=owner_id,
                    category=category,
                    date=day,
                    task_count=tally.total,
                    completed_tasks=tally.completed,
                    completion_rate=tally.rate,
                    position=position,
                )
            )
    return sorted(buckets, key=bucket_sort_key)


def category_distribution(buckets: Iterable[CategoryBucket]) -> Dict[str, int]:
    """Task count per category, every known category present (zero-filled)."""
    counts = {category.value: 0 for category in TaskCategory}
    for bucket in buckets:
        counts[bucket.category] = counts.get(bucket.category, 0) + bucket.task_count
    return counts

