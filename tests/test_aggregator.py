"""
FOCUSFLOW Analytics API - Bucket Aggregator Tests

CI-safe tests for the pure bucketing functions.
"""

import pytest
from datetime import date

from focusflow.analytics.aggregator import (
    category_distribution,
    completion_rate,
    compute_category_buckets,
    compute_daily_buckets,
    compute_mood_buckets,
    compute_weekly_buckets,
    first_mode,
    most_productive_weekday,
)
from focusflow.analytics.time_range import resolve_time_range
from focusflow.tasks.enums import TaskCategory, TaskStatus

from tests.factories import at, make_mood, make_task

COMPLETED = TaskStatus.COMPLETED
PENDING = TaskStatus.PENDING
IN_PROGRESS = TaskStatus.IN_PROGRESS


@pytest.fixture
def week_window(frozen_now):
    """7days window: Thursday Jan 9 .. Wednesday Jan 15, 2025."""
    return resolve_time_range("7days", frozen_now)


@pytest.fixture
def all_window(frozen_now):
    return resolve_time_range("all", frozen_now)


class TestHelpers:
    """Tests for rate and mode helpers."""

    def test_completion_rate_rounds_to_two_decimals(self):
        assert completion_rate(2, 3) == 66.67
        assert completion_rate(4, 5) == 80.0

    def test_completion_rate_is_zero_without_tasks(self):
        assert completion_rate(0, 0) == 0.0

    def test_first_mode_prefers_first_seen_on_ties(self):
        assert first_mode(["Calm", "Happy", "Happy", "Calm"]) == "Calm"
        assert first_mode(["b", "a"]) == "b"

    def test_first_mode_of_nothing_is_none(self):
        assert first_mode([]) is None

    def test_most_productive_weekday_excludes_small_samples(self):
        """Weekdays under the threshold are out of contention, not scored as zero."""
        best = most_productive_weekday(
            [("Monday", 4, 2), ("Tuesday", 2, 2)],
            min_sample_size=3,
        )
        assert best == ("Monday", 50.0)

    def test_most_productive_weekday_none_when_no_day_qualifies(self):
        assert most_productive_weekday([("Friday", 2, 2)], min_sample_size=3) is None

    def test_most_productive_weekday_sums_repeated_weekdays(self):
        best = most_productive_weekday([("Monday", 2, 2), ("Monday", 2, 0), ("Friday", 3, 1)])
        assert best == ("Monday", 50.0)


class TestDailyBuckets:
    """Tests for the daily family."""

    def test_monday_scenario(self, owner_id, week_window):
        """5 tasks on a Monday, 4 completed, Happy logged that day."""
        monday = (2025, 1, 13)
        tasks = [make_task(owner_id, at(*monday, 9 + i), COMPLETED) for i in range(4)]
        tasks.append(make_task(owner_id, at(*monday, 15), PENDING))
        moods = [make_mood(owner_id, "Happy", at(*monday, 8))]

        buckets = compute_daily_buckets(owner_id, tasks, moods, week_window)
        bucket = next(b for b in buckets if b.date == date(*monday))

        assert bucket.total_tasks == 5
        assert bucket.completed_tasks == 4
        assert bucket.completion_rate == 80.00
        assert bucket.most_common_mood == "Happy"

    def test_bounded_range_emits_every_day_zero_filled(self, owner_id, week_window):
        buckets = compute_daily_buckets(owner_id, [], [], week_window)

        assert [b.date for b in buckets] == [date(2025, 1, d) for d in range(9, 16)]
        for bucket in buckets:
            assert bucket.total_tasks == 0
            assert bucket.completion_rate == 0
            assert bucket.most_productive_hour is None
            assert bucket.most_common_category is None
            assert bucket.most_common_mood is None

    def test_status_counts_add_up(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 10, 9), COMPLETED),
            make_task(owner_id, at(2025, 1, 10, 10), IN_PROGRESS),
            make_task(owner_id, at(2025, 1, 10, 11), PENDING),
            make_task(owner_id, at(2025, 1, 11, 11), PENDING),
        ]

        for bucket in compute_daily_buckets(owner_id, tasks, [], week_window):
            assert bucket.total_tasks == (
                bucket.completed_tasks + bucket.in_progress_tasks + bucket.pending_tasks
            )
            assert 0 <= bucket.completion_rate <= 100
            assert (bucket.completion_rate == 0) == (bucket.completed_tasks == 0)

    def test_events_outside_window_are_ignored(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 8, 23), COMPLETED),
            make_task(owner_id, at(2025, 1, 16, 1), COMPLETED),
        ]
        buckets = compute_daily_buckets(owner_id, tasks, [], week_window)
        assert sum(b.total_tasks for b in buckets) == 0

    def test_all_range_emits_only_days_with_events(self, owner_id, all_window):
        tasks = [
            make_task(owner_id, at(2024, 12, 2), COMPLETED),
            make_task(owner_id, at(2025, 1, 10), PENDING),
        ]
        moods = [make_mood(owner_id, "Calm", at(2025, 1, 5))]

        buckets = compute_daily_buckets(owner_id, tasks, moods, all_window)

        assert [b.date for b in buckets] == [date(2024, 12, 2), date(2025, 1, 5), date(2025, 1, 10)]
        assert buckets[1].total_tasks == 0
        assert buckets[1].most_common_mood == "Calm"

    def test_mood_ties_go_to_first_logged(self, owner_id, week_window):
        moods = [
            make_mood(owner_id, "Happy", at(2025, 1, 14, 11)),
            make_mood(owner_id, "Calm", at(2025, 1, 14, 8)),
            make_mood(owner_id, "Happy", at(2025, 1, 14, 9)),
            make_mood(owner_id, "Calm", at(2025, 1, 14, 10)),
        ]
        buckets = compute_daily_buckets(owner_id, [], moods, week_window)
        bucket = next(b for b in buckets if b.date == date(2025, 1, 14))
        assert bucket.most_common_mood == "Calm"

    def test_moods_at_day_edges_belong_to_that_day(self, owner_id, week_window):
        moods = [
            make_mood(owner_id, "Tired", at(2025, 1, 12, 0, 0)),
            make_mood(owner_id, "Tired", at(2025, 1, 12, 23, 59)),
            make_mood(owner_id, "Happy", at(2025, 1, 13, 0, 0)),
        ]
        buckets = {b.date: b for b in compute_daily_buckets(owner_id, [], moods, week_window)}
        assert buckets[date(2025, 1, 12)].most_common_mood == "Tired"
        assert buckets[date(2025, 1, 13)].most_common_mood == "Happy"

    def test_most_common_category(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 14, 8), category=TaskCategory.HEALTH),
            make_task(owner_id, at(2025, 1, 14, 9), category=TaskCategory.STUDY),
            make_task(owner_id, at(2025, 1, 14, 10), category=TaskCategory.STUDY),
        ]
        buckets = compute_daily_buckets(owner_id, tasks, [], week_window)
        bucket = next(b for b in buckets if b.date == date(2025, 1, 14))
        assert bucket.most_common_category == "study"

    def test_most_productive_hour_uses_completed_tasks(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 14, 9, 5), COMPLETED),
            make_task(owner_id, at(2025, 1, 14, 9, 40), COMPLETED),
            make_task(owner_id, at(2025, 1, 14, 14), COMPLETED),
            make_task(owner_id, at(2025, 1, 14, 16), PENDING),
            make_task(owner_id, at(2025, 1, 14, 16, 30), PENDING),
            make_task(owner_id, at(2025, 1, 14, 16, 45), PENDING),
        ]
        buckets = compute_daily_buckets(owner_id, tasks, [], week_window)
        bucket = next(b for b in buckets if b.date == date(2025, 1, 14))
        assert bucket.most_productive_hour == 9

    def test_other_owners_events_are_ignored(self, owner_id, week_window):
        tasks = [make_task("someone-else", at(2025, 1, 14), COMPLETED)]
        moods = [make_mood("someone-else", "Sad", at(2025, 1, 14))]
        buckets = compute_daily_buckets(owner_id, tasks, moods, week_window)
        assert all(b.total_tasks == 0 and b.most_common_mood is None for b in buckets)

    def test_output_does_not_depend_on_input_order(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 13, 9), COMPLETED, TaskCategory.WORK),
            make_task(owner_id, at(2025, 1, 13, 10), PENDING, TaskCategory.SOCIAL),
            make_task(owner_id, at(2025, 1, 14, 10), COMPLETED, TaskCategory.SOCIAL),
        ]
        moods = [
            make_mood(owner_id, "Happy", at(2025, 1, 13, 9)),
            make_mood(owner_id, "Sad", at(2025, 1, 13, 10)),
        ]

        forward = compute_daily_buckets(owner_id, tasks, moods, week_window)
        backward = compute_daily_buckets(owner_id, tasks[::-1], moods[::-1], week_window)

        assert forward == backward


class TestWeeklyBuckets:
    """Tests for the weekly family."""

    def test_weeks_touched_by_window_are_emitted(self, owner_id, week_window):
        buckets = compute_weekly_buckets(owner_id, [], [], week_window)

        assert [b.week_start for b in buckets] == [date(2025, 1, 5), date(2025, 1, 12)]
        assert [b.week_end for b in buckets] == [date(2025, 1, 11), date(2025, 1, 18)]

    def test_weekly_rows_summarize_whole_weeks(self, owner_id, week_window):
        """A task on Monday Jan 6 is outside the 7 days but inside week Jan 5."""
        tasks = [
            make_task(owner_id, at(2025, 1, 6), COMPLETED),
            make_task(owner_id, at(2025, 1, 10), PENDING),
        ]
        buckets = compute_weekly_buckets(owner_id, tasks, [], week_window)

        first = buckets[0]
        assert first.week_start == date(2025, 1, 5)
        assert first.total_tasks == 2
        assert first.completed_tasks == 1
        assert first.completion_rate == 50.0

    def test_most_productive_day_requires_three_tasks(self, owner_id, week_window):
        tasks = (
            # Monday Jan 13: 3 of 3 completed
            [make_task(owner_id, at(2025, 1, 13, 9 + i), COMPLETED) for i in range(3)]
            # Tuesday Jan 14: 2 of 2 completed, too few to count
            + [make_task(owner_id, at(2025, 1, 14, 9 + i), COMPLETED) for i in range(2)]
            # Wednesday Jan 15: 2 of 4 completed
            + [make_task(owner_id, at(2025, 1, 15, 8 + i), COMPLETED if i < 2 else PENDING) for i in range(4)]
        )
        buckets = compute_weekly_buckets(owner_id, tasks, [], week_window)

        current_week = buckets[-1]
        assert current_week.most_productive_day == "Monday"
        assert current_week.total_tasks == 9
        assert current_week.total_tasks == (
            current_week.completed_tasks + current_week.in_progress_tasks + current_week.pending_tasks
        )

    def test_no_most_productive_day_under_threshold(self, owner_id, week_window):
        tasks = [make_task(owner_id, at(2025, 1, 13, 9 + i), COMPLETED) for i in range(2)]
        buckets = compute_weekly_buckets(owner_id, tasks, [], week_window)
        assert buckets[-1].most_productive_day is None

    def test_weekly_mood_and_category_modes(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 12), category=TaskCategory.CHORES),
            make_task(owner_id, at(2025, 1, 13), category=TaskCategory.SOCIAL),
            make_task(owner_id, at(2025, 1, 14), category=TaskCategory.SOCIAL),
        ]
        moods = [
            make_mood(owner_id, "Anxious", at(2025, 1, 12)),
            make_mood(owner_id, "Energetic", at(2025, 1, 13)),
        ]
        current_week = compute_weekly_buckets(owner_id, tasks, moods, week_window)[-1]

        assert current_week.most_common_category == "social"
        assert current_week.most_common_mood == "Anxious"

    def test_all_range_emits_only_weeks_with_events(self, owner_id, all_window):
        tasks = [make_task(owner_id, at(2024, 11, 20)), make_task(owner_id, at(2025, 1, 14))]
        buckets = compute_weekly_buckets(owner_id, tasks, [], all_window)
        assert [b.week_start for b in buckets] == [date(2024, 11, 17), date(2025, 1, 12)]


class TestMoodBuckets:
    """Tests for the per-mood family."""

    def test_mood_rows_count_tasks_created_that_day(self, owner_id, week_window):
        tasks = [make_task(owner_id, at(2025, 1, 13, 9 + i), COMPLETED) for i in range(4)]
        tasks.append(make_task(owner_id, at(2025, 1, 13, 15), PENDING))
        moods = [
            make_mood(owner_id, "Happy", at(2025, 1, 13, 8)),
            make_mood(owner_id, "Happy", at(2025, 1, 13, 18)),
        ]

        buckets = compute_mood_buckets(owner_id, tasks, moods, week_window)

        assert len(buckets) == 1
        bucket = buckets[0]
        assert (bucket.mood_name, bucket.date) == ("Happy", date(2025, 1, 13))
        assert bucket.task_count == 5
        assert bucket.completed_tasks == 4
        assert bucket.completion_rate == 80.0

    def test_each_mood_logged_on_a_day_gets_a_row(self, owner_id, week_window):
        tasks = [make_task(owner_id, at(2025, 1, 13, 9), COMPLETED)]
        moods = [
            make_mood(owner_id, "Tired", at(2025, 1, 13, 8)),
            make_mood(owner_id, "Calm", at(2025, 1, 13, 20)),
        ]
        buckets = compute_mood_buckets(owner_id, tasks, moods, week_window)
        assert [b.mood_name for b in buckets] == ["Tired", "Calm"]
        assert all(b.task_count == 1 for b in buckets)

    def test_days_without_tasks_produce_no_mood_rows(self, owner_id, week_window):
        moods = [make_mood(owner_id, "Sad", at(2025, 1, 11))]
        assert compute_mood_buckets(owner_id, [], moods, week_window) == []


class TestCategoryBuckets:
    """Tests for the per-category family."""

    def test_category_rows_per_day(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 13, 9), COMPLETED, TaskCategory.WORK),
            make_task(owner_id, at(2025, 1, 13, 10), COMPLETED, TaskCategory.WORK),
            make_task(owner_id, at(2025, 1, 13, 11), PENDING, TaskCategory.WORK),
            make_task(owner_id, at(2025, 1, 13, 12), COMPLETED, TaskCategory.HEALTH),
            make_task(owner_id, at(2025, 1, 13, 13), PENDING, TaskCategory.HEALTH),
            make_task(owner_id, at(2025, 1, 14, 9), PENDING, TaskCategory.WORK),
        ]

        buckets = compute_category_buckets(owner_id, tasks, week_window)

        rows = [(b.date, b.category, b.task_count, b.completion_rate) for b in buckets]
        assert rows == [
            (date(2025, 1, 13), "work", 3, 66.67),
            (date(2025, 1, 13), "health", 2, 50.0),
            (date(2025, 1, 14), "work", 1, 0.0),
        ]

    def test_rows_keep_first_seen_order_within_a_day(self, owner_id, week_window):
        """Social is logged before chores, so social comes first despite the alphabet."""
        tasks = [
            make_task(owner_id, at(2025, 1, 13, 9), category=TaskCategory.SOCIAL),
            make_task(owner_id, at(2025, 1, 13, 10), category=TaskCategory.CHORES),
        ]

        buckets = compute_category_buckets(owner_id, tasks, week_window)

        assert [(b.category, b.position) for b in buckets] == [("social", 0), ("chores", 1)]

    def test_distribution_is_zero_filled(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 13), category=TaskCategory.STUDY),
            make_task(owner_id, at(2025, 1, 14), category=TaskCategory.STUDY),
        ]
        counts = category_distribution(compute_category_buckets(owner_id, tasks, week_window))
        assert counts == {
            "work": 0,
            "study": 2,
            "chores": 0,
            "health": 0,
            "social": 0,
            "other": 0,
        }

    def test_repeated_runs_are_identical(self, owner_id, week_window):
        tasks = [
            make_task(owner_id, at(2025, 1, 13, 9), COMPLETED, TaskCategory.OTHER),
            make_task(owner_id, at(2025, 1, 13, 10), PENDING, TaskCategory.CHORES),
        ]
        first = compute_category_buckets(owner_id, tasks, week_window)
        second = compute_category_buckets(owner_id, tasks, week_window)
        assert first == second
        assert [b.to_dict() for b in first] == [b.to_dict() for b in second]
