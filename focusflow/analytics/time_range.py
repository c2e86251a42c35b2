"""
FOCUSFLOW Analytics API - Time Range Resolution

Turns a range token into a concrete UTC window of whole days.
Resolution is pure: it depends only on the token and the injected "now".
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Iterator, Optional

from focusflow.analytics.errors import InvalidRange


class TimeRange(str, Enum):
    """Supported analytics ranges. Tokens are case-sensitive."""
    SEVEN_DAYS = "7days"
    THIRTY_DAYS = "30days"
    NINETY_DAYS = "90days"
    ALL = "all"


RANGE_DAYS: dict[TimeRange, Optional[int]] = {
    TimeRange.SEVEN_DAYS: 7,
    TimeRange.THIRTY_DAYS: 30,
    TimeRange.NINETY_DAYS: 90,
    TimeRange.ALL: None,
}

RANGE_LABELS: dict[TimeRange, str] = {
    TimeRange.SEVEN_DAYS: "the last 7 days",
    TimeRange.THIRTY_DAYS: "the last 30 days",
    TimeRange.NINETY_DAYS: "the last 90 days",
    TimeRange.ALL: "all time",
}


def start_of_day(day: date) -> datetime:
    """UTC midnight at the start of ``day``."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by MongoDB) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateWindow:
    """
    Half-open UTC window ``[start, end)``.

    Bounded windows cover exactly ``length`` calendar days ending ``today``.
    The ``all`` window has no lower bound (``start`` is None).
    """

    time_range: TimeRange
    today: date
    start: Optional[datetime]
    end: datetime
    length: Optional[int]

    @property
    def is_bounded(self) -> bool:
        return self.length is not None

    @property
    def label(self) -> str:
        return RANGE_LABELS[self.time_range]

    @property
    def first_day(self) -> Optional[date]:
        if self.start is None:
            return None
        return self.start.date()

    def days(self) -> Iterator[date]:
        """Enumerate every day of a bounded window, oldest first."""
        if self.length is None:
            raise ValueError("The 'all' window has no fixed set of days")
        first = self.today - timedelta(days=self.length - 1)
        for offset in range(self.length):
            yield first + timedelta(days=offset)

    def contains(self, moment: datetime) -> bool:
        moment = as_utc(moment)
        if self.start is not None and moment < self.start:
            return False
        return moment < self.end


def parse_time_range(token: object) -> TimeRange:
    """Map a raw token onto ``TimeRange``; anything else is a caller bug."""
    if isinstance(token, TimeRange):
        return token
    if not isinstance(token, str):
        raise InvalidRange(token)
    try:
        return TimeRange(token)
    except ValueError:
        raise InvalidRange(token) from None


def resolve_time_range(token: object, now: datetime) -> DateWindow:
    """
    Resolve a range token against ``now``.

    Args:
        token: One of ``7days``, ``30days``, ``90days`` or ``all``
        now: Reference time (injected, not datetime.now())

    Raises:
        InvalidRange: if the token is not recognized
    """
    time_range = parse_time_range(token)
    today = as_utc(now).date()
    end = start_of_day(today + timedelta(days=1))
    length = RANGE_DAYS[time_range]

    if length is None:
        return DateWindow(time_range=time_range, today=today, start=None, end=end, length=None)

    start = start_of_day(today - timedelta(days=length - 1))
    return DateWindow(time_range=time_range, today=today, start=start, end=end, length=length)


def week_start_for(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_aligned_bounds(window: DateWindow) -> tuple[Optional[datetime], datetime]:
    """
    Widen a window to whole Sunday-to-Saturday weeks.

    Weekly rows always summarize complete weeks so the same week yields the
    same row whichever range asked for it.
    """
    end = start_of_day(week_start_for(window.today) + timedelta(days=7))
    if window.first_day is None:
        return None, end
    return start_of_day(week_start_for(window.first_day)), end
