"""
FOCUSFLOW Analytics API - Clock

Injectable "now" so range resolution and bucketing stay deterministic in tests.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def get_clock() -> Clock:
    """Dependency returning the wall clock. Tests override it with a frozen clock."""
    return utcnow
