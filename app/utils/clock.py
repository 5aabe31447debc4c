"""
Clock source for timestamping and expiry comparisons.

Services take a ``Clock`` so the undo window can be exercised at exact ages
in tests without sleeping.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """
    Treat naive datetimes as UTC.

    SQLite drops tzinfo from ``DateTime(timezone=True)`` columns, so values
    read back from it are naive even though they were written as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def age_seconds(created_at: datetime, now: datetime) -> float:
    """Seconds elapsed between ``created_at`` and ``now``."""
    return (ensure_aware(now) - ensure_aware(created_at)).total_seconds()
