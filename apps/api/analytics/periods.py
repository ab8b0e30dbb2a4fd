"""
Reporting window helpers.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from .models import Period


# Earliest date considered for the "all" window.
ALL_TIME_START = datetime(2020, 1, 1, tzinfo=timezone.utc)

_PERIOD_DAYS = {
    Period.LAST_7_DAYS: 7,
    Period.LAST_30_DAYS: 30,
    Period.LAST_90_DAYS: 90,
}


def normalize_period(value: Any) -> Period:
    """Return a known period; unknown values fall back to 30d."""
    text = str(getattr(value, "value", value) or "").strip().lower()
    try:
        return Period(text)
    except ValueError:
        return Period.LAST_30_DAYS


def period_start(value: Any, now: Optional[datetime] = None) -> datetime:
    """Map a period onto the inclusive start of its window."""
    period = normalize_period(value)
    if period == Period.ALL:
        return ALL_TIME_START
    reference = now or datetime.now(timezone.utc)
    return reference - timedelta(days=_PERIOD_DAYS[period])


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
