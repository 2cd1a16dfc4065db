"""
Date window for the PayPal transaction search API, which rejects ranges
longer than 31 days.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from core.errors import InvalidArgument

MAX_WINDOW_DAYS = 31
DEFAULT_LOOKBACK_DAYS = 30


@dataclass(frozen=True)
class DateWindow:
    start: datetime
    end: datetime

    @property
    def days(self) -> float:
        return (self.end - self.start) / timedelta(days=1)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError) as exc:
        raise InvalidArgument(f"Invalid date: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def clamp_window(
    start: datetime | None = None,
    end: datetime | None = None,
    lookback_days: int | None = None,
    now: datetime | None = None,
) -> DateWindow:
    """Compute the effective search window.

    With both *start* and *end*, *end* is capped at *now* and, when the span
    (rounded up to whole days) exceeds 31 days, *start* is pulled forward to
    31 days before *end*. Otherwise the window ends at *now* and reaches back
    ``min(lookback_days, 31)`` days.
    """
    now = now or datetime.now(UTC)

    if start is not None and end is not None:
        if end > now:
            end = now
        if start > end:
            raise InvalidArgument("Start date must not be after end date")
        span_days = math.ceil((end - start) / timedelta(days=1))
        if span_days > MAX_WINDOW_DAYS:
            start = end - timedelta(days=MAX_WINDOW_DAYS)
        return DateWindow(start=start, end=end)

    lookback = lookback_days or DEFAULT_LOOKBACK_DAYS
    if lookback < 0:
        raise InvalidArgument("lookbackDays must be positive")
    return DateWindow(
        start=now - timedelta(days=min(lookback, MAX_WINDOW_DAYS)), end=now
    )
