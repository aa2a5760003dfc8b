"""Date utilities for tally.

Pure functions for month arithmetic, labels and lenient date parsing.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Any

import pandas as pd

from tally.domain.models import Month

YEAR_FIRST_PREFIX = re.compile(r"^\d{4}[-/.]\d{1,2}")


def parse_date(value: Any) -> datetime | None:
    """Parse a date-like value into a naive datetime.

    Args:
        value: datetime, date, pandas Timestamp or string (YYYY-MM-DD, DD/MM/YYYY, ...).

    Returns:
        Naive datetime (aware values are converted to UTC), or None if the value
        is empty or cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, str) and not value.strip():
        return None

    # Strings starting with a four-digit year are year-first; everything else is read day-first
    dayfirst = not (isinstance(value, str) and YEAR_FIRST_PREFIX.match(value.strip()))

    try:
        ts = pd.to_datetime(value, dayfirst=dayfirst)
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def month_index(when: datetime, window_start: Month) -> int:
    """Calculate how many calendar months a date lies after the window start.

    Args:
        when: Date to place.
        window_start: First month of the window (YYYY-MM).

    Returns:
        Month offset; negative for dates before the window start.
    """
    start = datetime.strptime(window_start, "%Y-%m")
    return (when.year - start.year) * 12 + (when.month - start.month)


def add_months(month: Month, count: int) -> Month:
    """Shift a month by count calendar months (count may be negative)."""
    start = datetime.strptime(month, "%Y-%m")
    total = start.year * 12 + (start.month - 1) + count
    year, month_zero = divmod(total, 12)
    return Month(f"{year:04d}-{month_zero + 1:02d}")


def window_months(window_start: Month, count: int) -> list[Month]:
    """List the months of a fixed window, oldest first."""
    return [add_months(window_start, offset) for offset in range(count)]


def month_label(month: Month) -> str:
    """Short chart label for a month (e.g., "Jan")."""
    return datetime.strptime(month, "%Y-%m").strftime("%b")


def year_start(now: datetime) -> Month:
    """January of the year containing now."""
    return Month(f"{now.year:04d}-01")


def day_bounds(start: date | datetime | None, end: date | datetime | None) -> tuple[datetime | None, datetime | None]:
    """Turn inclusive date bounds into datetimes.

    A bare date as the end bound covers the whole day.
    """
    lower = parse_date(start) if isinstance(start, datetime) or start is None else datetime.combine(start, time.min)
    upper = parse_date(end) if isinstance(end, datetime) or end is None else datetime.combine(end, time.max)
    return lower, upper
