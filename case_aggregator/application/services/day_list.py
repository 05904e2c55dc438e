"""Day list construction."""

import pandas as pd

from case_aggregator.domain.types import Day

# Last calendar day pandas can represent
LAST_DAY: Day = pd.Timestamp.max.date()

DEFAULT_MAX_DAYS = 36_600


def start_day(start_date_ms: int) -> Day:
    """Calendar day (UTC) of an epoch-millisecond report timestamp.

    Raises ValueError for timestamps outside the representable range.
    """
    try:
        return pd.Timestamp(start_date_ms, unit="ms").date()
    except (OverflowError, pd.errors.OutOfBoundsDatetime) as e:
        raise ValueError(f"Timestamp {start_date_ms} ms is out of range") from e


def max_day_index(first: Day, max_days: int = DEFAULT_MAX_DAYS) -> int:
    """Largest day index a day list starting at `first` may hold."""
    if max_days < 1:
        raise ValueError(f"max_days must be at least 1, got {max_days}")
    return min(max_days - 1, (LAST_DAY - first).days)


def build_days(first: Day, day_count: int) -> tuple[Day, ...]:
    """Gapless day list starting at `first` with `day_count` entries."""
    if day_count < 1:
        raise ValueError(f"Day list needs at least one day, got {day_count}")
    index = pd.date_range(start=first, periods=day_count, freq="D")
    return tuple(ts.date() for ts in index)


def day_offset(report_ms: int, start_date_ms: int) -> int:
    """Calendar days between two epoch-millisecond report timestamps."""
    return (start_day(report_ms) - start_day(start_date_ms)).days
