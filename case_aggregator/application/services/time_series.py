"""Memoized cumulative day series per area and filter."""

import threading
from collections.abc import Iterator, Mapping
from concurrent.futures import Future

import numpy as np
import pandas as pd
import structlog

from case_aggregator.domain.entities import (
    Area,
    DataRowKey,
    DayValue,
    DimensionEntry,
    Dimensions,
)
from case_aggregator.domain.errors import UnknownDimensionError
from case_aggregator.domain.types import Day, DimensionId
from case_aggregator.infrastructure.observability.metrics import data_row_cache_misses

logger = structlog.get_logger()

DimensionRef = DimensionEntry | DimensionId


class DataRow(Mapping[Day, DayValue]):
    """Read-only, chronologically ordered mapping of day -> (daily, cumulative)."""

    __slots__ = ("_days", "_daily", "_cumulative", "_positions")

    def __init__(
        self,
        days: tuple[Day, ...],
        daily: tuple[int, ...],
        cumulative: tuple[int, ...],
    ) -> None:
        if not len(days) == len(daily) == len(cumulative):
            raise ValueError("days, daily and cumulative must have the same length")
        object.__setattr__(self, "_days", days)
        object.__setattr__(self, "_daily", daily)
        object.__setattr__(self, "_cumulative", cumulative)
        object.__setattr__(self, "_positions", {day: i for i, day in enumerate(days)})

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getitem__(self, day: Day) -> DayValue:
        position = self._positions[day]
        return DayValue(self._daily[position], self._cumulative[position])

    def __iter__(self) -> Iterator[Day]:
        return iter(self._days)

    def __len__(self) -> int:
        return len(self._days)

    def __repr__(self) -> str:
        return f"DataRow(days={len(self._days)}, total={self.last_value.cumulative_total})"

    @property
    def days(self) -> tuple[Day, ...]:
        return self._days

    @property
    def daily_counts(self) -> tuple[int, ...]:
        return self._daily

    @property
    def cumulative_totals(self) -> tuple[int, ...]:
        return self._cumulative

    @property
    def last_value(self) -> DayValue:
        return DayValue(self._daily[-1], self._cumulative[-1])

    def to_frame(self) -> pd.DataFrame:
        """DataFrame indexed by day with daily_count and cumulative_total columns."""
        return pd.DataFrame(
            {"daily_count": self._daily, "cumulative_total": self._cumulative},
            index=pd.DatetimeIndex(self._days, name="day"),
        )


class TimeSeriesCache:
    """Lazily computes and memoizes filtered day series.

    Entries are never invalidated: the areas they are computed from are
    frozen. A missing key is computed at most once even with concurrent
    callers; every caller receives the same DataRow instance.
    """

    def __init__(self, days: tuple[Day, ...], dimensions: Dimensions) -> None:
        self._days = days
        self._dimensions = dimensions
        self._entries: dict[DataRowKey, DataRow] = {}
        self._pending: dict[DataRowKey, Future] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def key_for(
        self,
        area: Area,
        case_state: DimensionRef,
        sex: DimensionRef | None = None,
        age: DimensionRef | None = None,
    ) -> DataRowKey:
        """Structured cache key. Raises UnknownDimensionError on unknown ids."""
        dimensions = self._dimensions
        case_state_id = dimensions.case_state(_dimension_id(case_state)).id
        sex_id = None if sex is None else dimensions.sex(_dimension_id(sex)).id
        age_id = None if age is None else dimensions.age(_dimension_id(age)).id
        return DataRowKey(area.kind, area.id, case_state_id, sex_id, age_id)

    def get_data_row(
        self,
        area: Area,
        case_state: DimensionRef,
        sex: DimensionRef | None = None,
        age: DimensionRef | None = None,
    ) -> DataRow:
        """Day series of `area` for a case state, optionally filtered by sex and age."""
        key = self.key_for(area, case_state, sex, age)

        row = self._entries.get(key)
        if row is not None:
            return row

        with self._lock:
            row = self._entries.get(key)
            if row is not None:
                return row
            future = self._pending.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._pending[key] = future

        if not owner:
            return future.result()

        try:
            row = self._compute(area, key)
        except Exception as e:
            with self._lock:
                del self._pending[key]
            future.set_exception(e)
            raise

        with self._lock:
            self._entries[key] = row
            del self._pending[key]
        future.set_result(row)
        data_row_cache_misses.inc()
        logger.debug("data_row_computed", key=key._asdict(), total=row.last_value.cumulative_total)
        return row

    def _compute(self, area: Area, key: DataRowKey) -> DataRow:
        records = area.records_by_case_state.get(key.case_state_id, ())
        matching = [
            record
            for record in records
            if (key.sex_id is None or record.sex.id == key.sex_id)
            and (key.age_id is None or record.age.id == key.age_id)
        ]

        daily = np.zeros(len(self._days), dtype=np.int64)
        if matching:
            day_index = np.fromiter((r.day_index for r in matching), dtype=np.int64, count=len(matching))
            counts = np.fromiter((r.count for r in matching), dtype=np.int64, count=len(matching))
            np.add.at(daily, day_index, counts)
        cumulative = np.cumsum(daily)

        return DataRow(self._days, tuple(daily.tolist()), tuple(cumulative.tolist()))


def _dimension_id(ref: DimensionRef) -> DimensionId:
    if isinstance(ref, DimensionEntry):
        return ref.id
    if isinstance(ref, bool) or not isinstance(ref, int):
        raise UnknownDimensionError(f"Dimension id must be an integer, got {ref!r}")
    return ref
