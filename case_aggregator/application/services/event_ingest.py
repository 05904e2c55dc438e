"""Event row ingestion: validates zipped event rows before linking."""

from dataclasses import dataclass, field
from typing import Any

import structlog

from case_aggregator.application.dto.events import EVENT_FIELDS, EventPayload, EventRow
from case_aggregator.application.services.coercion import parse_int
from case_aggregator.application.services.zipped_array import unzip_header
from case_aggregator.domain.entities import Dimensions, RowWarning
from case_aggregator.domain.enums import SkipReason
from case_aggregator.domain.errors import InvalidPayloadError

logger = structlog.get_logger()


@dataclass
class IngestResult:
    """Validated events plus the rows that were skipped."""

    events: list[EventRow] = field(default_factory=list)
    warnings: list[RowWarning] = field(default_factory=list)
    dropped_non_positive: int = 0

    @property
    def day_count(self) -> int:
        """Length of the day list spanned by the events (at least one day)."""
        if not self.events:
            return 1
        return max(event.day_index for event in self.events) + 1


class _SkipRow(Exception):
    def __init__(self, reason: SkipReason, detail: str) -> None:
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


def ingest_events(
    payload: EventPayload,
    dimensions: Dimensions,
    max_day_index: int | None = None,
) -> IngestResult:
    """Validate every event row.

    Rows with a count <= 0 are dropped silently. Malformed rows (wrong arity,
    non-integer values, day index outside 0..max_day_index, unknown dimension
    ids) are skipped and reported as warnings. Unknown county ids are not
    checked here; the linker treats them as fatal.
    """
    header = unzip_header(payload.records)
    missing = [name for name in EVENT_FIELDS if name not in header]
    if missing:
        raise InvalidPayloadError(f"Event records missing fields: {missing}")

    positions = [header[name] for name in EVENT_FIELDS]
    width = len(payload.records.fields)
    result = IngestResult()

    for row_index, row in enumerate(payload.records.values):
        try:
            if len(row) != width:
                raise _SkipRow(SkipReason.ARITY, f"expected {width} values, got {len(row)}")
            event = _parse_row(row, positions, dimensions, max_day_index)
        except _SkipRow as skip:
            warning = RowWarning(row_index=row_index, reason=skip.reason, detail=skip.detail, row=tuple(row))
            result.warnings.append(warning)
            logger.warning("row_skipped", row_index=row_index, reason=skip.reason.value, detail=skip.detail)
            continue

        if event.count <= 0:
            result.dropped_non_positive += 1
            continue
        result.events.append(event)

    logger.info(
        "events_ingested",
        events=len(result.events),
        skipped=len(result.warnings),
        dropped_non_positive=result.dropped_non_positive,
    )
    return result


def _parse_row(
    row: list[Any],
    positions: list[int],
    dimensions: Dimensions,
    max_day_index: int | None,
) -> EventRow:
    county_id, day_index, sex_id, age_id, case_state_id, count = (
        _as_int(row[position], name) for position, name in zip(positions, EVENT_FIELDS)
    )
    if day_index < 0:
        raise _SkipRow(SkipReason.NEGATIVE_DAY, f"day index {day_index}")
    if max_day_index is not None and day_index > max_day_index:
        raise _SkipRow(SkipReason.DAY_OUT_OF_RANGE, f"day index {day_index} exceeds {max_day_index}")
    if not dimensions.has_sex(sex_id):
        raise _SkipRow(SkipReason.UNKNOWN_SEX, f"sex id {sex_id}")
    if not dimensions.has_age(age_id):
        raise _SkipRow(SkipReason.UNKNOWN_AGE, f"age id {age_id}")
    if not dimensions.has_case_state(case_state_id):
        raise _SkipRow(SkipReason.UNKNOWN_CASE_STATE, f"case state id {case_state_id}")
    return EventRow(county_id, day_index, sex_id, age_id, case_state_id, count)


def _as_int(value: Any, name: str) -> int:
    parsed = parse_int(value)
    if parsed is None:
        raise _SkipRow(SkipReason.NOT_AN_INTEGER, f"{name}={value!r}")
    return parsed
