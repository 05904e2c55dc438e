"""Compaction of raw case-feed rows into the event payload."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from case_aggregator.application.dto.events import EVENT_FIELDS, EventPayload
from case_aggregator.application.dto.meta import CountyDescriptor, StateDescriptor
from case_aggregator.application.services.coercion import parse_int
from case_aggregator.application.services.day_list import day_offset, start_day
from case_aggregator.application.services.zipped_array import zip_object_array
from case_aggregator.domain.entities import CONFIRMED, DEATH, Dimensions, RowWarning
from case_aggregator.domain.enums import SkipReason
from case_aggregator.domain.errors import InvalidPayloadError
from case_aggregator.domain.types import FeedRowDict

logger = structlog.get_logger()

REQUIRED_FEED_FIELDS = (
    "IdLandkreis",
    "Landkreis",
    "IdBundesland",
    "Bundesland",
    "Geschlecht",
    "Altersgruppe",
    "Meldedatum",
)


@dataclass
class CompactedFeed:
    """Event payload and geographic descriptors derived from feed rows."""

    payload: EventPayload
    states: list[StateDescriptor]
    counties: list[CountyDescriptor]
    warnings: list[RowWarning] = field(default_factory=list)


@dataclass(frozen=True)
class _FeedRow:
    row_index: int
    county_id: int
    county_name: str
    state_id: int
    state_name: str
    sex: str
    age: str
    report_ms: int
    cases: int
    deaths: int
    last_updated: str


class _SkipRow(Exception):
    def __init__(self, reason: SkipReason, detail: str) -> None:
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


def compact_feed_rows(rows: Sequence[FeedRowDict], dimensions: Dimensions) -> CompactedFeed:
    """Compact feed rows into one event per positive case and death count.

    Rows are ordered by report date; day indices are offsets from the
    earliest report date. Rows with missing fields, non-integer values or an
    unknown sex/age label are skipped with a warning carrying their input
    position. Rows with unknown labels still contribute their state and county.
    """
    if not rows:
        raise InvalidPayloadError("No feed rows to compact")

    warnings: list[RowWarning] = []
    parsed: list[_FeedRow] = []
    for row_index, row in enumerate(rows):
        try:
            parsed.append(_parse_row(row_index, row))
        except _SkipRow as skip:
            _skip(warnings, row_index, skip.reason, skip.detail)

    if not parsed:
        raise InvalidPayloadError(f"None of the {len(rows)} feed rows could be parsed")

    sex_ids = {entry.name: entry.id for entry in dimensions.sexes}
    age_ids = {entry.name: entry.id for entry in dimensions.ages}

    # Stable sort: rows reported on the same day keep their input order
    ordered = sorted(parsed, key=lambda entry: entry.report_ms)
    first = ordered[0]

    records = []
    for entry in ordered:
        sex_id = sex_ids.get(entry.sex)
        age_id = age_ids.get(entry.age)
        if sex_id is None or age_id is None:
            reason = SkipReason.UNKNOWN_SEX if sex_id is None else SkipReason.UNKNOWN_AGE
            _skip(warnings, entry.row_index, reason, f"Geschlecht={entry.sex!r} Altersgruppe={entry.age!r}")
            continue

        base = {
            "county": entry.county_id,
            "day": day_offset(entry.report_ms, first.report_ms),
            "sex": sex_id,
            "age": age_id,
        }
        if entry.cases > 0:
            records.append({**base, "caseState": CONFIRMED.id, "count": entry.cases})
        if entry.deaths > 0:
            records.append({**base, "caseState": DEATH.id, "count": entry.deaths})

    warnings.sort(key=lambda warning: warning.row_index)
    payload = EventPayload(
        start_date=first.report_ms,
        last_updated=first.last_updated,
        records=zip_object_array(records, EVENT_FIELDS),
    )

    logger.info("feed_compacted", rows=len(rows), records=len(records), skipped=len(warnings))
    return CompactedFeed(
        payload=payload,
        states=_state_descriptors(ordered),
        counties=_county_descriptors(ordered),
        warnings=warnings,
    )


def _parse_row(row_index: int, row: FeedRowDict) -> _FeedRow:
    missing = [name for name in REQUIRED_FEED_FIELDS if row.get(name) is None]
    if missing:
        raise _SkipRow(SkipReason.MISSING_FIELD, f"missing {missing}")

    county_id = _as_int(row, "IdLandkreis")
    state_id = _as_int(row, "IdBundesland")
    report_ms = _as_int(row, "Meldedatum")
    cases = _as_int(row, "AnzahlFall", default=0)
    deaths = _as_int(row, "AnzahlTodesfall", default=0)
    try:
        start_day(report_ms)
    except ValueError as e:
        raise _SkipRow(SkipReason.DAY_OUT_OF_RANGE, str(e)) from e

    return _FeedRow(
        row_index=row_index,
        county_id=county_id,
        county_name=str(row["Landkreis"]),
        state_id=state_id,
        state_name=str(row["Bundesland"]),
        sex=row["Geschlecht"],
        age=row["Altersgruppe"],
        report_ms=report_ms,
        cases=cases,
        deaths=deaths,
        last_updated=row.get("Datenstand") or "",
    )


def _as_int(row: FeedRowDict, name: str, default: int | None = None) -> int:
    value = row.get(name)
    if value is None and default is not None:
        return default
    parsed = parse_int(value)
    if parsed is None:
        raise _SkipRow(SkipReason.NOT_AN_INTEGER, f"{name}={value!r}")
    return parsed


def _skip(warnings: list[RowWarning], row_index: int, reason: SkipReason, detail: str) -> None:
    warnings.append(RowWarning(row_index=row_index, reason=reason, detail=detail))
    logger.warning("feed_row_skipped", row_index=row_index, reason=reason.value, detail=detail)


def _state_descriptors(rows: Sequence[_FeedRow]) -> list[StateDescriptor]:
    states = {row.state_id: row.state_name for row in rows}
    return [StateDescriptor(id=state_id, name=name) for state_id, name in sorted(states.items())]


def _county_descriptors(rows: Sequence[_FeedRow]) -> list[CountyDescriptor]:
    counties = {row.county_id: (row.county_name, row.state_id) for row in rows}
    return [
        CountyDescriptor(id=county_id, name=name, state_id=state_id)
        for county_id, (name, state_id) in sorted(counties.items())
    ]
