"""Build snapshot - aggregation pipeline orchestration."""

import time
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from case_aggregator.application.dto.events import EventPayload
from case_aggregator.application.dto.meta import CountyDescriptor, MetaPayload, StateDescriptor
from case_aggregator.application.services.context import DEFAULT_NATION_NAME, AggregationContext
from case_aggregator.application.services.day_list import DEFAULT_MAX_DAYS, build_days, max_day_index, start_day
from case_aggregator.application.services.event_ingest import ingest_events
from case_aggregator.application.services.hierarchy_builder import AreaHierarchyBuilder
from case_aggregator.application.services.rate_normalizer import RateNormalizer
from case_aggregator.application.services.record_linker import RecordLinker
from case_aggregator.application.services.snapshot_freezer import Snapshot, SnapshotFreezer
from case_aggregator.application.services.zipped_array import unzip_object_array
from case_aggregator.domain.entities import RowWarning
from case_aggregator.domain.errors import DomainError, InvalidPayloadError
from case_aggregator.domain.ports import ClockPort
from case_aggregator.domain.types import Day
from case_aggregator.infrastructure.observability.metrics import (
    event_rows_skipped,
    snapshot_build_duration_seconds,
    snapshots_built,
    snapshots_failed,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuildResult:
    """Published snapshot plus the malformed rows skipped while building it."""

    snapshot: Snapshot
    warnings: tuple[RowWarning, ...]


def run(
    meta: MetaPayload | dict[str, Any],
    events: EventPayload | dict[str, Any],
    clock: ClockPort,
    nation_name: str = DEFAULT_NATION_NAME,
    max_days: int = DEFAULT_MAX_DAYS,
) -> BuildResult:
    """Aggregate raw payloads into one immutable snapshot.

    Either a complete snapshot is returned or an error is raised; a
    MissingReferenceError aborts the run. Events later than `max_days`
    after the start date are skipped.
    """
    started = time.perf_counter()
    try:
        result = _build(meta, events, clock, nation_name, max_days)
    except Exception as e:
        error_code = type(e).__name__ if isinstance(e, DomainError) else "INTERNAL_ERROR"
        snapshots_failed.labels(error_code=error_code).inc()
        logger.error("snapshot_build_failed", error_code=error_code, error=str(e), exc_info=True)
        raise

    duration = time.perf_counter() - started
    snapshot_build_duration_seconds.observe(duration)
    snapshots_built.inc()
    for warning in result.warnings:
        event_rows_skipped.labels(reason=warning.reason.value).inc()

    snapshot = result.snapshot
    logger.info(
        "snapshot_built",
        states=len(snapshot.states),
        counties=len(snapshot.counties),
        days=len(snapshot.days),
        skipped_rows=len(result.warnings),
        duration_seconds=round(duration, 3),
    )
    return result


def _build(
    meta: MetaPayload | dict[str, Any],
    events: EventPayload | dict[str, Any],
    clock: ClockPort,
    nation_name: str,
    max_days: int,
) -> BuildResult:
    meta_payload = _validate(MetaPayload, meta, "meta")
    event_payload = _validate(EventPayload, events, "events")

    dimensions = meta_payload.dimensions()
    states, counties = _descriptors(meta_payload)

    first = _first_day(event_payload.start_date)
    ingested = ingest_events(event_payload, dimensions, max_day_index=max_day_index(first, max_days))
    days = build_days(first, ingested.day_count)
    context = AggregationContext(dimensions=dimensions, days=days, nation_name=nation_name)

    hierarchy = AreaHierarchyBuilder(context).build(states, counties)
    RecordLinker(context).link(hierarchy, ingested.events)
    RateNormalizer().normalize(hierarchy)
    snapshot = SnapshotFreezer(context).freeze(
        hierarchy,
        last_updated=event_payload.last_updated,
        built_at=clock.now(),
    )
    return BuildResult(snapshot=snapshot, warnings=tuple(ingested.warnings))


def _validate(model, payload, label: str):
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid {label} payload: {e}") from e


def _descriptors(meta: MetaPayload) -> tuple[list[StateDescriptor], list[CountyDescriptor]]:
    try:
        states = [StateDescriptor.model_validate(obj) for obj in unzip_object_array(meta.states)]
        counties = [CountyDescriptor.model_validate(obj) for obj in unzip_object_array(meta.counties)]
    except (ValueError, ValidationError) as e:
        raise InvalidPayloadError(f"Invalid area descriptors: {e}") from e
    return states, counties


def _first_day(start_date_ms: int) -> Day:
    try:
        return start_day(start_date_ms)
    except ValueError as e:
        raise InvalidPayloadError(f"Invalid startDate: {e}") from e
