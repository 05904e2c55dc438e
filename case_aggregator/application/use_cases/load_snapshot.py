"""Load payloads concurrently and build a snapshot."""

import asyncio

import structlog

from case_aggregator.application.use_cases.build_snapshot import BuildResult
from case_aggregator.application.use_cases.build_snapshot import run as build_snapshot
from case_aggregator.domain.ports import ClockPort, EventSourcePort, MetaSourcePort
from case_aggregator.infrastructure.config.settings import Settings

logger = structlog.get_logger()


async def run(
    meta_source: MetaSourcePort,
    event_source: EventSourcePort,
    clock: ClockPort,
    settings: Settings,
) -> BuildResult:
    """Fetch meta and events in parallel; aggregate only once both are loaded."""
    logger.info("loading_payloads")
    meta, events = await asyncio.gather(
        meta_source.load_meta(),
        event_source.load_events(),
    )
    logger.info("payloads_loaded")
    return build_snapshot(meta, events, clock, nation_name=settings.nation_name, max_days=settings.max_days)
