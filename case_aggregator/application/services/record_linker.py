"""Record linker: attributes every event to its county, state and nation."""

from collections.abc import Iterable

import structlog

from case_aggregator.application.dto.events import EventRow
from case_aggregator.application.services.context import AggregationContext
from case_aggregator.application.services.staging import StagingHierarchy
from case_aggregator.domain.entities import Record
from case_aggregator.domain.errors import MissingReferenceError

logger = structlog.get_logger()


class RecordLinker:
    """Single sequential pass over the event list.

    Totals are plain read-modify-write on the staged areas, so linking must
    not run concurrently.
    """

    def __init__(self, context: AggregationContext) -> None:
        self.context = context

    def link(self, hierarchy: StagingHierarchy, events: Iterable[EventRow]) -> int:
        """Link all events. Returns the number of records created."""
        dimensions = self.context.dimensions
        chains = hierarchy.chains
        linked = 0

        for event in events:
            chain = chains.get(event.county_id)
            if chain is None:
                raise MissingReferenceError("county", event.county_id, "event record")
            case_state = dimensions.case_state(event.case_state_id)
            record = Record(
                day_index=event.day_index,
                county_id=event.county_id,
                sex=dimensions.sex(event.sex_id),
                age=dimensions.age(event.age_id),
                count=event.count,
            )
            for area in chain:
                area.add(case_state.id, record)
            linked += 1

        logger.info("records_linked", records=linked, totals=dict(hierarchy.nation.totals))
        return linked
