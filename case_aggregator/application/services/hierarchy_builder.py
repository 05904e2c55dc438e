"""Area hierarchy builder."""

from collections.abc import Iterable

import structlog

from case_aggregator.application.dto.meta import CountyDescriptor, StateDescriptor
from case_aggregator.application.services.context import NATION_ID, AggregationContext
from case_aggregator.application.services.staging import (
    StagingCounty,
    StagingHierarchy,
    StagingNation,
    StagingState,
)
from case_aggregator.domain.errors import MissingReferenceError

logger = structlog.get_logger()


class AreaHierarchyBuilder:
    """Builds the staged nation -> states -> counties tree.

    County population and area are taken as given; state and nation values
    are always derived sums. Every case state starts with a zero total and an
    empty record list.
    """

    def __init__(self, context: AggregationContext) -> None:
        self.context = context

    def build(
        self,
        states: Iterable[StateDescriptor],
        counties: Iterable[CountyDescriptor],
    ) -> StagingHierarchy:
        """Build the hierarchy. Raises MissingReferenceError on an unknown state id."""
        case_state_ids = self.context.case_state_ids
        nation = StagingNation(NATION_ID, self.context.nation_name, case_state_ids)

        staged_states = {
            descriptor.id: StagingState(descriptor.id, descriptor.name, case_state_ids)
            for descriptor in sorted(states, key=lambda d: d.id)
        }

        for descriptor in sorted(counties, key=lambda d: d.id):
            state = staged_states.get(descriptor.state_id)
            if state is None:
                raise MissingReferenceError("state", descriptor.state_id, f"county {descriptor.id}")
            county = StagingCounty(
                descriptor.id,
                descriptor.name,
                case_state_ids,
                population=descriptor.population,
                area=descriptor.area,
                state_id=state.id,
            )
            state.counties.append(county)
            state.population += county.population
            state.area += county.area

        for state in staged_states.values():
            nation.states.append(state)
            nation.population += state.population
            nation.area += state.area

        hierarchy = StagingHierarchy(nation)
        logger.info(
            "hierarchy_built",
            states=len(hierarchy.states_by_id),
            counties=len(hierarchy.counties_by_id),
            population=nation.population,
        )
        return hierarchy
