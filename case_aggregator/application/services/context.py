"""Aggregation context passed explicitly through the build pipeline."""

from dataclasses import dataclass

from case_aggregator.domain.entities import Dimensions
from case_aggregator.domain.types import Day

NATION_ID = 0
DEFAULT_NATION_NAME = "Deutschland"


@dataclass(frozen=True)
class AggregationContext:
    """Dimension tables, day list and root label for one aggregation run."""

    dimensions: Dimensions
    days: tuple[Day, ...]
    nation_name: str = DEFAULT_NATION_NAME

    @property
    def case_state_ids(self) -> tuple[int, ...]:
        return tuple(entry.id for entry in self.dimensions.case_states)
