"""Snapshot freezer: converts the staged hierarchy into immutable types."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from case_aggregator.application.services.context import AggregationContext
from case_aggregator.application.services.staging import (
    StagingArea,
    StagingCounty,
    StagingHierarchy,
    StagingState,
)
from case_aggregator.application.services.time_series import (
    DataRow,
    DimensionRef,
    TimeSeriesCache,
)
from case_aggregator.domain.entities import Area, County, Dimensions, Nation, State
from case_aggregator.domain.errors import MissingReferenceError
from case_aggregator.domain.types import AreaId, Day, Timestamp


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read-only result of one aggregation run."""

    nation: Nation
    days: tuple[Day, ...]
    dimensions: Dimensions
    last_updated: str
    built_at: Timestamp
    _states_by_id: Mapping[AreaId, State] = field(repr=False)
    _counties_by_id: Mapping[AreaId, County] = field(repr=False)
    _series: TimeSeriesCache = field(repr=False)

    @property
    def states(self) -> tuple[State, ...]:
        return self.nation.states

    @property
    def counties(self) -> tuple[County, ...]:
        return tuple(self._counties_by_id.values())

    def state(self, state_id: AreaId) -> State:
        try:
            return self._states_by_id[state_id]
        except KeyError:
            raise MissingReferenceError("state", state_id, "snapshot lookup") from None

    def county(self, county_id: AreaId) -> County:
        try:
            return self._counties_by_id[county_id]
        except KeyError:
            raise MissingReferenceError("county", county_id, "snapshot lookup") from None

    def state_of(self, county: County) -> State:
        """Owning state of a county."""
        return self.state(county.state_id)

    def get_data_row(
        self,
        area: Area,
        case_state: DimensionRef,
        sex: DimensionRef | None = None,
        age: DimensionRef | None = None,
    ) -> DataRow:
        """Cumulative day series for an area; see TimeSeriesCache.get_data_row."""
        return self._series.get_data_row(area, case_state, sex, age)


class SnapshotFreezer:
    """Assembles the frozen snapshot once linking and normalization are done."""

    def __init__(self, context: AggregationContext) -> None:
        self.context = context

    def freeze(
        self,
        hierarchy: StagingHierarchy,
        last_updated: str,
        built_at: Timestamp,
    ) -> Snapshot:
        states = tuple(self._freeze_state(state) for state in hierarchy.nation.states)
        nation = Nation(**_area_fields(hierarchy.nation), states=states)

        counties_by_id = dict(
            sorted((county.id, county) for state in states for county in state.counties)
        )

        return Snapshot(
            nation=nation,
            days=tuple(self.context.days),
            dimensions=self.context.dimensions,
            last_updated=last_updated,
            built_at=built_at,
            _states_by_id=MappingProxyType({state.id: state for state in states}),
            _counties_by_id=MappingProxyType(counties_by_id),
            _series=TimeSeriesCache(tuple(self.context.days), self.context.dimensions),
        )

    def _freeze_state(self, state: StagingState) -> State:
        counties = tuple(self._freeze_county(county) for county in state.counties)
        return State(**_area_fields(state), counties=counties)

    @staticmethod
    def _freeze_county(county: StagingCounty) -> County:
        return County(**_area_fields(county), state_id=county.state_id)


def _area_fields(area: StagingArea) -> dict:
    return {
        "id": area.id,
        "display_name": area.display_name,
        "area": area.area,
        "population": area.population,
        "records_by_case_state": MappingProxyType(
            {cs: tuple(records) for cs, records in area.records.items()}
        ),
        "total_by_case_state": MappingProxyType(dict(area.totals)),
        "rate_per_100k": MappingProxyType(dict(area.rates)),
    }
