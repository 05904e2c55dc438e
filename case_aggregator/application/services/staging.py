"""Mutable staging types used while a snapshot is being built.

These never leave the build pipeline; callers only see the frozen types
produced by the snapshot freezer.
"""

from case_aggregator.domain.entities import Record
from case_aggregator.domain.enums import AreaKind


class StagingArea:
    """Area under construction: accumulating records, totals and rates."""

    def __init__(
        self,
        kind: AreaKind,
        area_id: int,
        display_name: str,
        case_state_ids: tuple[int, ...],
        population: int = 0,
        area: float = 0.0,
    ) -> None:
        self.kind = kind
        self.id = area_id
        self.display_name = display_name
        self.population = population
        self.area = area
        self.records: dict[int, list[Record]] = {cs: [] for cs in case_state_ids}
        self.totals: dict[int, int] = {cs: 0 for cs in case_state_ids}
        self.rates: dict[int, float] = {}

    def add(self, case_state_id: int, record: Record) -> None:
        self.records[case_state_id].append(record)
        self.totals[case_state_id] += record.count


class StagingCounty(StagingArea):
    def __init__(self, *args, state_id: int, **kwargs) -> None:
        super().__init__(AreaKind.COUNTY, *args, **kwargs)
        self.state_id = state_id


class StagingState(StagingArea):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(AreaKind.STATE, *args, **kwargs)
        self.counties: list[StagingCounty] = []


class StagingNation(StagingArea):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(AreaKind.NATION, *args, **kwargs)
        self.states: list[StagingState] = []


class StagingHierarchy:
    """Staged nation/state/county tree plus the county lookup chain."""

    def __init__(self, nation: StagingNation) -> None:
        self.nation = nation
        self.states_by_id: dict[int, StagingState] = {s.id: s for s in nation.states}
        self.counties_by_id: dict[int, StagingCounty] = {
            county.id: county for state in nation.states for county in state.counties
        }
        # county id -> (county, state, nation), resolved once at build time
        self.chains: dict[int, tuple[StagingCounty, StagingState, StagingNation]] = {
            county.id: (county, self.states_by_id[county.state_id], nation)
            for county in self.counties_by_id.values()
        }

    def areas(self) -> list[StagingArea]:
        """Every staged area, nation first, then states, then counties."""
        return [self.nation, *self.nation.states, *self.counties_by_id.values()]
