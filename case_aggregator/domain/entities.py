"""Domain entities."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, NamedTuple

from case_aggregator.domain.enums import AreaKind, SkipReason
from case_aggregator.domain.errors import UnknownDimensionError
from case_aggregator.domain.types import AreaId, DimensionId, ZippedValue


@dataclass(frozen=True)
class DimensionEntry:
    """Entry of a dimension table (sex, age group, case state)."""

    id: DimensionId
    name: str


SEXES = (
    DimensionEntry(0, "W"),
    DimensionEntry(1, "M"),
    DimensionEntry(2, "unbekannt"),
)

AGE_GROUPS = (
    DimensionEntry(0, "A00-A04"),
    DimensionEntry(1, "A05-A14"),
    DimensionEntry(2, "A15-A34"),
    DimensionEntry(3, "A35-A59"),
    DimensionEntry(4, "A60-A79"),
    DimensionEntry(5, "A80+"),
    DimensionEntry(6, "unbekannt"),
)

CASE_STATES = (
    DimensionEntry(0, "confirmed"),
    DimensionEntry(1, "death"),
)

CONFIRMED = CASE_STATES[0]
DEATH = CASE_STATES[1]


def _index(entries: tuple[DimensionEntry, ...]) -> Mapping[DimensionId, DimensionEntry]:
    return MappingProxyType({entry.id: entry for entry in entries})


@dataclass(frozen=True)
class Dimensions:
    """The three dimension tables, loaded once per run."""

    sexes: tuple[DimensionEntry, ...] = SEXES
    ages: tuple[DimensionEntry, ...] = AGE_GROUPS
    case_states: tuple[DimensionEntry, ...] = CASE_STATES
    _sex_by_id: Mapping[DimensionId, DimensionEntry] = field(init=False, repr=False, compare=False)
    _age_by_id: Mapping[DimensionId, DimensionEntry] = field(init=False, repr=False, compare=False)
    _case_state_by_id: Mapping[DimensionId, DimensionEntry] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_sex_by_id", _index(self.sexes))
        object.__setattr__(self, "_age_by_id", _index(self.ages))
        object.__setattr__(self, "_case_state_by_id", _index(self.case_states))

    def sex(self, sex_id: DimensionId) -> DimensionEntry:
        """Look up a sex entry by id."""
        return _lookup(self._sex_by_id, sex_id, "sex")

    def age(self, age_id: DimensionId) -> DimensionEntry:
        """Look up an age group entry by id."""
        return _lookup(self._age_by_id, age_id, "age group")

    def case_state(self, case_state_id: DimensionId) -> DimensionEntry:
        """Look up a case state entry by id."""
        return _lookup(self._case_state_by_id, case_state_id, "case state")

    def has_sex(self, sex_id: DimensionId) -> bool:
        return sex_id in self._sex_by_id

    def has_age(self, age_id: DimensionId) -> bool:
        return age_id in self._age_by_id

    def has_case_state(self, case_state_id: DimensionId) -> bool:
        return case_state_id in self._case_state_by_id


def _lookup(
    table: Mapping[DimensionId, DimensionEntry],
    entry_id: DimensionId,
    label: str,
) -> DimensionEntry:
    try:
        return table[entry_id]
    except KeyError:
        raise UnknownDimensionError(f"Unknown {label} id: {entry_id}") from None


@dataclass(frozen=True)
class Record:
    """A single positive event count attributed to a county and day."""

    day_index: int
    county_id: AreaId
    sex: DimensionEntry
    age: DimensionEntry
    count: int


@dataclass(frozen=True, eq=False)
class Area:
    """Common fields of every level of the hierarchy."""

    kind: ClassVar[AreaKind]

    id: AreaId
    display_name: str
    area: float
    population: int
    records_by_case_state: Mapping[DimensionId, tuple[Record, ...]]
    total_by_case_state: Mapping[DimensionId, int]
    rate_per_100k: Mapping[DimensionId, float]


@dataclass(frozen=True, eq=False)
class County(Area):
    """County; the only level records are attributed to directly."""

    kind: ClassVar[AreaKind] = AreaKind.COUNTY

    state_id: AreaId


@dataclass(frozen=True, eq=False)
class State(Area):
    """State owning an ordered tuple of counties."""

    kind: ClassVar[AreaKind] = AreaKind.STATE

    counties: tuple[County, ...]


@dataclass(frozen=True, eq=False)
class Nation(Area):
    """Root of the hierarchy."""

    kind: ClassVar[AreaKind] = AreaKind.NATION

    states: tuple[State, ...]


class DayValue(NamedTuple):
    """Daily count and running total for one day."""

    daily_count: int
    cumulative_total: int


class DataRowKey(NamedTuple):
    """Memoization key of a filtered time series."""

    area_kind: AreaKind
    area_id: AreaId
    case_state_id: DimensionId
    sex_id: DimensionId | None
    age_id: DimensionId | None


@dataclass(frozen=True)
class RowWarning:
    """Event row skipped during ingestion."""

    row_index: int
    reason: SkipReason
    detail: str
    row: tuple[ZippedValue, ...] = ()
