"""Unit tests for the snapshot freezer."""

import dataclasses
from datetime import date, datetime, timezone

import pytest

from case_aggregator.application.dto.events import EventRow
from case_aggregator.application.dto.meta import CountyDescriptor, StateDescriptor
from case_aggregator.application.services.context import AggregationContext
from case_aggregator.application.services.hierarchy_builder import AreaHierarchyBuilder
from case_aggregator.application.services.rate_normalizer import RateNormalizer
from case_aggregator.application.services.record_linker import RecordLinker
from case_aggregator.application.services.snapshot_freezer import SnapshotFreezer
from case_aggregator.domain.entities import County, Dimensions, Nation, State
from case_aggregator.domain.errors import MissingReferenceError

BUILT_AT = datetime(2020, 4, 2, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def snapshot():
    """Build, link, normalize and freeze a small hierarchy."""
    context = AggregationContext(dimensions=Dimensions(), days=(date(2020, 3, 1), date(2020, 3, 2)))
    hierarchy = AreaHierarchyBuilder(context).build(
        [StateDescriptor(id=2, name="S2"), StateDescriptor(id=1, name="S1")],
        [
            CountyDescriptor(id=21, name="C21", state_id=2, population=200),
            CountyDescriptor(id=11, name="C11", state_id=1, population=100),
        ],
    )
    RecordLinker(context).link(hierarchy, [EventRow(11, 1, 0, 0, 0, 4), EventRow(21, 0, 1, 1, 1, 2)])
    RateNormalizer().normalize(hierarchy)
    return SnapshotFreezer(context).freeze(hierarchy, last_updated="today", built_at=BUILT_AT)


def test_freeze_types(snapshot):
    """Test the snapshot exposes frozen area types."""
    assert isinstance(snapshot.nation, Nation)
    assert all(isinstance(state, State) for state in snapshot.states)
    assert all(isinstance(county, County) for county in snapshot.counties)
    assert snapshot.last_updated == "today"
    assert snapshot.built_at == BUILT_AT


def test_freeze_copies_values(snapshot):
    """Test totals, rates and records survive freezing."""
    county = snapshot.county(11)

    assert county.total_by_case_state == {0: 4, 1: 0}
    assert county.rate_per_100k == {0: 4000.0, 1: 0.0}
    assert [r.count for r in county.records_by_case_state[0]] == [4]
    assert isinstance(county.records_by_case_state[0], tuple)
    assert snapshot.nation.total_by_case_state == {0: 4, 1: 2}
    assert snapshot.nation.population == 300


def test_lookups(snapshot):
    """Test state and county lookups and the county back-reference."""
    assert [state.id for state in snapshot.states] == [1, 2]
    assert [county.id for county in snapshot.counties] == [11, 21]
    assert snapshot.state_of(snapshot.county(21)) is snapshot.state(2)
    assert snapshot.state(2).counties[0] is snapshot.county(21)


def test_unknown_lookup_raises(snapshot):
    """Test lookups of unknown ids."""
    with pytest.raises(MissingReferenceError):
        snapshot.state(99)
    with pytest.raises(MissingReferenceError):
        snapshot.county(99)


def test_areas_are_immutable(snapshot):
    """Test frozen areas reject assignment and mutation."""
    county = snapshot.county(11)

    with pytest.raises(dataclasses.FrozenInstanceError):
        county.population = 1
    with pytest.raises(TypeError):
        county.total_by_case_state[0] = 99
    with pytest.raises(TypeError):
        county.records_by_case_state[0] = ()
    with pytest.raises(AttributeError):
        county.records_by_case_state[0].append(None)
    with pytest.raises(dataclasses.FrozenInstanceError):
        county.records_by_case_state[0][0].count = 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.nation = None


def test_days_and_dimensions_are_immutable(snapshot):
    """Test the day list and dimension tables are frozen."""
    assert isinstance(snapshot.days, tuple)
    assert isinstance(snapshot.dimensions.sexes, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.dimensions.sexes[0].name = "X"
