"""Unit tests for the rate normalizer."""

import math
from datetime import date

import pytest

from case_aggregator.application.dto.events import EventRow
from case_aggregator.application.dto.meta import CountyDescriptor, StateDescriptor
from case_aggregator.application.services.context import AggregationContext
from case_aggregator.application.services.hierarchy_builder import AreaHierarchyBuilder
from case_aggregator.application.services.rate_normalizer import RateNormalizer, rate_per_100k
from case_aggregator.application.services.record_linker import RecordLinker
from case_aggregator.domain.entities import Dimensions


def test_rate_per_100k():
    """Test rate computation."""
    assert rate_per_100k(10, 200) == 5000.0
    assert rate_per_100k(0, 200) == 0.0
    assert rate_per_100k(1, 100_000) == 1.0


def test_rate_per_100k_zero_population():
    """Test zero population yields 0.0, never NaN or infinity."""
    rate = rate_per_100k(5, 0)

    assert rate == 0.0
    assert math.isfinite(rate)


def test_normalize_all_levels():
    """Test rates are set on every area for every case state."""
    context = AggregationContext(dimensions=Dimensions(), days=(date(2020, 3, 1),))
    hierarchy = AreaHierarchyBuilder(context).build(
        [StateDescriptor(id=1, name="S1"), StateDescriptor(id=2, name="Empty")],
        [
            CountyDescriptor(id=11, name="A", state_id=1, population=100),
            CountyDescriptor(id=12, name="B", state_id=1, population=0),
        ],
    )
    RecordLinker(context).link(hierarchy, [EventRow(11, 0, 0, 0, 0, 5), EventRow(12, 0, 0, 0, 0, 5)])

    RateNormalizer().normalize(hierarchy)

    assert hierarchy.counties_by_id[11].rates == {0: 5000.0, 1: 0.0}
    assert hierarchy.counties_by_id[12].rates == {0: 0.0, 1: 0.0}
    assert hierarchy.states_by_id[1].rates[0] == pytest.approx(10000.0)
    assert hierarchy.states_by_id[2].rates == {0: 0.0, 1: 0.0}
    assert hierarchy.nation.rates[0] == pytest.approx(10000.0)
