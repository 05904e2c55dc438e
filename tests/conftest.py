"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from case_aggregator.domain.ports import ClockPort

BUILT_AT = datetime(2020, 4, 2, 8, 0, 0, tzinfo=timezone.utc)

# 2020-03-01T00:00:00Z
START_DATE_MS = 1583020800000


class FixedClock(ClockPort):
    """Clock returning a fixed timestamp."""

    def now(self):
        return BUILT_AT


@pytest.fixture
def clock():
    """Create fixed clock."""
    return FixedClock()


@pytest.fixture
def meta_payload():
    """One state with counties A (1001) and B (1002), population 100 each."""
    return {
        "states": {
            "fields": ["id", "de"],
            "values": [[6, "Hessen"]],
        },
        "counties": {
            "fields": ["id", "de", "stateId", "population", "area"],
            "values": [
                [1001, "A", 6, 100, 10.5],
                [1002, "B", 6, 100, 4.5],
            ],
        },
    }


@pytest.fixture
def event_payload():
    """Events: A/day0/confirmed 5, A/day1/confirmed 3, B/day0/confirmed 2."""
    return {
        "startDate": START_DATE_MS,
        "lastUpdated": "02.04.2020, 00:00 Uhr",
        "records": {
            "fields": ["county", "day", "sex", "age", "caseState", "count"],
            "values": [
                [1001, 0, 0, 2, 0, 5],
                [1001, 1, 1, 3, 0, 3],
                [1002, 0, 1, 2, 0, 2],
            ],
        },
    }
