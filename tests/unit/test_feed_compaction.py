"""Unit tests for feed compaction."""

import pytest

from case_aggregator.application.services.feed_compaction import compact_feed_rows
from case_aggregator.application.services.zipped_array import unzip_object_array
from case_aggregator.domain.entities import Dimensions
from case_aggregator.domain.enums import SkipReason
from case_aggregator.domain.errors import InvalidPayloadError

DAY_MS = 24 * 60 * 60 * 1000
START = 1583020800000


def _row(county, state, day, sex="W", age="A35-A59", cases=0, deaths=0):
    return {
        "IdBundesland": state,
        "Bundesland": f"Land {state}",
        "IdLandkreis": f"{county:05d}",
        "Landkreis": f"Kreis {county}",
        "Altersgruppe": age,
        "Geschlecht": sex,
        "AnzahlFall": cases,
        "AnzahlTodesfall": deaths,
        "Meldedatum": START + day * DAY_MS,
        "Datenstand": "02.04.2020, 00:00 Uhr",
    }


def test_compact_splits_cases_and_deaths():
    """Test one record per positive case count and per positive death count."""
    rows = [
        _row(1001, 1, 2, cases=4, deaths=1),
        _row(1002, 1, 0, sex="M", age="A80+", cases=2),
        _row(2000, 2, 1, deaths=3),
    ]

    compacted = compact_feed_rows(rows, Dimensions())

    payload = compacted.payload
    assert payload.start_date == START
    assert payload.last_updated == "02.04.2020, 00:00 Uhr"
    assert payload.records.fields == ["county", "day", "sex", "age", "caseState", "count"]
    assert unzip_object_array(payload.records) == [
        {"county": 1002, "day": 0, "sex": 1, "age": 5, "caseState": 0, "count": 2},
        {"county": 2000, "day": 1, "sex": 0, "age": 3, "caseState": 1, "count": 3},
        {"county": 1001, "day": 2, "sex": 0, "age": 3, "caseState": 0, "count": 4},
        {"county": 1001, "day": 2, "sex": 0, "age": 3, "caseState": 1, "count": 1},
    ]


def test_compact_drops_zero_counts():
    """Test rows without positive counts produce no records."""
    compacted = compact_feed_rows([_row(1001, 1, 0), _row(1001, 1, 1, cases=-1)], Dimensions())

    assert compacted.payload.records.values == []


def test_compact_derives_descriptors():
    """Test unique state and county descriptors sorted by id."""
    rows = [_row(2000, 2, 0, cases=1), _row(1002, 1, 0, cases=1), _row(1001, 1, 1, cases=1)]

    compacted = compact_feed_rows(rows, Dimensions())

    assert [(s.id, s.name) for s in compacted.states] == [(1, "Land 1"), (2, "Land 2")]
    assert [(c.id, c.state_id) for c in compacted.counties] == [(1001, 1), (1002, 1), (2000, 2)]
    assert all(c.population == 0 for c in compacted.counties)


def test_compact_skips_unknown_names():
    """Test rows with unknown sex or age labels are reported and skipped."""
    rows = [_row(1001, 1, 0, sex="X", cases=1), _row(1001, 1, 0, age="A99+", cases=1), _row(1001, 1, 0, cases=1)]

    compacted = compact_feed_rows(rows, Dimensions())

    assert len(compacted.payload.records.values) == 1
    assert [w.reason for w in compacted.warnings] == [SkipReason.UNKNOWN_SEX, SkipReason.UNKNOWN_AGE]


def test_compact_empty_raises():
    """Test compacting no rows."""
    with pytest.raises(InvalidPayloadError, match="No feed rows"):
        compact_feed_rows([], Dimensions())


@pytest.mark.parametrize(
    "overrides, reason",
    [
        ({"AnzahlFall": "x"}, SkipReason.NOT_AN_INTEGER),
        ({"AnzahlTodesfall": 1.5}, SkipReason.NOT_AN_INTEGER),
        ({"IdLandkreis": "abc"}, SkipReason.NOT_AN_INTEGER),
        ({"Meldedatum": "yesterday"}, SkipReason.NOT_AN_INTEGER),
        ({"IdLandkreis": None}, SkipReason.MISSING_FIELD),
        ({"Meldedatum": 10**17}, SkipReason.DAY_OUT_OF_RANGE),
    ],
)
def test_compact_skips_malformed_row(overrides, reason):
    """Test rows with unparseable values are reported and skipped."""
    rows = [_row(1001, 1, 0, cases=2), {**_row(1002, 1, 1, cases=3), **overrides}]

    compacted = compact_feed_rows(rows, Dimensions())

    assert unzip_object_array(compacted.payload.records) == [
        {"county": 1001, "day": 0, "sex": 0, "age": 3, "caseState": 0, "count": 2},
    ]
    assert [(w.row_index, w.reason) for w in compacted.warnings] == [(1, reason)]
    assert [c.id for c in compacted.counties] == [1001]


def test_compact_skips_row_without_key():
    """Test a row lacking a required key is skipped."""
    incomplete = _row(1002, 1, 0, cases=3)
    del incomplete["Landkreis"]

    compacted = compact_feed_rows([_row(1001, 1, 0, cases=2), incomplete], Dimensions())

    assert len(compacted.payload.records.values) == 1
    assert compacted.warnings[0].reason == SkipReason.MISSING_FIELD


def test_compact_counts_default_to_zero():
    """Test absent counts produce no records and no warnings."""
    row = _row(1001, 1, 0)
    del row["AnzahlFall"], row["AnzahlTodesfall"]

    compacted = compact_feed_rows([row], Dimensions())

    assert compacted.payload.records.values == []
    assert compacted.warnings == []


def test_compact_warnings_use_input_positions():
    """Test warning row indices refer to the caller's rows, not the date order."""
    rows = [
        _row(1001, 1, 3, sex="X", cases=1),
        _row(1001, 1, 0, cases="n/a"),
        _row(1001, 1, 1, cases=1),
        _row(1001, 1, 2, age="A99+", cases=1),
    ]

    compacted = compact_feed_rows(rows, Dimensions())

    assert [(w.row_index, w.reason) for w in compacted.warnings] == [
        (0, SkipReason.UNKNOWN_SEX),
        (1, SkipReason.NOT_AN_INTEGER),
        (3, SkipReason.UNKNOWN_AGE),
    ]
    assert compacted.payload.start_date == START + DAY_MS


def test_compact_no_parseable_rows_raises():
    """Test compacting only malformed rows."""
    with pytest.raises(InvalidPayloadError, match="could be parsed"):
        compact_feed_rows([_row(1001, 1, 0, cases="x")], Dimensions())
