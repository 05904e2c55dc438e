"""Domain enums."""

from enum import Enum


class AreaKind(str, Enum):
    """Level of an area in the geographic hierarchy."""

    NATION = "nation"
    STATE = "state"
    COUNTY = "county"


class SkipReason(str, Enum):
    """Reason an event row was skipped during ingestion."""

    ARITY = "arity"
    NOT_AN_INTEGER = "not_an_integer"
    NEGATIVE_DAY = "negative_day"
    UNKNOWN_SEX = "unknown_sex"
    UNKNOWN_AGE = "unknown_age"
    UNKNOWN_CASE_STATE = "unknown_case_state"
    DAY_OUT_OF_RANGE = "day_out_of_range"
    MISSING_FIELD = "missing_field"
