"""Event payload DTOs."""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from case_aggregator.application.dto.zipped import ZippedObjectArray

EVENT_FIELDS = ("county", "day", "sex", "age", "caseState", "count")


class EventPayload(BaseModel):
    """Event list payload published by the feed compactor."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: int = Field(alias="startDate")  # epoch milliseconds
    last_updated: str = Field("", alias="lastUpdated")
    records: ZippedObjectArray


class EventRow(NamedTuple):
    """Validated event row, ready for linking."""

    county_id: int
    day_index: int
    sex_id: int
    age_id: int
    case_state_id: int
    count: int
