"""Meta payload DTOs."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from case_aggregator.application.dto.zipped import ZippedObjectArray
from case_aggregator.domain.entities import (
    AGE_GROUPS,
    CASE_STATES,
    SEXES,
    DimensionEntry,
    Dimensions,
)


class DimensionEntryModel(BaseModel):
    """Dimension table entry; upstream publishes the label as `de`."""

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "de"))

    def to_entry(self) -> DimensionEntry:
        return DimensionEntry(id=self.id, name=self.name)


class StateDescriptor(BaseModel):
    """Raw state descriptor."""

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "de"))


class CountyDescriptor(BaseModel):
    """Raw county descriptor. Population and area are authoritative here."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "de"))
    state_id: int = Field(validation_alias=AliasChoices("stateId", "state_id"))
    population: int = 0
    area: float = 0.0


class MetaPayload(BaseModel):
    """Geographic meta-descriptor payload."""

    model_config = ConfigDict(populate_by_name=True)

    states: ZippedObjectArray
    counties: ZippedObjectArray
    sex: list[DimensionEntryModel] | None = None
    ages: list[DimensionEntryModel] | None = None
    case_states: list[DimensionEntryModel] | None = Field(None, alias="caseStates")

    def dimensions(self) -> Dimensions:
        """Build dimension tables, falling back to the published defaults."""
        return Dimensions(
            sexes=_entries(self.sex, SEXES),
            ages=_entries(self.ages, AGE_GROUPS),
            case_states=_entries(self.case_states, CASE_STATES),
        )


def _entries(
    models: list[DimensionEntryModel] | None,
    default: tuple[DimensionEntry, ...],
) -> tuple[DimensionEntry, ...]:
    if not models:
        return default
    return tuple(model.to_entry() for model in models)
