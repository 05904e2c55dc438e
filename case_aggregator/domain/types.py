"""Domain types and aliases."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, TypedDict

Timestamp = datetime
Day = date
AreaId = int
DimensionId = int

# Row values in a zipped object array are positional and loosely typed
ZippedValue = Any


class ZippedObjectArrayDict(TypedDict):
    """Column-oriented exchange structure."""

    fields: list[str]
    values: list[list[ZippedValue]]


class DimensionEntryDict(TypedDict, total=False):
    """Dimension table entry as published upstream."""

    id: int
    name: str
    de: str


class MetaPayloadDict(TypedDict, total=False):
    """Geographic meta-descriptor payload."""

    states: ZippedObjectArrayDict
    counties: ZippedObjectArrayDict
    sex: list[DimensionEntryDict]
    ages: list[DimensionEntryDict]
    caseStates: list[DimensionEntryDict]


class EventPayloadDict(TypedDict):
    """Event list payload."""

    startDate: int
    lastUpdated: str
    records: ZippedObjectArrayDict


class FeedRowDict(TypedDict, total=False):
    """Single row of the upstream case feed."""

    IdBundesland: int
    Bundesland: str
    IdLandkreis: str
    Landkreis: str
    Altersgruppe: str
    Geschlecht: str
    AnzahlFall: int
    AnzahlTodesfall: int
    Meldedatum: int
    Datenstand: str
