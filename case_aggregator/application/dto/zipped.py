"""Zipped object array DTO."""

from typing import Any

from pydantic import BaseModel


class ZippedObjectArray(BaseModel):
    """Column-oriented exchange structure: field names plus positional rows."""

    fields: list[str]
    values: list[list[Any]]
