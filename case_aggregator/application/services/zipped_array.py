"""Zipped object array codec.

A zipped object array stores a list of homogeneous objects column-first:
the field names once, then one positional row per object.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from case_aggregator.application.dto.zipped import ZippedObjectArray


def zip_object_array(
    objects: Sequence[Mapping[str, Any]],
    fields: Sequence[str] | None = None,
) -> ZippedObjectArray:
    """Zip objects into rows. Field order defaults to the first object's keys."""
    if fields is None:
        if not objects:
            raise ValueError("Cannot infer fields from an empty object list")
        fields = list(objects[0].keys())
    field_list = list(fields)
    values = [[obj[name] for name in field_list] for obj in objects]
    return ZippedObjectArray(fields=field_list, values=values)


def unzip_object_array(zipped: ZippedObjectArray) -> list[dict[str, Any]]:
    """Unzip rows back into objects keyed by field name."""
    width = len(zipped.fields)
    objects = []
    for index, row in enumerate(zipped.values):
        if len(row) != width:
            raise ValueError(
                f"Row {index} has {len(row)} values, expected {width} ({zipped.fields})"
            )
        objects.append(dict(zip(zipped.fields, row)))
    return objects


def unzip_header(zipped: ZippedObjectArray) -> dict[str, int]:
    """Map each field name to its position in a row."""
    return {name: position for position, name in enumerate(zipped.fields)}
