"""Lenient integer coercion for loosely typed upstream values."""

from typing import Any


def parse_int(value: Any) -> int | None:
    """Integral value of `value`, or None when it is not an integer.

    Integral floats and strings such as "05315" are accepted; bools are not.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
