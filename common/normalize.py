"""Coercion helpers for untrusted numeric and JSON input.

Every quantity and cents amount crossing a trust boundary (request bodies,
JSON columns, client storage) goes through `to_non_negative_int`. Product
snapshots stored as JSON go through `parse_opaque_json`.
"""

import json
import math
from typing import Any, Optional


def to_non_negative_int(value: Any, fallback: int = 0) -> int:
    """Return `value` floored to an int and clamped to >= 0.

    Missing, non-numeric and non-finite input yields `fallback` unchanged.
    Booleans are not treated as numbers.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return max(0, math.floor(number))


def is_negative_number(value: Any) -> bool:
    """True when `value` parses as a finite number below zero."""
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return False
    return math.isfinite(number) and number < 0


def parse_opaque_json(value: Any) -> Optional[dict]:
    """Parse a JSON object, returning None for anything that is not one.

    JSON columns already decode to Python objects, so mappings are accepted
    as-is (copied). Never raises.
    """
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(value, str):
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None
