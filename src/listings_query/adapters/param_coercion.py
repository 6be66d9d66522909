"""
Coercion of raw search parameter values.

Query objects receive values exactly as the caller sent them (strings from a
query string, or native values from Python callers). Malformed values raise
InvalidFilterValue, which the HTTP layer reports as 422 INVALID_VALUE.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

MILES_PER_DEGREE_LATITUDE = 69.0

_TRUE_VALUES = {"true", "t", "1", "yes", "y"}
_FALSE_VALUES = {"false", "f", "0", "no", "n"}


class InvalidFilterValue(ValueError):
    """A search parameter value that cannot be coerced to what its filter needs."""


def as_list(value: Any) -> list[str]:
    """Accept a list/tuple/set or a comma-separated string."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item).strip() for item in value if str(item).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidFilterValue(f"{name} must be an integer, got {value!r}")
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidFilterValue(f"{name} must be an integer, got {value!r}") from None


def as_non_negative_int(value: Any, name: str) -> int:
    parsed = as_int(value, name)
    if parsed < 0:
        raise InvalidFilterValue(f"{name} must be a non-negative integer, got {value!r}")
    return parsed


def as_decimal(value: Any, name: str) -> Decimal:
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidFilterValue(f"{name} must be a number, got {value!r}") from None
    if not parsed.is_finite():
        raise InvalidFilterValue(f"{name} must be a finite number, got {value!r}")
    return parsed


def as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise InvalidFilterValue(f"{name} must be a boolean, got {value!r}")


def as_datetime(value: Any, name: str) -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            raise InvalidFilterValue(f"{name} must be an ISO-8601 date, got {value!r}") from None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def bounding_box(latitude: float, longitude: float, miles: float) -> tuple[float, float, float, float]:
    """(min_lat, max_lat, min_lon, max_lon) of a square ``miles`` around a point."""
    lat_delta = miles / MILES_PER_DEGREE_LATITUDE
    cos_lat = max(math.cos(math.radians(latitude)), 1e-6)
    lon_delta = miles / (MILES_PER_DEGREE_LATITUDE * cos_lat)
    return latitude - lat_delta, latitude + lat_delta, longitude - lon_delta, longitude + lon_delta
