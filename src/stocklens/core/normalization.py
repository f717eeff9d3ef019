"""
Boundary normalization helpers.

Backend payloads carry the same concept under several field names and
nesting shapes, and numeric fields may arrive as strings, nulls or garbage.
These helpers resolve and coerce values so the entities downstream stay
strict. None of them raise for malformed input.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

_MISSING = object()


def _lookup(record: Any, path: str) -> Any:
    """Walk a dotted path over mappings and attributes."""
    current = record
    for part in path.split("."):
        if current is None:
            return _MISSING
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        else:
            current = getattr(current, part, _MISSING)
        if current is _MISSING:
            return _MISSING
    return current


def resolve_first_present(
    record: Any,
    path_candidates: Iterable[str],
    default: Any = None,
    types: type | tuple[type, ...] | None = None,
) -> Any:
    """
    Return the value at the first candidate path that is present.

    A value is present when it is not None and not a blank string. When
    ``types`` is given the value must also be an instance of it, so a
    candidate like ``customer`` can be skipped when it holds an object
    rather than a name.

    Args:
        record: Mapping or object to read from.
        path_candidates: Dotted paths, tried in order (e.g. "sale.customer.name").
        default: Returned when no candidate is present.
        types: Optional accepted type(s) for the resolved value.

    Returns:
        The first present value, or ``default``.
    """
    for path in path_candidates:
        value = _lookup(record, path)
        if value is _MISSING or value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if types is not None and not isinstance(value, types):
            continue
        return value
    return default


def to_number(value: Any) -> float:
    """Coerce a value to float; anything unparsable or non-finite becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float, Decimal)):
        return 0.0
    try:
        result = float(value)
    except (ValueError, OverflowError):
        # Signalling NaN decimals, ints beyond float range, garbage strings
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_int(value: Any) -> int:
    """Coerce a value to int, truncating fractions; unparsable becomes 0."""
    return int(to_number(value))


def to_optional_number(value: Any) -> float | None:
    """Like to_number, but keeps absence (None or blank string) as None."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_number(value)


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a date or datetime value into a naive UTC datetime.

    Accepts datetime, date and ISO 8601 strings (date-only, "T" or space
    separated, optional "Z" suffix). Returns None for anything else.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    # Aware and naive datetimes cannot be compared, so normalize to naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
