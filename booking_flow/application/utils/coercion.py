from __future__ import annotations

import math
from typing import Any, Mapping


def to_number(value: Any) -> float | None:
    """Parse a finite number. Returns None when the value does not coerce."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def number_or_zero(value: Any) -> float:
    number = to_number(value)
    return number if number is not None else 0.0


def non_negative(value: Any) -> float:
    return max(number_or_zero(value), 0.0)


def to_text(value: Any) -> str | None:
    """Non-empty string (integers are stringified), else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def lookup_path(record: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path such as "pricing.price" or "categories.0.name"."""
    current: Any = record
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, (list, tuple)) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def format_number(value: float) -> str:
    """Render a number for a query string: 30.0 -> "30", 30.5 -> "30.5"."""
    number = number_or_zero(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
