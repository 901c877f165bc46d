"""Scalar helpers shared by type inference and the chart transformers."""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateparser

_STRICT_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_NUMBER_PREFIX_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INFINITY_RE = re.compile(r"^([+-]?)Infinity")
_HAS_DIGIT_RE = re.compile(r"\d")

# two fill-in dates; a part that differs between them was absent from the input
_DEFAULT_DATE = datetime(2001, 1, 1)
_ALT_DEFAULT_DATE = datetime(2002, 2, 2)


def is_null(value: Any) -> bool:
    return value is None or value == ""


def to_number(value: Any) -> float | None:
    """Whole-value numeric conversion; ``None`` when the value is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if _STRICT_NUMBER_RE.match(text):
            return float(text)
        match = _INFINITY_RE.match(text)
        if match and text == match.group(0):
            return -math.inf if match.group(1) == "-" else math.inf
    return None


def parse_float(value: Any) -> float | None:
    """Leading-prefix numeric parse: ``"12kg"`` gives 12.0, ``"kg"`` gives None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else float(value)
    text = str(value).lstrip()
    match = _NUMBER_PREFIX_RE.match(text)
    if match:
        return float(match.group(0))
    match = _INFINITY_RE.match(text)
    if match:
        return -math.inf if match.group(1) == "-" else math.inf
    return None


def parse_date(value: Any) -> datetime | None:
    """Parse a calendar date from a string containing at least one digit.

    The year must be present; a missing month or day becomes 1, never a
    part of today's date, so time-only strings such as ``"10:30"`` are not
    dates. Aware datetimes are normalised to naive UTC so values stay
    comparable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and _HAS_DIGIT_RE.search(value):
        try:
            parsed = dateparser.parse(value, default=_DEFAULT_DATE)
            alternate = dateparser.parse(value, default=_ALT_DEFAULT_DATE)
        except (ValueError, OverflowError):
            return None
        if parsed.year != alternate.year:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_key(value: Any) -> str:
    """String form used for grouping keys and labels."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def unique_values(values: list[Any]) -> list[Any]:
    """Distinct values in first-seen order; ``True`` and ``1`` stay distinct."""
    seen: set[tuple[bool, Any]] = set()
    result: list[Any] = []
    for value in values:
        key = (isinstance(value, bool), value)
        if key not in seen:
            seen.add(key)
            result.append(value)
    return result
