"""Text formatting helpers shared by the description tokens and renderers."""

from __future__ import annotations

import math
import numbers
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd


def is_date_like(value: Any) -> bool:
    """Return ``True`` for calendar values (datetime, date, Timestamp, datetime64)."""

    return isinstance(value, (datetime, date, np.datetime64))


def to_timestamp(value: Any) -> pd.Timestamp:
    """Coerce a calendar value into a :class:`pandas.Timestamp`."""

    return pd.Timestamp(value)


def fmt_date(value: Any) -> str:
    """Render a calendar value as ``"{Month} {Day}, {Year}"``."""

    stamp = to_timestamp(value)
    return f"{stamp.strftime('%B')} {stamp.day}, {stamp.year}"


def fmt_number(value: Any) -> str:
    """Render integral numbers plainly and others with two decimals."""

    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return str(number)
    if number.is_integer():
        return str(int(number))
    return f"{number:.2f}"


def fmt_value(value: Any) -> str:
    """Format a tick, bound or datum value for inclusion in a description.

    Strings are returned untouched, numbers follow :func:`fmt_number` and
    calendar values follow :func:`fmt_date`. Anything else falls back to
    ``str``.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if is_date_like(value):
        if pd.isna(value):
            return ""
        return fmt_date(value)
    if isinstance(value, numbers.Number):
        return fmt_number(value)
    return str(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded towards +inf."""

    return int(math.floor(float(value) + 0.5))


def pluralize(count: int, noun: str, suffix: str = "s") -> str:
    """Return ``"<count> <noun>"`` with ``suffix`` appended unless ``count`` is 1."""

    return f"{count} {noun}{suffix if count != 1 else ''}"


def capitalize_first(text: str) -> str:
    """Upper-case only the first character of ``text``."""

    return text[:1].upper() + text[1:]


def quote(text: str) -> str:
    """Wrap ``text`` in double quotes, leaving empty strings empty."""

    return f'"{text}"' if text else ""


__all__ = [
    "capitalize_first",
    "fmt_date",
    "fmt_number",
    "fmt_value",
    "is_date_like",
    "pluralize",
    "quote",
    "round_half_up",
    "to_timestamp",
]
