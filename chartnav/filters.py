"""Row selection helpers used to partition data under tree nodes."""

from __future__ import annotations

import numbers
from typing import Any

import pandas as pd
from pandas.api.types import is_datetime64_any_dtype, is_numeric_dtype

from .formatting import is_date_like, to_timestamp


def as_text(value: Any) -> str:
    """Stringify ``value`` so that ``1``, ``1.0`` and ``"1"`` compare equal."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _empty(rows: pd.DataFrame) -> pd.DataFrame:
    return rows.iloc[0:0]


def filter_equals(rows: pd.DataFrame, field: str, value: Any) -> pd.DataFrame:
    """Select rows whose ``field`` equals ``value`` when both are compared as text."""

    if field not in rows.columns:
        return _empty(rows)
    target = as_text(value)
    mask = rows[field].map(as_text) == target
    return rows.loc[mask]


def _is_year_bound(lower: Any, upper: Any) -> bool:
    return len(as_text(lower)) == 4 and len(as_text(upper)) == 4


def _align_tz(value: Any, tz: Any) -> pd.Timestamp:
    stamp = to_timestamp(value)
    if stamp.tzinfo is None:
        return stamp if tz is None else stamp.tz_localize(tz)
    # aware bounds against naive rows are compared as UTC wall time
    return stamp.tz_convert(tz)


def _comparable(series: pd.Series, lower: Any, upper: Any) -> tuple[pd.Series, Any, Any]:
    if is_datetime64_any_dtype(series):
        if _is_year_bound(lower, upper):
            return series.dt.year, float(lower), float(upper)
        if is_date_like(lower) and is_date_like(upper):
            tz = series.dt.tz
            return series, _align_tz(lower, tz), _align_tz(upper, tz)
        # numeric bounds against dates are epoch milliseconds
        epoch = pd.Timestamp("1970-01-01", tz=series.dt.tz)
        millis = (series - epoch) / pd.Timedelta(milliseconds=1)
        return millis, float(lower), float(upper)
    if is_date_like(lower) and is_date_like(upper):
        stamps = pd.to_datetime(series, errors="coerce")
        tz = stamps.dt.tz if is_datetime64_any_dtype(stamps) else None
        return stamps, _align_tz(lower, tz), _align_tz(upper, tz)
    if is_numeric_dtype(series):
        return series, lower, upper
    return pd.to_numeric(series, errors="coerce"), lower, upper


def filter_range(
    rows: pd.DataFrame, field: str, lower: Any, upper: Any
) -> pd.DataFrame:
    """Select rows with ``lower <= row[field] < upper``.

    When both bounds look like four digit years and the field holds dates, only
    the year of each date is compared. Rows with missing or non comparable
    values are never selected.
    """

    if field not in rows.columns:
        return _empty(rows)
    if isinstance(lower, numbers.Number) and isinstance(upper, numbers.Number):
        lower, upper = float(lower), float(upper)
    values, lower, upper = _comparable(rows[field], lower, upper)
    mask = (values >= lower) & (values < upper)
    return rows.loc[mask.fillna(False).astype(bool)]


__all__ = ["as_text", "filter_equals", "filter_range"]
