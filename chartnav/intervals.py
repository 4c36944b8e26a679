"""Bin continuous guide ticks into contiguous half-open intervals."""

from __future__ import annotations

import logging
import numbers
from datetime import tzinfo
from typing import Any, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .errors import IntervalError
from .formatting import is_date_like, to_timestamp

logger = logging.getLogger(__name__)

NumericInterval = tuple[float, float]
DateInterval = tuple[pd.Timestamp, pd.Timestamp]
Interval = Union[NumericInterval, DateInterval]


def _normalise_ticks(values: Sequence[Any]) -> tuple[np.ndarray, bool, Optional[tzinfo]]:
    """Return ticks as floats, whether they were dates, and the dates' timezone.

    Dates are expressed in epoch milliseconds (UTC for timezone aware ticks).
    Comma formatted numeric strings (``"1,000"``) are parsed as numbers.
    """

    items = list(values)
    if all(isinstance(item, str) for item in items):
        try:
            ticks = np.asarray(
                [float(item.replace(",", "")) for item in items], dtype=float
            )
        except ValueError as exc:
            raise IntervalError(f"Non-numeric tick in {items!r}") from exc
        return ticks, False, None
    if all(is_date_like(item) for item in items):
        ticks = np.asarray(
            [to_timestamp(item).value / 1_000_000 for item in items], dtype=float
        )
        return ticks, True, to_timestamp(items[0]).tzinfo
    if all(
        isinstance(item, numbers.Real) and not isinstance(item, bool)
        for item in items
    ):
        return np.asarray(items, dtype=float), False, None
    raise IntervalError(
        f"Ticks must be all numeric or all dates, got {[type(v).__name__ for v in items]}"
    )


def _tick_increments(ticks: np.ndarray) -> list[NumericInterval]:
    increments: list[NumericInterval] = []
    last = ticks.size - 1
    for index, current in enumerate(ticks):
        if index == 0:
            if current == 0:
                # a zero first tick only opens the next bucket
                continue
            width = ticks[1] - current
            increments.append((float(current - width), float(current)))
        elif index == last:
            width = current - ticks[index - 1]
            increments.append((float(ticks[index - 1]), float(current)))
            increments.append((float(current), float(current + width)))
        else:
            increments.append((float(ticks[index - 1]), float(current)))
    return increments


def _from_millis(millis: float, tz: Optional[tzinfo]) -> pd.Timestamp:
    stamp = pd.Timestamp(round(millis), unit="ms")
    if tz is None:
        return stamp
    return stamp.tz_localize("UTC").tz_convert(tz)


def bin_intervals(values: Sequence[Any]) -> list[Interval]:
    """Turn ascending tick values into contiguous ``[lower, upper)`` buckets.

    Parameters
    ----------
    values:
        Tick marks of a continuous axis or legend, sorted ascending. Either all
        numbers, all numeric strings or all calendar values.

    Returns
    -------
    list
        ``n`` intervals for ``n`` ticks when the first tick is exactly zero and
        ``n + 1`` otherwise: a bucket is synthesised below a non-zero first tick
        and above the last tick, each as wide as the neighbouring gap. Date
        ticks produce :class:`pandas.Timestamp` bounds in the timezone of the
        first tick. A single tick gives no intervals: a lone zero only opens a
        bucket that never comes, and a lone non-zero tick has no width.

    Raises
    ------
    IntervalError
        When the ticks are neither all numeric nor all dates, or contain
        missing values.
    """

    ticks, is_date, tz = _normalise_ticks(values)
    if np.isnan(ticks).any():
        raise IntervalError(f"Ticks contain missing values: {list(values)!r}")
    if ticks.size < 2:
        if ticks.size == 1 and ticks[0] != 0:
            logger.warning("Single tick %r has no width; no intervals derived", values[0])
        return []

    increments = _tick_increments(ticks)
    logger.debug("Binned %d ticks into %d intervals", ticks.size, len(increments))
    if is_date:
        return [
            (_from_millis(lower, tz), _from_millis(upper, tz))
            for lower, upper in increments
        ]
    return increments


__all__ = ["DateInterval", "Interval", "NumericInterval", "bin_intervals"]
