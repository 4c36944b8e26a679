"""Exceptions raised while building and describing accessibility trees."""

from __future__ import annotations


class ChartnavError(Exception):
    """Base class for every error raised by :mod:`chartnav`."""


class UnrecognizedVariantError(ChartnavError, ValueError):
    """An unknown spec or node ``type`` reached a dispatch point."""

    def __init__(self, kind: str, value: object, where: str) -> None:
        super().__init__(f"{kind} {value!r} not handled in {where}")
        self.kind = kind
        self.value = value
        self.where = where


class ShapeMismatchError(ChartnavError, TypeError):
    """A guide or node does not have the shape its declared type requires."""


class IntervalError(ChartnavError, ValueError):
    """Tick values cannot be turned into contiguous intervals."""


class SettingsError(ChartnavError, ValueError):
    """Verbosity settings do not follow the persisted settings format."""


__all__ = [
    "ChartnavError",
    "IntervalError",
    "SettingsError",
    "ShapeMismatchError",
    "UnrecognizedVariantError",
]
