"""Verbosity presets: which description tokens are read, in which order and length.

Settings map each configurable hierarchy level to named presets. A preset is an
ordered list of ``(token, length)`` pairs; tokens that are switched off are
simply absent. On disk the lengths are stored as ordinals (``0`` short, ``1``
long) in a YAML document.
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import yaml

from .errors import SettingsError
from .hierarchy import (
    CONFIGURABLE_LEVELS,
    HIERARCHY_LEVEL_TO_TOKENS,
    TOKEN_TYPES,
    HierarchyLevel,
    TokenType,
)


class TokenLength(IntEnum):
    """Index into a token's ``(short, long)`` fragments."""

    SHORT = 0
    LONG = 1


Preset = List[Tuple[TokenType, TokenLength]]
Settings = Dict[HierarchyLevel, Dict[str, Preset]]

DEFAULT_PRESET = "high"

TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    "name": "Name of the chart, axis or legend",
    "index": "Position among sibling nodes",
    "type": "Chart type, axis scale or legend channel",
    "children": "Axes contained in the chart",
    "data": "Values covered by the node",
    "size": "Number of values below the node",
    "parent": "Facet the node belongs to",
    "aggregate": "Average, maximum and minimum of the selected values",
}

_S = TokenLength.SHORT
_L = TokenLength.LONG

_DEFAULT_SETTINGS: Settings = {
    "facet": {
        "high": [("index", _L), ("type", _L), ("name", _L), ("children", _L)],
        "medium": [("index", _S), ("type", _S), ("name", _L), ("children", _S)],
        "low": [("type", _S), ("name", _S)],
    },
    "axis": {
        "high": [
            ("name", _L),
            ("type", _L),
            ("data", _L),
            ("size", _L),
            ("parent", _L),
            ("aggregate", _L),
        ],
        "medium": [
            ("name", _S),
            ("type", _S),
            ("data", _S),
            ("size", _S),
            ("aggregate", _S),
        ],
        "low": [("name", _S), ("size", _S)],
    },
    "section": {
        "high": [("index", _L), ("data", _L), ("size", _L), ("parent", _L)],
        "medium": [("index", _S), ("data", _S), ("size", _S)],
        "low": [("data", _S), ("size", _S)],
    },
    "datapoint": {
        "high": [("data", _L), ("parent", _L)],
        "medium": [("data", _S), ("parent", _S)],
        "low": [("data", _S)],
    },
}

_LENGTH_NAMES = {"short": TokenLength.SHORT, "long": TokenLength.LONG}


def default_settings() -> Settings:
    """Return a fresh copy of the built-in presets."""

    return {
        level: {name: list(pairs) for name, pairs in presets.items()}
        for level, presets in _DEFAULT_SETTINGS.items()
    }


def _coerce_length(value: Any, where: str) -> TokenLength | None:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "off":
            return None
        if lowered in _LENGTH_NAMES:
            return _LENGTH_NAMES[lowered]
        raise SettingsError(f"{where}: unknown token length {value!r}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"{where}: token length must be an ordinal, got {value!r}")
    try:
        return TokenLength(value)
    except ValueError as exc:
        raise SettingsError(f"{where}: unknown token length ordinal {value!r}") from exc


def _coerce_preset(level: str, name: str, raw: Any) -> Preset:
    where = f"{level}.{name}"
    if not isinstance(raw, (list, tuple)):
        raise SettingsError(f"{where}: preset must be a list of [token, length] pairs")
    allowed = HIERARCHY_LEVEL_TO_TOKENS[level]  # type: ignore[index]
    preset: Preset = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise SettingsError(f"{where}: expected [token, length], got {item!r}")
        token, raw_length = item
        if token not in TOKEN_TYPES:
            raise SettingsError(f"{where}: unknown token {token!r}")
        if token not in allowed:
            raise SettingsError(f"{where}: token {token!r} is not available at level {level}")
        if token in seen:
            raise SettingsError(f"{where}: token {token!r} listed twice")
        seen.add(token)
        length = _coerce_length(raw_length, where)
        if length is not None:
            preset.append((token, length))
    return preset


def validate_settings(raw: Any) -> Settings:
    """Validate a parsed settings mapping and normalise its lengths.

    Raises
    ------
    SettingsError
        On unknown levels, tokens not available at a level, duplicated tokens
        or unknown length ordinals.
    """

    if not isinstance(raw, Mapping):
        raise SettingsError("Settings must be a mapping of hierarchy level to presets")
    settings: Settings = {}
    for level, presets in raw.items():
        if level not in CONFIGURABLE_LEVELS:
            raise SettingsError(f"Unknown or non-configurable hierarchy level {level!r}")
        if not isinstance(presets, Mapping):
            raise SettingsError(f"{level}: presets must be a mapping of name to tokens")
        settings[level] = {
            str(name): _coerce_preset(level, str(name), pairs)
            for name, pairs in presets.items()
        }
    return settings


def merge_settings(base: Settings, override: Settings) -> Settings:
    """Merge two settings mappings.

    Presets of ``override`` replace presets with the same name in ``base``;
    other presets of both are kept. Neither argument is modified.
    """

    merged: Settings = {
        level: {name: list(pairs) for name, pairs in presets.items()}
        for level, presets in base.items()
    }
    for level, presets in override.items():
        target = merged.setdefault(level, {})
        for name, pairs in presets.items():
            target[name] = list(pairs)
    return merged


def add_preset(
    settings: Settings,
    level: HierarchyLevel,
    name: str,
    pairs: Iterable[tuple[str, Any]],
) -> Settings:
    """Return new settings with preset ``name`` stored under ``level``."""

    if level not in CONFIGURABLE_LEVELS:
        raise SettingsError(f"Unknown or non-configurable hierarchy level {level!r}")
    preset = _coerce_preset(level, name, [list(pair) for pair in pairs])
    return merge_settings(settings, {level: {name: preset}})


def load_settings(path: Path) -> Settings:
    """Load settings from a YAML file.

    Returns the default presets when the file does not exist or is empty.
    Presets found in the file are merged over the defaults.
    """

    path = Path(path)
    if not path.exists():
        return default_settings()
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return default_settings()
    return merge_settings(default_settings(), validate_settings(data))


def save_settings(settings: Settings, path: Path) -> None:
    """Persist settings as YAML, lengths stored as ordinals."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        level: {
            name: [[token, int(length)] for token, length in pairs]
            for name, pairs in presets.items()
        }
        for level, presets in settings.items()
    }
    path.write_text(
        yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8"
    )


def prettify_token_tuples(pairs: Iterable[tuple[str, TokenLength]]) -> str:
    """Render a preset as ``"name (long), size (short)"``."""

    return ", ".join(
        f"{token} ({TokenLength(length).name.lower()})" for token, length in pairs
    )


__all__ = [
    "DEFAULT_PRESET",
    "Preset",
    "Settings",
    "TOKEN_DESCRIPTIONS",
    "TokenLength",
    "add_preset",
    "default_settings",
    "load_settings",
    "merge_settings",
    "prettify_token_tuples",
    "save_settings",
    "validate_settings",
]
