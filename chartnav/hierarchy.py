"""Node kinds, hierarchy levels and the token categories allowed per level."""

from __future__ import annotations

from typing import Literal, get_args

from .errors import UnrecognizedVariantError

NodeType = Literal[
    "multiView",
    "chart",
    "xAxis",
    "yAxis",
    "legend",
    "grid",
    "filteredData",
    "data",
]
HierarchyLevel = Literal["root", "facet", "axis", "section", "datapoint"]
TokenType = Literal[
    "name",
    "index",
    "type",
    "children",
    "data",
    "size",
    "parent",
    "aggregate",
]

NODE_TYPES: tuple[NodeType, ...] = get_args(NodeType)
HIERARCHY_LEVELS: tuple[HierarchyLevel, ...] = get_args(HierarchyLevel)
TOKEN_TYPES: tuple[TokenType, ...] = get_args(TokenType)

NODE_TYPE_TO_HIERARCHY_LEVEL: dict[NodeType, HierarchyLevel] = {
    "multiView": "root",
    "chart": "facet",
    "xAxis": "axis",
    "yAxis": "axis",
    "legend": "axis",
    "grid": "axis",
    "filteredData": "section",
    "data": "datapoint",
}

# Order here is the default narration order for each level.
HIERARCHY_LEVEL_TO_TOKENS: dict[HierarchyLevel, tuple[TokenType, ...]] = {
    "root": ("name",),
    "facet": ("index", "type", "name", "children"),
    "axis": ("name", "type", "data", "size", "parent", "aggregate"),
    "section": ("index", "data", "size", "parent"),
    "datapoint": ("data", "parent"),
}

# Levels whose verbosity can be configured by users.
CONFIGURABLE_LEVELS: tuple[HierarchyLevel, ...] = tuple(
    level for level in HIERARCHY_LEVELS if level != "root"
)


def hierarchy_level(node_type: str) -> HierarchyLevel:
    """Return the hierarchy level of ``node_type``."""

    try:
        return NODE_TYPE_TO_HIERARCHY_LEVEL[node_type]  # type: ignore[index]
    except KeyError as exc:
        raise UnrecognizedVariantError("Node type", node_type, "hierarchy_level") from exc


__all__ = [
    "CONFIGURABLE_LEVELS",
    "HIERARCHY_LEVELS",
    "HIERARCHY_LEVEL_TO_TOKENS",
    "HierarchyLevel",
    "NODE_TYPES",
    "NODE_TYPE_TO_HIERARCHY_LEVEL",
    "NodeType",
    "TOKEN_TYPES",
    "TokenType",
    "hierarchy_level",
]
