"""Chartnav: navigable accessibility trees for charts."""

from .errors import (
    ChartnavError,
    IntervalError,
    SettingsError,
    ShapeMismatchError,
    UnrecognizedVariantError,
)
from .filters import filter_equals, filter_range
from .hierarchy import (
    HIERARCHY_LEVEL_TO_TOKENS,
    NODE_TYPE_TO_HIERARCHY_LEVEL,
    hierarchy_level,
)
from .intervals import bin_intervals
from .io_spec import load_spec
from .render import export_table, render_outline, tree_to_table
from .schema import (
    Chart,
    ContinuousAxis,
    ContinuousLegend,
    DiscreteAxis,
    DiscreteLegend,
    FacetedChart,
    parse_spec,
)
from .settings import (
    TokenLength,
    add_preset,
    default_settings,
    load_settings,
    merge_settings,
    prettify_token_tuples,
    save_settings,
)
from .tree import AccessibilityTree, AccessibilityTreeNode, GridIndex, build_tree
from .verbosity import describe_node, describe_token, resolve_description

__version__ = "0.1.0"

__all__ = [
    "AccessibilityTree",
    "AccessibilityTreeNode",
    "Chart",
    "ChartnavError",
    "ContinuousAxis",
    "ContinuousLegend",
    "DiscreteAxis",
    "DiscreteLegend",
    "FacetedChart",
    "GridIndex",
    "HIERARCHY_LEVEL_TO_TOKENS",
    "IntervalError",
    "NODE_TYPE_TO_HIERARCHY_LEVEL",
    "SettingsError",
    "ShapeMismatchError",
    "TokenLength",
    "UnrecognizedVariantError",
    "__version__",
    "add_preset",
    "bin_intervals",
    "build_tree",
    "default_settings",
    "describe_node",
    "describe_token",
    "export_table",
    "filter_equals",
    "filter_range",
    "hierarchy_level",
    "load_settings",
    "load_spec",
    "merge_settings",
    "parse_spec",
    "prettify_token_tuples",
    "render_outline",
    "resolve_description",
    "save_settings",
    "tree_to_table",
]
