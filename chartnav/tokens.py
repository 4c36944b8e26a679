"""Description tokens attached to every accessibility tree node.

Each node carries a mapping from token category to a ``(short, long)`` pair of
text fragments. The categories a node receives depend only on its hierarchy
level (see :data:`chartnav.hierarchy.HIERARCHY_LEVEL_TO_TOKENS`); each category
is produced by its own function below. A category function called for a node
kind it does not describe raises :class:`ShapeMismatchError`, which points at a
mismatch between the builder and this module rather than at bad input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import pandas as pd
from pandas.api.types import is_scalar

from .errors import ShapeMismatchError, UnrecognizedVariantError
from .formatting import fmt_number, fmt_value, pluralize, quote, round_half_up
from .hierarchy import HIERARCHY_LEVEL_TO_TOKENS, TokenType, hierarchy_level
from .schema import (
    AXIS_TYPES,
    LEGEND_TYPES,
    AxisGuide,
    Chart,
    FacetedChart,
    Guide,
    LegendGuide,
)

if TYPE_CHECKING:
    from .tree import AccessibilityTreeNode

Fragments = tuple[str, str]
Description = dict[TokenType, Fragments]
EMPTY: Fragments = ("", "")


@dataclass(frozen=True)
class DescriptionContext:
    """Facts about a node that are known to its parent but not stored on it."""

    facet_value: Optional[str] = None
    guide: Optional[Guide] = None
    index: Optional[int] = None
    length: Optional[int] = None


def _both(text: str) -> Fragments:
    return (text, text)


def _missing(node: AccessibilityTreeNode, token: str) -> ShapeMismatchError:
    return ShapeMismatchError(f"Node type {node.type} does not have the token {token}.")


def _as_chart(spec: Chart | FacetedChart) -> Chart:
    if not isinstance(spec, Chart):
        raise ShapeMismatchError(f"Expected a chart spec, got {type(spec).__name__}")
    return spec


def _as_axis(context: DescriptionContext) -> AxisGuide:
    if not isinstance(context.guide, AXIS_TYPES):
        raise ShapeMismatchError(
            f"Expected an axis guide, got {type(context.guide).__name__}"
        )
    return context.guide


def _as_legend(context: DescriptionContext) -> LegendGuide:
    if not isinstance(context.guide, LEGEND_TYPES):
        raise ShapeMismatchError(
            f"Expected a legend guide, got {type(context.guide).__name__}"
        )
    return context.guide


def chart_type(chart: Chart) -> str:
    """Describe the kind of chart implied by its mark and axes."""

    if chart.mark == "point":
        if all(axis.type == "continuous" for axis in chart.axes):
            return "scatterplot"
        return "dot plot"
    return f"{chart.mark} chart" if chart.mark else ""


def chart_title(spec: Chart | FacetedChart, facet_value: Optional[str]) -> str:
    return quote(spec.title or facet_value or "")


def author_description(spec: Chart | FacetedChart) -> str:
    """Return the author supplied description ending with punctuation."""

    if not spec.description:
        return ""
    text = spec.description.strip()
    if text and text[-1] not in ".?!":
        text += "."
    return text


def _filter_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, tuple):
        return " to ".join(fmt_value(bound) for bound in value)
    return quote(fmt_value(value))


def _datum_text(node: AccessibilityTreeNode) -> str:
    row = node.selected.iloc[0]
    pieces: list[str] = []
    for field_name in node.table_keys or []:
        value = row[field_name] if field_name in row.index else None
        if is_scalar(value) and pd.isna(value):
            value = None
        pieces.append(f'"{field_name}": "{fmt_value(value)}"')
    return ", ".join(pieces)


def name_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type == "multiView":
        title = chart_title(spec, context.facet_value)
        views = pluralize(len(node.children), "view")
        if title:
            return (
                f"faceted chart {title}, {views}",
                f"a faceted chart titled {title} with {views}",
            )
        return (f"faceted chart, {views}", f"a faceted chart with {views}")
    if node.type == "chart":
        title = chart_title(spec, context.facet_value)
        return (title, f"titled {title}" if title else "")
    if node.type in ("xAxis", "yAxis"):
        axis = _as_axis(context)
        return _both(f'{axis.axis_type}-axis titled "{axis.label}"')
    if node.type == "legend":
        legend = _as_legend(context)
        return _both(f'legend titled "{legend.label}"')
    if node.type == "grid":
        return ("grid", f"grid view of {chart_type(_as_chart(spec))}")
    raise _missing(node, "name")


def index_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type in ("chart", "filteredData"):
        if context.index is None or context.length is None:
            return EMPTY
        return _both(f"{context.index + 1} of {context.length}")
    raise _missing(node, "index")


def type_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type == "chart":
        return _both(chart_type(_as_chart(spec)))
    if node.type in ("xAxis", "yAxis"):
        axis = _as_axis(context)
        scale = f"{axis.scale_type or axis.type} scale"
        return (scale, f"for a {scale}")
    if node.type == "legend":
        legend = _as_legend(context)
        return _both(f"for {legend.channel}" if legend.channel else "")
    if node.type == "grid":
        return EMPTY
    raise _missing(node, "type")


def children_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type != "chart":
        raise _missing(node, "children")
    axes = _as_chart(spec).axes
    if not axes:
        return EMPTY
    if len(axes) == 1:
        first = axes[0].label
        return (f"axis {first}", f"with axis {first}")
    titles = [quote(axis.label) for axis in axes]
    return (f"axes {', '.join(titles)}", f"with axes {' and '.join(titles)}")


def _guide_values_text(guide: Guide) -> Fragments:
    values = guide.values
    if not values:
        return EMPTY
    start = fmt_value(values[0])
    end = fmt_value(values[-1])
    if guide.type == "discrete":
        if len(values) == 2:
            following = fmt_value(values[1])
            return (
                f"2 values: {start}, {following}",
                f'with 2 values: "{start}" and "{following}"',
            )
        total = pluralize(len(values), "value")
        return (
            f"{total} from {start} to {end}",
            f'with {total} starting with "{start}" and ending with "{end}"',
        )
    return (f"from {start} to {end}", f'with values from "{start}" to "{end}"')


def data_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type in ("xAxis", "yAxis"):
        return _guide_values_text(_as_axis(context))
    if node.type == "legend":
        return _guide_values_text(_as_legend(context))
    if node.type == "grid":
        return EMPTY
    if node.type == "filteredData":
        parent = node.parent
        if parent is not None and parent.type == "grid":
            if node.filter_value is None:
                return EMPTY
            x_bound, y_bound = node.filter_value
            return _both(f"in {_filter_text(x_bound)} and {_filter_text(y_bound)}")
        return _both(_filter_text(node.filter_value))
    if node.type == "data":
        return _both(_datum_text(node))
    raise _missing(node, "data")


def size_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type in ("xAxis", "yAxis", "legend", "grid", "filteredData"):
        return _both(pluralize(len(node.children), "value"))
    raise _missing(node, "size")


def parent_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type in ("xAxis", "yAxis", "legend", "grid", "filteredData", "data"):
        facet = context.facet_value or ""
        return (facet, quote(facet))
    raise _missing(node, "parent")


def aggregate_token(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    if node.type in ("xAxis", "yAxis"):
        axis = _as_axis(context)
        if axis.scale_type != "quantitative" or axis.field not in node.selected:
            return EMPTY
        values = pd.to_numeric(node.selected[axis.field], errors="coerce").dropna()
        if values.empty:
            return EMPTY
        average = round_half_up(values.mean())
        maximum = fmt_number(values.max())
        minimum = fmt_number(values.min())
        return (
            f"average {average}, maximum {maximum}, minimum {minimum}",
            f"the average is {average}, the maximum is {maximum}, "
            f"and the minimum is {minimum}",
        )
    if node.type in ("legend", "grid"):
        return EMPTY
    raise _missing(node, "aggregate")


def token_fragments(
    token: str,
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Fragments:
    """Compute the ``(short, long)`` fragments of one token category."""

    if token == "name":
        return name_token(node, spec, context)
    if token == "index":
        return index_token(node, spec, context)
    if token == "type":
        return type_token(node, spec, context)
    if token == "children":
        return children_token(node, spec, context)
    if token == "data":
        return data_token(node, spec, context)
    if token == "size":
        return size_token(node, spec, context)
    if token == "parent":
        return parent_token(node, spec, context)
    if token == "aggregate":
        return aggregate_token(node, spec, context)
    raise UnrecognizedVariantError("Token type", token, "token_fragments")


def describe(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    context: DescriptionContext,
) -> Description:
    """Build the full description map of ``node`` for its hierarchy level."""

    level = hierarchy_level(node.type)
    return {
        token: token_fragments(token, node, spec, context)
        for token in HIERARCHY_LEVEL_TO_TOKENS[level]
    }


__all__ = [
    "Description",
    "DescriptionContext",
    "Fragments",
    "aggregate_token",
    "author_description",
    "chart_type",
    "children_token",
    "data_token",
    "describe",
    "index_token",
    "name_token",
    "parent_token",
    "size_token",
    "token_fragments",
    "type_token",
]
