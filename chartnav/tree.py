"""Build navigable accessibility trees from visualization specs.

The tree mirrors how a chart is read visually: a faceted chart splits into its
charts, a chart into its axes, legends and (for scatterplots) a grid, each of
those into buckets of filtered data, and each bucket into individual data
points. Construction is a single depth-first pass over immutable input; the
returned tree is never patched afterwards.
"""

from __future__ import annotations

import logging
import weakref
from dataclasses import InitVar, dataclass, field
from itertools import product
from types import MappingProxyType
from typing import Any, Iterator, Mapping, NamedTuple, Optional, Union

import pandas as pd

from .errors import ShapeMismatchError, UnrecognizedVariantError
from .filters import as_text, filter_equals, filter_range
from .hierarchy import NodeType, TokenType
from .intervals import Interval, bin_intervals
from .schema import (
    AXIS_TYPES,
    LEGEND_TYPES,
    AxisGuide,
    Chart,
    ContinuousAxis,
    FacetedChart,
    LegendGuide,
    parse_spec,
)
from .tokens import DescriptionContext, Fragments, describe

logger = logging.getLogger(__name__)

EncodingFilterValue = Union[str, Interval]
GridFilterValue = tuple[Interval, Interval]
FilterValue = Union[EncodingFilterValue, GridFilterValue]


class GridIndex(NamedTuple):
    """Row/column coordinates of a grid cell."""

    row: int
    col: int


@dataclass(eq=False)
class AccessibilityTreeNode:
    """A node of the accessibility tree.

    ``selected`` keeps the index of the original rows so that slices taken by
    different nodes can be compared. ``parent`` is held through a weak
    reference: parents own their children, never the other way around.
    """

    type: NodeType
    selected: pd.DataFrame = field(repr=False)
    parent_node: InitVar[Optional["AccessibilityTreeNode"]] = None
    children: list["AccessibilityTreeNode"] = field(default_factory=list, repr=False)
    filter_value: Optional[FilterValue] = None
    table_keys: Optional[list[str]] = None
    grid_index: Optional[GridIndex] = None
    _parent: Optional[weakref.ReferenceType] = field(
        init=False, default=None, repr=False
    )
    _description: dict[TokenType, Fragments] = field(
        init=False, default_factory=dict, repr=False
    )

    def __post_init__(self, parent_node: Optional["AccessibilityTreeNode"]) -> None:
        if parent_node is not None:
            self._parent = weakref.ref(parent_node)

    @property
    def parent(self) -> Optional["AccessibilityTreeNode"]:
        """The enclosing node, or ``None`` at the root."""

        return self._parent() if self._parent is not None else None

    @property
    def description(self) -> Mapping[TokenType, Fragments]:
        """Read-only mapping of token category to ``(short, long)`` fragments."""

        return MappingProxyType(self._description)

    def walk(self) -> Iterator["AccessibilityTreeNode"]:
        """Yield this node and its descendants depth first."""

        yield self
        for child in self.children:
            yield from child.walk()

    def depth(self) -> int:
        """Number of ancestors between this node and the root."""

        level = 0
        parent = self.parent
        while parent is not None:
            level += 1
            parent = parent.parent
        return level


@dataclass
class AccessibilityTree:
    """Root node plus the ordered fields referenced by the spec's guides."""

    root: AccessibilityTreeNode
    fields_used: list[str]

    def nodes(self) -> Iterator[AccessibilityTreeNode]:
        """Iterate over every node depth first, starting at the root."""

        return self.root.walk()


def fields_used_for(spec: Chart | FacetedChart) -> list[str]:
    """Ordered, de-duplicated guide fields; the facet field comes first."""

    if isinstance(spec, FacetedChart):
        fields = [spec.faceted_field]
        for chart in spec.charts.values():
            fields.extend(fields_used_for(chart))
        return list(dict.fromkeys(fields))
    if isinstance(spec, Chart):
        guides = [*spec.axes, *spec.legends]
        return list(dict.fromkeys(guide.field for guide in guides))
    raise UnrecognizedVariantError("Spec type", getattr(spec, "type", spec), "fields_used_for")


def _rows_frame(rows: Any) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    return pd.DataFrame.from_records(list(rows))


def build_tree(spec: Any) -> AccessibilityTree:
    """Construct an :class:`AccessibilityTree` from a visualization spec.

    Parameters
    ----------
    spec:
        A :class:`~chartnav.schema.Chart`, a :class:`~chartnav.schema.FacetedChart`
        or a mapping that validates into one of them.

    Raises
    ------
    UnrecognizedVariantError
        When the spec is neither a chart nor a faceted chart.
    ShapeMismatchError
        When a guide does not fit the node built for it.
    """

    if isinstance(spec, dict):
        spec = parse_spec(spec)
    if isinstance(spec, FacetedChart):
        root_type: NodeType = "multiView"
    elif isinstance(spec, Chart):
        root_type = "chart"
    else:
        raise UnrecognizedVariantError(
            "Spec type", getattr(spec, "type", type(spec).__name__), "build_tree"
        )

    fields_used = fields_used_for(spec)
    rows = _rows_frame(spec.data)
    root = _build_node(root_type, rows, None, spec, fields_used, DescriptionContext())
    logger.debug(
        "Built %s tree with %d nodes over %d rows",
        root_type,
        sum(1 for _ in root.walk()),
        len(rows),
    )
    return AccessibilityTree(root=root, fields_used=fields_used)


def _build_node(
    node_type: NodeType,
    selected: pd.DataFrame,
    parent: Optional[AccessibilityTreeNode],
    spec: Chart | FacetedChart,
    fields_used: list[str],
    context: DescriptionContext,
    *,
    filter_value: Optional[FilterValue] = None,
    grid_index: Optional[GridIndex] = None,
) -> AccessibilityTreeNode:
    node = AccessibilityTreeNode(
        type=node_type,
        selected=selected,
        parent_node=parent,
        filter_value=filter_value,
        grid_index=grid_index,
    )

    if node_type == "multiView":
        node.children = _facet_children(node, spec, fields_used)
    elif node_type == "chart":
        node.children = _chart_children(node, spec, fields_used, context)
    elif node_type in ("xAxis", "yAxis"):
        node.children = _axis_children(node, spec, fields_used, context)
    elif node_type == "legend":
        node.children = _legend_children(node, spec, fields_used, context)
    elif node_type == "grid":
        node.children = _grid_children(node, spec, fields_used, context)
    elif node_type == "filteredData":
        node.children = _datum_children(node, spec, fields_used, context)
    elif node_type == "data":
        node.table_keys = _table_keys(fields_used, context)
    else:
        raise UnrecognizedVariantError("Node type", node_type, "build_node")

    node._description = describe(node, spec, context)
    return node


def _facet_children(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    fields_used: list[str],
) -> list[AccessibilityTreeNode]:
    if not isinstance(spec, FacetedChart):
        raise ShapeMismatchError("multiView nodes require a faceted chart spec")
    facets = list(spec.charts.items())
    return [
        _build_node(
            "chart",
            filter_equals(node.selected, spec.faceted_field, facet_value),
            node,
            chart,
            fields_used,
            DescriptionContext(facet_value=facet_value, index=index, length=len(facets)),
        )
        for index, (facet_value, chart) in enumerate(facets)
    ]


def _chart_children(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    fields_used: list[str],
    context: DescriptionContext,
) -> list[AccessibilityTreeNode]:
    if not isinstance(spec, Chart):
        raise ShapeMismatchError("chart nodes require a chart spec")

    # a bar's length already conveys its value, the continuous axis is redundant
    axes = [
        axis
        for axis in spec.axes
        if not (spec.mark == "bar" and axis.type == "continuous")
    ]
    if len(axes) != len(spec.axes):
        logger.debug("Dropped %d continuous axes from bar chart", len(spec.axes) - len(axes))

    children: list[AccessibilityTreeNode] = []
    for axis in axes:
        children.append(
            _build_node(
                "xAxis" if axis.axis_type == "x" else "yAxis",
                node.selected,
                node,
                spec,
                fields_used,
                DescriptionContext(facet_value=context.facet_value, guide=axis),
            )
        )
    for legend in spec.legends:
        children.append(
            _build_node(
                "legend",
                node.selected,
                node,
                spec,
                fields_used,
                DescriptionContext(facet_value=context.facet_value, guide=legend),
            )
        )
    if (
        spec.mark == "point"
        and len(axes) == 2
        and all(axis.type == "continuous" for axis in axes)
    ):
        children.append(
            _build_node(
                "grid",
                node.selected,
                node,
                spec,
                fields_used,
                DescriptionContext(facet_value=context.facet_value),
            )
        )
    return children


def _guide_children(
    node: AccessibilityTreeNode,
    guide: AxisGuide | LegendGuide,
    spec: Chart,
    fields_used: list[str],
    context: DescriptionContext,
) -> list[AccessibilityTreeNode]:
    if guide.type == "discrete":
        values = guide.values
        return [
            _build_node(
                "filteredData",
                filter_equals(node.selected, guide.field, value),
                node,
                spec,
                fields_used,
                DescriptionContext(
                    facet_value=context.facet_value,
                    guide=guide,
                    index=index,
                    length=len(values),
                ),
                filter_value=as_text(value),
            )
            for index, value in enumerate(values)
        ]

    intervals = bin_intervals(guide.values)
    return [
        _build_node(
            "filteredData",
            filter_range(node.selected, guide.field, lower, upper),
            node,
            spec,
            fields_used,
            DescriptionContext(
                facet_value=context.facet_value,
                guide=guide,
                index=index,
                length=len(intervals),
            ),
            filter_value=(lower, upper),
        )
        for index, (lower, upper) in enumerate(intervals)
    ]


def _axis_children(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    fields_used: list[str],
    context: DescriptionContext,
) -> list[AccessibilityTreeNode]:
    guide = context.guide
    if not isinstance(spec, Chart) or not isinstance(guide, AXIS_TYPES):
        raise ShapeMismatchError(f"{node.type} nodes require an axis guide")
    return _guide_children(node, guide, spec, fields_used, context)


def _legend_children(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    fields_used: list[str],
    context: DescriptionContext,
) -> list[AccessibilityTreeNode]:
    guide = context.guide
    if not isinstance(spec, Chart) or not isinstance(guide, LEGEND_TYPES):
        raise ShapeMismatchError("legend nodes require a legend guide")
    if guide.type == "continuous":
        # TODO: bin continuous legends the way continuous axes are binned
        logger.debug("Continuous legend %r has no children", guide.field)
        return []
    return _guide_children(node, guide, spec, fields_used, context)


def _grid_children(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    fields_used: list[str],
    context: DescriptionContext,
) -> list[AccessibilityTreeNode]:
    if not isinstance(spec, Chart):
        raise ShapeMismatchError("grid nodes require a chart spec")
    x_axis = next((axis for axis in spec.axes if axis.axis_type == "x"), None)
    y_axis = next((axis for axis in spec.axes if axis.axis_type == "y"), None)
    if not isinstance(x_axis, ContinuousAxis) or not isinstance(y_axis, ContinuousAxis):
        raise ShapeMismatchError("grid nodes require continuous x and y axes")

    x_intervals = bin_intervals(x_axis.values)
    y_intervals = bin_intervals(y_axis.values)
    columns = len(y_intervals)
    children: list[AccessibilityTreeNode] = []
    for position, (x_bound, y_bound) in enumerate(product(x_intervals, y_intervals)):
        selected = filter_range(node.selected, x_axis.field, *x_bound)
        selected = filter_range(selected, y_axis.field, *y_bound)
        children.append(
            _build_node(
                "filteredData",
                selected,
                node,
                spec,
                fields_used,
                DescriptionContext(facet_value=context.facet_value),
                filter_value=(x_bound, y_bound),
                grid_index=GridIndex(row=position // columns, col=position % columns),
            )
        )
    return children


def _datum_children(
    node: AccessibilityTreeNode,
    spec: Chart | FacetedChart,
    fields_used: list[str],
    context: DescriptionContext,
) -> list[AccessibilityTreeNode]:
    count = len(node.selected)
    return [
        _build_node(
            "data",
            node.selected.iloc[[position]],
            node,
            spec,
            fields_used,
            DescriptionContext(
                facet_value=context.facet_value,
                guide=context.guide,
                index=position,
                length=count,
            ),
        )
        for position in range(count)
    ]


def _table_keys(fields_used: list[str], context: DescriptionContext) -> list[str]:
    # fields the user already knows from the path to this datum go last
    keys = list(fields_used)
    if context.guide is not None:
        field_name = context.guide.field
        keys = [key for key in keys if key != field_name] + [field_name]
    if context.facet_value and fields_used:
        facet_field = fields_used[0]
        keys = [key for key in keys if key != facet_field] + [facet_field]
    return keys


__all__ = [
    "AccessibilityTree",
    "AccessibilityTreeNode",
    "FilterValue",
    "GridIndex",
    "build_tree",
    "fields_used_for",
]
