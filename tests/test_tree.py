from __future__ import annotations

import pandas as pd
import pytest
from chartnav.errors import UnrecognizedVariantError
from chartnav.schema import (
    Chart,
    ContinuousAxis,
    DiscreteAxis,
    DiscreteLegend,
    FacetedChart,
)
from chartnav.tree import GridIndex, build_tree, fields_used_for


def _bar_chart() -> Chart:
    return Chart(
        mark="bar",
        axes=[
            DiscreteAxis(axis_type="x", field="category", title="Category", values=["a", "b"]),
            ContinuousAxis(
                axis_type="y", field="amount", scale_type="quantitative", values=[0, 10, 20]
            ),
        ],
        data=[
            {"category": "a", "amount": 4},
            {"category": "b", "amount": 15},
            {"category": "a", "amount": 7},
        ],
    )


def _scatterplot() -> Chart:
    return Chart(
        mark="point",
        axes=[
            ContinuousAxis(
                axis_type="x", field="x", scale_type="quantitative", values=[0, 10, 20]
            ),
            ContinuousAxis(
                axis_type="y", field="y", scale_type="quantitative", values=[0, 5, 10]
            ),
        ],
        data=[
            {"x": 1, "y": 1},
            {"x": 12, "y": 3},
            {"x": 15, "y": 7},
            {"x": 25, "y": 11},
        ],
    )


def _faceted() -> FacetedChart:
    chart = Chart(
        mark="bar",
        axes=[DiscreteAxis(axis_type="x", field="product", values=["p", "q"])],
    )
    return FacetedChart(
        faceted_field="region",
        charts={"east": chart, "west": chart},
        data=[
            {"region": "east", "product": "p"},
            {"region": "east", "product": "q"},
            {"region": "west", "product": "p"},
            {"region": "north", "product": "q"},
        ],
    )


def _concat(frames: list[pd.DataFrame]) -> pd.DataFrame:
    return pd.concat(frames).sort_index()


def test_bar_chart_drops_continuous_axis() -> None:
    tree = build_tree(_bar_chart())

    assert tree.root.type == "chart"
    assert [child.type for child in tree.root.children] == ["xAxis"]


def test_discrete_axis_children_partition_rows() -> None:
    tree = build_tree(_bar_chart())
    axis = tree.root.children[0]

    assert [child.filter_value for child in axis.children] == ["a", "b"]
    assert [len(child.selected) for child in axis.children] == [2, 1]
    pd.testing.assert_frame_equal(
        _concat([child.selected for child in axis.children]),
        axis.selected.sort_index(),
    )


def test_data_nodes_hold_exactly_one_row() -> None:
    tree = build_tree(_bar_chart())

    data_nodes = [node for node in tree.nodes() if node.type == "data"]

    assert len(data_nodes) == 3
    assert all(len(node.selected) == 1 for node in data_nodes)
    assert all(node.children == [] for node in data_nodes)


def test_facet_children_select_their_rows() -> None:
    tree = build_tree(_faceted())

    assert tree.root.type == "multiView"
    east, west = tree.root.children
    assert list(east.selected.index) == [0, 1]
    assert list(west.selected.index) == [2]
    assert all(child.type == "chart" for child in tree.root.children)


def test_continuous_axis_children_cover_binned_rows() -> None:
    tree = build_tree(_scatterplot())
    x_axis = tree.root.children[0]

    assert [child.filter_value for child in x_axis.children] == [
        (0.0, 10.0),
        (10.0, 20.0),
        (20.0, 30.0),
    ]
    assert [len(child.selected) for child in x_axis.children] == [1, 2, 1]
    pd.testing.assert_frame_equal(
        _concat([child.selected for child in x_axis.children]),
        x_axis.selected.sort_index(),
    )


def test_scatterplot_grid_is_cartesian_product() -> None:
    tree = build_tree(_scatterplot())
    types = [child.type for child in tree.root.children]
    assert types == ["xAxis", "yAxis", "grid"]
    x_axis, y_axis, grid = tree.root.children

    assert len(grid.children) == len(x_axis.children) * len(y_axis.children)
    assert grid.children[0].grid_index == GridIndex(row=0, col=0)
    assert grid.children[4].grid_index == GridIndex(row=1, col=1)
    for cell in grid.children:
        x_bucket = x_axis.children[cell.grid_index.row]
        y_bucket = y_axis.children[cell.grid_index.col]
        expected = x_bucket.selected.index.intersection(y_bucket.selected.index)
        assert list(cell.selected.index) == list(expected)
        assert cell.filter_value == (x_bucket.filter_value, y_bucket.filter_value)


def test_discrete_legend_children_sizes() -> None:
    chart = Chart(
        mark="point",
        axes=[DiscreteAxis(axis_type="x", field="kind", values=["k"])],
        legends=[DiscreteLegend(field="color", channel="color", values=["red", "blue"])],
        data=[
            {"kind": "k", "color": "red"},
            {"kind": "k", "color": "red"},
            {"kind": "k", "color": "blue"},
        ],
    )

    tree = build_tree(chart)
    legend = tree.root.children[-1]

    assert legend.type == "legend"
    assert [len(child.selected) for child in legend.children] == [2, 1]
    assert not any(child.type == "grid" for child in tree.root.children)


def test_fields_used_puts_facet_field_first() -> None:
    assert fields_used_for(_faceted()) == ["region", "product"]
    assert fields_used_for(_scatterplot()) == ["x", "y"]


def test_table_keys_move_known_fields_last() -> None:
    bar_tree = build_tree(_bar_chart())
    bar_datum = next(node for node in bar_tree.nodes() if node.type == "data")
    assert bar_datum.table_keys == ["amount", "category"]

    faceted_tree = build_tree(_faceted())
    facet_datum = next(node for node in faceted_tree.nodes() if node.type == "data")
    assert facet_datum.table_keys == ["product", "region"]


def test_parent_links_and_depth() -> None:
    tree = build_tree(_faceted())

    assert tree.root.parent is None
    for node in tree.nodes():
        for child in node.children:
            assert child.parent is node
            assert child.depth() == node.depth() + 1


def test_build_tree_accepts_mappings() -> None:
    tree = build_tree(
        {
            "type": "chart",
            "mark": "bar",
            "axes": [
                {"type": "discrete", "axisType": "x", "field": "k", "values": ["a"]},
            ],
            "data": [{"k": "a"}],
        }
    )

    assert [node.type for node in tree.nodes()] == ["chart", "xAxis", "filteredData", "data"]


def test_build_tree_rejects_unknown_specs() -> None:
    with pytest.raises(UnrecognizedVariantError):
        build_tree(object())


def test_description_is_read_only() -> None:
    tree = build_tree(_bar_chart())

    with pytest.raises(TypeError):
        tree.root.description["name"] = ("x", "y")  # type: ignore[index]


def test_facet_children_recombine_into_parent_rows() -> None:
    chart = Chart(
        mark="bar",
        axes=[DiscreteAxis(axis_type="x", field="product", values=["p", "q"])],
    )
    spec = FacetedChart(
        faceted_field="year",
        charts={"2020": chart, "2021": chart},
        data=[
            {"year": 2021, "product": "p"},
            {"year": 2020, "product": "q"},
            {"year": 2021, "product": "q"},
            {"year": 2020, "product": "p"},
        ],
    )

    tree = build_tree(spec)

    assert [list(child.selected.index) for child in tree.root.children] == [[1, 3], [0, 2]]
    pd.testing.assert_frame_equal(
        _concat([child.selected for child in tree.root.children]),
        tree.root.selected,
    )
