import pytest
from chartnav.errors import SettingsError
from chartnav.schema import Chart, DiscreteAxis, FacetedChart
from chartnav.settings import default_settings
from chartnav.tree import build_tree
from chartnav.verbosity import describe_node, describe_token, resolve_description


def _tree():
    return build_tree(
        Chart(
            mark="bar",
            axes=[
                DiscreteAxis(
                    axis_type="x", field="category", title="Category", values=["a", "b"]
                )
            ],
            data=[{"category": "a"}, {"category": "b"}, {"category": "a"}],
        )
    )


def test_resolve_description_follows_policy_order() -> None:
    description = {
        "name": ("n", "the name"),
        "size": ("2 values", "two values"),
        "data": ("", ""),
    }

    text = resolve_description(description, {"size": "short", "data": "long", "name": "long"})

    assert text == "2 values. The name."


def test_resolve_description_skips_off_tokens() -> None:
    description = {"name": ("n", "the name"), "size": ("2 values", "two values")}

    assert resolve_description(description, {"name": "off", "size": "long"}) == "Two values."
    assert resolve_description(description, {}) == "."


def test_focus_tokens_are_read_first() -> None:
    description = {"name": ("a", "a long"), "size": ("3 values", "three values")}

    text = resolve_description(
        description, {"name": "short", "size": "off"}, focus_tokens=["size"]
    )

    assert text == "3 values. A."


def test_describe_node_uses_selected_presets() -> None:
    axis = _tree().root.children[0]
    settings = default_settings()

    assert describe_node(axis, settings) == (
        'X-axis titled "Category". For a discrete scale. '
        'With 2 values: "a" and "b". 2 values.'
    )
    assert describe_node(axis, settings, {"axis": "low"}) == (
        'X-axis titled "Category". 2 values.'
    )


def test_root_level_always_reads_long_tokens() -> None:
    chart = Chart(axes=[DiscreteAxis(axis_type="x", field="k", values=["a"])])
    tree = build_tree(FacetedChart(faceted_field="g", charts={"one": chart}))

    assert describe_node(tree.root, default_settings(), {"facet": "low"}) == (
        "A faceted chart with 1 view."
    )


def test_unknown_preset_is_rejected() -> None:
    axis = _tree().root.children[0]

    with pytest.raises(SettingsError):
        describe_node(axis, default_settings(), {"axis": "verbose"})


def test_describe_token() -> None:
    axis = _tree().root.children[0]
    settings = default_settings()

    assert describe_token(axis, "type", settings) == "for a discrete scale"
    assert describe_token(axis, "type", settings, {"axis": "low"}) == "discrete scale"
    assert describe_token(axis, "index", settings) is None
