import pandas as pd
from chartnav.filters import as_text, filter_equals, filter_range


def _rows() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "kind": ["a", "b", "a", "c"],
            "amount": [0, 10, 15, 20],
            "code": [1, 2, 1, 3],
        }
    )


def test_filter_equals_compares_as_text() -> None:
    rows = _rows()

    assert list(filter_equals(rows, "kind", "a").index) == [0, 2]
    assert list(filter_equals(rows, "code", 1.0).index) == [0, 2]
    assert list(filter_equals(rows, "code", "3").index) == [3]


def test_filter_equals_missing_field_is_empty() -> None:
    selected = filter_equals(_rows(), "nope", "a")

    assert selected.empty
    assert list(selected.columns) == ["kind", "amount", "code"]


def test_filter_range_is_half_open() -> None:
    rows = _rows()

    assert list(filter_range(rows, "amount", 0, 10).index) == [0]
    assert list(filter_range(rows, "amount", 10, 20).index) == [1, 2]
    assert list(filter_range(rows, "amount", 20, 30).index) == [3]


def test_filter_range_does_not_mutate_input() -> None:
    rows = _rows()
    before = rows.copy()

    filter_range(rows, "amount", 5, 25)
    filter_equals(rows, "kind", "a")

    pd.testing.assert_frame_equal(rows, before)


def test_filter_range_compares_years_for_year_bounds() -> None:
    rows = pd.DataFrame(
        {"when": pd.to_datetime(["1999-12-31", "2000-06-01", "2004-12-31", "2005-01-01"])}
    )

    selected = filter_range(rows, "when", 2000.0, 2005.0)

    assert list(selected.index) == [1, 2]


def test_filter_range_with_timestamp_bounds() -> None:
    rows = pd.DataFrame({"when": pd.to_datetime(["2020-01-01", "2020-01-02", "2020-01-03"])})

    selected = filter_range(
        rows, "when", pd.Timestamp("2020-01-01"), pd.Timestamp("2020-01-03")
    )

    assert list(selected.index) == [0, 1]


def test_filter_range_skips_non_numeric_values() -> None:
    rows = pd.DataFrame({"value": ["1", "x", "3", None]})

    assert list(filter_range(rows, "value", 0, 5).index) == [0, 2]


def test_as_text_normalises_integral_floats() -> None:
    assert as_text(2.0) == "2"
    assert as_text(2.5) == "2.5"
    assert as_text("b") == "b"


def test_filter_range_aligns_bound_and_row_timezones() -> None:
    aware = pd.DataFrame(
        {"when": pd.to_datetime(["2020-01-01T12:00:00Z", "2020-01-03T12:00:00Z"])}
    )
    naive = pd.DataFrame({"when": pd.to_datetime(["2020-01-01 12:00", "2020-01-03 12:00"])})

    naive_bounds = (pd.Timestamp("2020-01-01"), pd.Timestamp("2020-01-02"))
    aware_bounds = (pd.Timestamp("2020-01-01", tz="UTC"), pd.Timestamp("2020-01-02", tz="UTC"))

    assert list(filter_range(aware, "when", *naive_bounds).index) == [0]
    assert list(filter_range(naive, "when", *aware_bounds).index) == [0]
