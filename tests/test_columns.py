import pytest

from src.stats.columns import column_values, paired_values, to_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        (" 42 ", 42.0),
        ("62.5%", 62.5),
        ("1,234.5", 1234.5),
        (7, 7.0),
        (0.25, 0.25),
        ("-3e2", -300.0),
    ],
)
def test_to_number_parses(raw, expected):
    assert to_number(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "N/A", float("nan"), float("inf"), "inf", True])
def test_to_number_missing(raw):
    assert to_number(raw) is None


def test_bad_cell_is_skipped_not_zero():
    rows = [{"x": "1"}, {"x": "oops"}, {"x": "3"}, {}]
    assert column_values(rows, "x") == [1.0, 3.0]


def test_paired_values_keep_rows_aligned():
    rows = [
        {"a": 1, "b": None},
        {"a": "2", "b": "20"},
        {"a": None, "b": 30},
        {"a": 4, "b": "40%"},
    ]
    assert paired_values(rows, "a", "b") == ([2.0, 4.0], [20.0, 40.0])
