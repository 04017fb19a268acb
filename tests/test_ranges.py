import math

from core.ranges import analyze


def test_analyze_ignores_nulls_and_non_finite_values() -> None:
    value_range = analyze([10, None, 50, math.nan, math.inf])
    assert value_range.min == 10
    assert value_range.max == 50
    assert value_range.median == 30
    assert value_range.count == 2
    assert not value_range.is_degenerate


def test_median_uses_middle_element_for_odd_counts() -> None:
    assert analyze([5, 1, 3]).median == 3
    assert analyze([4, 1, 3, 2]).median == 2.5


def test_empty_input_has_no_range() -> None:
    assert analyze([]) is None
    assert analyze([None, math.nan]) is None


def test_single_value_is_degenerate_and_not_widened() -> None:
    value_range = analyze([20])
    assert value_range.is_degenerate
    assert value_range.min == value_range.max == value_range.median == 20
    assert value_range.span == 0
