from core.buckets import derive_scheme
from core.config import UNKNOWN_COLOR
from core.content import build_legend, build_tooltip
from core.ranges import analyze
from core.records import RegionRecord
from core.schemes import FixedSchemeSource


def _record(county: str = "sussex", **properties) -> RegionRecord:
    return RegionRecord.from_properties({"GEOID": "A", "NAME": "Lewes", **properties}, county)


def test_tooltip_formats_values_and_median_note() -> None:
    record = _record(
        tax_change_pct=10,
        median_tax_2024=1000,
        median_tax_2025=1100,
        parcel_count=1234,
    )
    tooltip = build_tooltip(record, "tax_change", "sussex", analyze([10, 50]))

    assert tooltip.title == "Lewes, Sussex County"
    assert tooltip.metric_label == "Tax change"
    assert tooltip.value == "+10.0%"
    assert tooltip.prior_value == "$1,000"
    assert tooltip.current_value == "$1,100"
    assert tooltip.sample_size == "1,234"
    assert tooltip.scope_median_note == "Tax change is 20.0 pts below the Sussex County median (30.0%)"


def test_tooltip_prior_value_falls_back_to_plain_year_field() -> None:
    tooltip = build_tooltip(_record(tax_2024=900, tax_2025=990), "tax_change", "sussex")
    assert tooltip.prior_value == "$900"
    assert tooltip.value == "+10.0%"
    assert tooltip.scope_median_note is None


def test_tooltip_marks_missing_fields_na() -> None:
    tooltip = build_tooltip(_record(), "assessment_change", "all", analyze([1, 2]))
    assert tooltip.value == "N/A"
    assert tooltip.prior_value == "N/A"
    assert tooltip.current_value == "N/A"
    assert tooltip.sample_size == "N/A"
    assert tooltip.scope_median_note is None
    assert "nan" not in str(tooltip.to_properties()).lower()


def test_statewide_note_and_at_median_phrasing() -> None:
    tooltip = build_tooltip(_record(assessment_change_pct=30), "assessment_change", "all", analyze([10, 50]))
    assert tooltip.scope_median_note == "Assessment change is at the statewide median (30.0%)"

    above = build_tooltip(_record(county="kent", tax_burden_change=0.6), "tax_burden_change", "kent", analyze([0, 40]))
    assert above.scope_median_note == "Tax burden change is 40.0 pts above the Kent County median (20.0%)"


def test_property_class_tooltip_lists_shares() -> None:
    tooltip = build_tooltip(_record(pct_residential=70, pct_commercial=30), "property_class", "sussex")
    assert tooltip.value == "Residential"
    shares = dict(tooltip.class_shares)
    assert shares["Residential"] == "70.0%"
    assert shares["Industrial"] == "N/A"


def test_legend_labels_come_from_scheme_bounds() -> None:
    scheme = derive_scheme(analyze([10, 50]))
    legend = build_legend("tax_change", "sussex", scheme)

    assert legend.title == "Tax Change (Sussex County)"
    assert [e.color for e in legend.entries] == scheme.colors
    assert legend.entries[0].label == "10.0% to 16.0%"
    assert legend.entries[3].label == "28.0% to 32.0%"
    assert legend.entries[-1].label == "44.0% to 50.0%"
    assert legend.unknown_entry.color == UNKNOWN_COLOR
    assert legend.caption


def test_legend_for_fixed_scheme_has_open_ends() -> None:
    scheme = FixedSchemeSource().get("tax_change", "kent")
    legend = build_legend("tax_change", "kent", scheme)
    assert legend.entries[0].label == "< -10.0%"
    assert legend.entries[1].label == "-10.0% to -5.0%"
    assert legend.entries[-1].label == "≥ 10.0%"
    assert legend.notes


def test_legend_for_degenerate_and_missing_schemes() -> None:
    degenerate = build_legend("tax_change", "kent", derive_scheme(analyze([20])))
    assert len(degenerate.entries) == 1
    assert degenerate.entries[0].label == "20.0%"

    empty = build_legend("tax_change", "kent", None)
    assert empty.entries == ()
    assert "No data" in empty.caption


def test_property_class_legend_lists_classes() -> None:
    legend = build_legend("property_class", "all", None)
    assert [e.label for e in legend.entries][:2] == ["Residential", "Commercial"]
    assert legend.title == "Property Class (Delaware)"


def test_legend_ends_follow_derived_scheme_median() -> None:
    legend = build_legend("tax_change", "sussex", derive_scheme(analyze([10, 50])))
    assert (legend.low_label, legend.high_label) == ("Below median", "Above median")
    assert "below the median" in legend.caption
    assert "decrease" not in legend.caption


def test_legend_for_increase_only_fixed_scheme() -> None:
    scheme = FixedSchemeSource().get("assessment_change", "sussex")
    legend = build_legend("assessment_change", "sussex", scheme)

    assert legend.entries[0].label == "< 100.0%"
    assert legend.entries[-1].label == "≥ 600.0%"
    assert (legend.low_label, legend.high_label) == ("Smaller increase", "Larger increase")
    assert "decrease" not in legend.caption


def test_legend_for_fixed_scheme_spanning_zero() -> None:
    legend = build_legend("tax_change", "kent", FixedSchemeSource().get("tax_change", "kent"))
    assert (legend.low_label, legend.high_label) == ("Larger decrease", "Larger increase")
    assert "Decreases are shown in blue" in legend.caption


def test_degenerate_legend_has_no_end_labels() -> None:
    legend = build_legend("tax_change", "kent", derive_scheme(analyze([20])))
    assert legend.low_label == legend.high_label == ""
