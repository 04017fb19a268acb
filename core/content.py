"""Tooltip and legend content for the map.

Everything here is plain data. The map component and the legend widget only
lay it out; neither recomputes values or bucket boundaries.
"""

import math
from dataclasses import dataclass, field

from core.buckets import DEGENERATE, DERIVED, FIXED, UNKNOWN_BUCKET, BucketScheme
from core.config import (
    ALL_COUNTIES,
    CURRENT_YEAR,
    PRIOR_YEAR,
    PROPERTY_CLASS_COLORS,
    county_label,
)
from core.layers import (
    LAYER_SPECS,
    AnalysisLayer,
    class_shares,
    dominant_class,
    extract,
    first_number,
    parse_layer,
)
from core.ranges import ValueRange
from core.records import RegionRecord
from utils.formatters import (
    format_bucket_range,
    format_currency,
    format_number,
    format_percentage,
    format_signed_percentage,
)

# Differences smaller than this (in points) read as "at the median"
MEDIAN_TOLERANCE = 0.05


@dataclass(frozen=True)
class TooltipContent:
    title: str
    metric_label: str
    value: str
    prior_value: str
    current_value: str
    sample_size: str
    scope_median_note: str | None = None
    class_shares: tuple[tuple[str, str], ...] = ()
    prior_label: str = f"{PRIOR_YEAR}"
    current_label: str = f"{CURRENT_YEAR}"

    def to_properties(self) -> dict:
        """Flatten for a GeoJSON feature's properties."""
        return {
            "tooltip_title": self.title,
            "tooltip_metric_label": self.metric_label,
            "tooltip_value": self.value,
            "tooltip_prior_label": self.prior_label,
            "tooltip_prior_value": self.prior_value,
            "tooltip_current_label": self.current_label,
            "tooltip_current_value": self.current_value,
            "tooltip_sample_size": self.sample_size,
            "tooltip_median_note": self.scope_median_note or "",
            "tooltip_class_shares": [list(pair) for pair in self.class_shares],
        }


@dataclass(frozen=True)
class LegendEntry:
    color: str
    label: str


@dataclass(frozen=True)
class LegendContent:
    """
    Legend description consumed by the legend widget.

    Attributes:
        title: Legend heading
        entries: Colors and labels from lowest to highest bucket
        unknown_entry: Entry for regions without data
        caption: Short explanation of the coloring
        low_label: Text for the low end of the color bar
        high_label: Text for the high end of the color bar
    """

    title: str
    entries: tuple[LegendEntry, ...]
    unknown_entry: LegendEntry
    caption: str
    low_label: str = ""
    high_label: str = ""
    notes: tuple[str, ...] = field(default_factory=tuple)


def region_title(record: RegionRecord) -> str:
    return f"{record.name}, {county_label(record.county)}"


def _format_level(value, value_format: str) -> str:
    if value_format == "percent":
        return format_percentage(value, decimals=2)
    return format_currency(value)


def median_note(layer, value: float | None, value_range: ValueRange | None, scope: str) -> str | None:
    """Comparison of a value against the scope's median, or None without data."""
    if value is None or value_range is None:
        return None

    spec = LAYER_SPECS[parse_layer(layer)]
    if scope == ALL_COUNTIES:
        where = "statewide median"
    else:
        where = f"{county_label(scope)} median"
    median_text = format_percentage(value_range.median)

    difference = value - value_range.median
    if abs(difference) < MEDIAN_TOLERANCE:
        return f"{spec.metric_label} is at the {where} ({median_text})"
    direction = "above" if difference > 0 else "below"
    return f"{spec.metric_label} is {abs(difference):.1f} pts {direction} the {where} ({median_text})"


def build_tooltip(record: RegionRecord, layer, scope: str,
                  value_range: ValueRange | None = None) -> TooltipContent:
    """
    Build tooltip content for one region.

    Args:
        record: Region to describe
        layer: Active analysis layer
        scope: Active scope ("all" or a county)
        value_range: Range for the active selection, if any

    Returns:
        TooltipContent with "N/A" in place of any missing number
    """
    layer = parse_layer(layer)
    spec = LAYER_SPECS[layer]
    sample_size = format_number(first_number(record, ["parcel_count"]))

    if layer == AnalysisLayer.PROPERTY_CLASS:
        shares = tuple((label, format_percentage(share)) for label, share in class_shares(record))
        return TooltipContent(
            title=region_title(record),
            metric_label=spec.metric_label,
            value=_dominant_label(record),
            prior_value=format_percentage(None),
            current_value=format_percentage(None),
            sample_size=sample_size,
            class_shares=shares,
        )

    value = extract(layer, record)
    return TooltipContent(
        title=region_title(record),
        metric_label=spec.metric_label,
        value=format_signed_percentage(value),
        prior_value=_format_level(first_number(record, spec.prior_fields), spec.value_format),
        current_value=_format_level(first_number(record, spec.current_fields), spec.value_format),
        sample_size=sample_size,
        scope_median_note=median_note(layer, value, value_range, scope),
    )


def _dominant_label(record: RegionRecord) -> str:
    return dominant_class(record) or format_percentage(None)


def _scale_description(scheme: BucketScheme) -> tuple[str, str, str]:
    """Low-end label, high-end label and color sentence for a scheme."""
    if scheme.kind == DERIVED:
        return (
            "Below median",
            "Above median",
            "Blue areas are below the median for this selection and red areas are above it.",
        )
    if scheme.kind == DEGENERATE:
        return "", "", ""

    bounds = [b for bucket in scheme.buckets for b in (bucket.lower, bucket.upper) if math.isfinite(b)]
    if bounds and min(bounds) >= 0:
        return (
            "Smaller increase",
            "Larger increase",
            "Every band is an increase. Blue marks the smallest increases and red the largest.",
        )
    if bounds and max(bounds) <= 0:
        return (
            "Larger decrease",
            "Smaller decrease",
            "Every band is a decrease. Blue marks the largest decreases and red the smallest.",
        )
    return "Larger decrease", "Larger increase", "Decreases are shown in blue and increases in red."


def build_legend(layer, scope: str, scheme: BucketScheme | None) -> LegendContent:
    """
    Build legend content from the active scheme.

    Labels are taken from the scheme's bucket bounds so the legend always
    matches the colors on the map.
    """
    layer = parse_layer(layer)
    spec = LAYER_SPECS[layer]
    title = f"{spec.label} ({county_label(scope)})"
    unknown = LegendEntry(color=UNKNOWN_BUCKET.color, label=UNKNOWN_BUCKET.label)

    if layer == AnalysisLayer.PROPERTY_CLASS:
        entries = tuple(LegendEntry(color=c, label=name) for name, c in PROPERTY_CLASS_COLORS.items())
        return LegendContent(title=title, entries=entries, unknown_entry=unknown, caption=spec.caption)

    if scheme is None:
        return LegendContent(
            title=title,
            entries=(),
            unknown_entry=unknown,
            caption="No data is available for this selection.",
        )

    entries = tuple(
        LegendEntry(color=b.color, label=b.label or format_bucket_range(b.lower, b.upper))
        for b in scheme.buckets
    )
    low_label, high_label, color_note = _scale_description(scheme)
    caption = f"{spec.caption} {color_note}".strip()
    notes = ()
    if scheme.kind == DEGENERATE:
        notes = ("Every area has the same value.",)
    elif scheme.kind == FIXED:
        notes = ("Thresholds are fixed for this area.",)

    return LegendContent(
        title=title,
        entries=entries,
        unknown_entry=unknown,
        caption=caption,
        low_label=low_label,
        high_label=high_label,
        notes=notes,
    )
