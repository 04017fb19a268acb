"""End-to-end choropleth computation for one (scope, layer) selection."""

import logging
from dataclasses import dataclass

from core.buckets import UNKNOWN_BUCKET, BucketScheme, classify
from core.config import (
    DEFAULT_STROKE,
    HOVER_STROKE,
    NEAR_MEDIAN_FRACTION,
    PROPERTY_CLASS_COLORS,
    TOP_K_OUTLIERS,
)
from core.content import LegendContent, TooltipContent, build_legend, build_tooltip
from core.layers import AnalysisLayer, dominant_class, extract, parse_layer
from core.ranges import ValueRange, analyze
from core.ranker import RankedRegion, rank
from core.records import RegionRecord
from core.schemes import FixedSchemeSource, select_scheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionStyle:
    fill_color: str
    bucket_rank: int
    value: float | None = None


@dataclass(frozen=True)
class ChoroplethView:
    """
    Everything the renderers need for one selection.

    Attributes:
        layer: Active layer
        scope: Active scope
        styles: GEOID -> RegionStyle
        tooltips: GEOID -> TooltipContent
        legend: Legend content for the active scheme
        ranked: Top outliers (empty for property class)
        value_range: Range over non-null values, or None
        scheme: Active bucket scheme, or None
    """

    layer: AnalysisLayer
    scope: str
    styles: dict[str, RegionStyle]
    tooltips: dict[str, TooltipContent]
    legend: LegendContent
    ranked: list[RankedRegion]
    value_range: ValueRange | None
    scheme: BucketScheme | None


def _style_for(record: RegionRecord, layer: AnalysisLayer, value: float | None,
               scheme: BucketScheme | None) -> RegionStyle:
    if layer == AnalysisLayer.PROPERTY_CLASS:
        dominant = dominant_class(record)
        if dominant is None:
            return RegionStyle(fill_color=UNKNOWN_BUCKET.color, bucket_rank=UNKNOWN_BUCKET.rank)
        rank_of = list(PROPERTY_CLASS_COLORS).index(dominant)
        return RegionStyle(fill_color=PROPERTY_CLASS_COLORS[dominant], bucket_rank=rank_of)

    if scheme is None:
        bucket = UNKNOWN_BUCKET
    else:
        bucket = classify(value, scheme)
    return RegionStyle(fill_color=bucket.color, bucket_rank=bucket.rank, value=value)


def build_choropleth(records: list[RegionRecord], layer, scope: str,
                     fixed_source: FixedSchemeSource | None = None,
                     near_median_fraction: float = NEAR_MEDIAN_FRACTION,
                     top_k: int = TOP_K_OUTLIERS) -> ChoroplethView:
    """
    Run extraction, range analysis, classification, ranking and content building.

    Args:
        records: Regions loaded for the selection
        layer: Active analysis layer
        scope: "all" or a county
        fixed_source: Fixed schemes; derived schemes are used where none applies
        near_median_fraction: Half-width of the derived near-median band
        top_k: Number of outliers to rank

    Returns:
        ChoroplethView
    """
    layer = parse_layer(layer)

    values = {record.geoid: extract(layer, record) for record in records}
    value_range = analyze(values.values())
    scheme = select_scheme(layer, scope, value_range, fixed_source, near_median_fraction)

    if value_range is None and layer != AnalysisLayer.PROPERTY_CLASS:
        logger.info("No values for layer=%s scope=%s (%d regions)", layer.value, scope, len(records))
    elif value_range is not None and value_range.is_degenerate:
        logger.info("Degenerate range for layer=%s scope=%s: all values %.2f",
                    layer.value, scope, value_range.min)

    styles = {r.geoid: _style_for(r, layer, values[r.geoid], scheme) for r in records}
    tooltips = {r.geoid: build_tooltip(r, layer, scope, value_range) for r in records}

    return ChoroplethView(
        layer=layer,
        scope=scope,
        styles=styles,
        tooltips=tooltips,
        legend=build_legend(layer, scope, scheme),
        ranked=rank(records, layer, top_k=top_k),
        value_range=value_range,
        scheme=scheme,
    )


def to_geojson(view: ChoroplethView, records: list[RegionRecord]) -> dict:
    """
    Build the FeatureCollection handed to the map component.

    Records without geometry are skipped.
    """
    outlier_ranks = {r.record.geoid: r.rank for r in view.ranked}

    features = []
    for i, record in enumerate(records):
        if record.geometry is None:
            continue
        style = view.styles[record.geoid]
        features.append({
            "type": "Feature",
            "id": i,  # Numeric ID for setFeatureState
            "geometry": record.geometry,
            "properties": {
                "GEOID": record.geoid,
                "county": record.county,
                "fillColor": style.fill_color,
                "bucket_rank": style.bucket_rank,
                "outlier_rank": outlier_ranks.get(record.geoid, 0),
                **view.tooltips[record.geoid].to_properties(),
            },
        })

    return {"type": "FeatureCollection", "features": features}


def renderer_styles() -> dict:
    """Default and hover stroke styles for the map component."""
    return {"default": dict(DEFAULT_STROKE), "hover": dict(HOVER_STROKE)}
