"""Fixed bucket schemes and scheme selection.

Fixed schemes are literal thresholds keyed by (layer, county) or
(layer, "statewide"). Each entry lists the interior thresholds in ascending
order; the outer buckets are open-ended. A selection with no fixed scheme
falls back to a scheme derived from the current value range.
"""

import math
from typing import Mapping

from core.buckets import FIXED, BucketScheme, build_scheme, derive_scheme
from core.config import ALL_COUNTIES, DIVERGING_PALETTE, NEAR_MEDIAN_FRACTION, STATEWIDE
from core.layers import AnalysisLayer, parse_layer
from core.ranges import ValueRange

# Illustrative default percent thresholds; deployments replace them by
# passing their own definitions to FixedSchemeSource
FIXED_BUCKET_SCHEMES = {
    ("tax_change", "kent"): {
        "thresholds": [-10.0, -5.0, -1.0, 1.0, 5.0, 10.0],
        "colors": DIVERGING_PALETTE,
    },
    ("tax_change", "new_castle"): {
        "thresholds": [-15.0, -7.5, -2.5, 2.5, 7.5, 15.0],
        "colors": DIVERGING_PALETTE,
    },
    ("assessment_change", "sussex"): {
        "thresholds": [100.0, 200.0, 300.0, 400.0, 500.0, 600.0],
        "colors": DIVERGING_PALETTE,
    },
    ("assessment_change", "statewide"): {
        "thresholds": [50.0, 100.0, 200.0, 300.0, 400.0, 500.0],
        "colors": DIVERGING_PALETTE,
    },
}


def scheme_from_thresholds(thresholds: list[float], colors: list[str]) -> BucketScheme:
    """Build an open-ended fixed scheme from interior thresholds."""
    edges = [-math.inf] + [float(t) for t in thresholds] + [math.inf]
    return build_scheme(edges, list(colors), kind=FIXED)


def scheme_key(layer, scope: str) -> tuple[str, str]:
    """Lookup key for a (layer, scope) selection."""
    layer = parse_layer(layer)
    return (layer.value, STATEWIDE if scope == ALL_COUNTIES else scope)


class FixedSchemeSource:
    """
    Lookup of fixed bucket schemes.

    Args:
        definitions: Mapping of (layer, county | "statewide") to a dict with
            "thresholds" and "colors"; defaults to FIXED_BUCKET_SCHEMES
    """

    def __init__(self, definitions: Mapping | None = None):
        if definitions is None:
            definitions = FIXED_BUCKET_SCHEMES
        # Build eagerly so bad threshold data fails at startup
        self._schemes = {
            (parse_layer(layer).value, key): scheme_from_thresholds(d["thresholds"], d["colors"])
            for (layer, key), d in definitions.items()
        }

    def get(self, layer, scope: str) -> BucketScheme | None:
        """Scheme for exactly this (layer, scope), or None."""
        return self._schemes.get(scheme_key(layer, scope))

    def __contains__(self, key) -> bool:
        layer, scope = key
        return scheme_key(layer, scope) in self._schemes

    def __len__(self) -> int:
        return len(self._schemes)


def select_scheme(layer, scope: str, value_range: ValueRange | None,
                  fixed_source: FixedSchemeSource | None = None,
                  near_median_fraction: float = NEAR_MEDIAN_FRACTION) -> BucketScheme | None:
    """
    Pick the active scheme: fixed if one exists for (layer, scope), else derived.

    Returns None for the property class layer, and when there is neither a
    fixed scheme nor any data to derive one from.
    """
    layer = parse_layer(layer)
    if layer == AnalysisLayer.PROPERTY_CLASS:
        return None

    if fixed_source is not None:
        fixed = fixed_source.get(layer, scope)
        if fixed is not None:
            return fixed

    if value_range is None:
        return None
    return derive_scheme(value_range, near_median_fraction=near_median_fraction)
