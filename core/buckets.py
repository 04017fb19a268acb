"""Bucket schemes and value classification.

A scheme is an ordered run of contiguous buckets. Buckets are lower-inclusive
and upper-exclusive, except that the topmost non-empty bucket also includes
its upper bound so the maximum is captured.
"""

import math
from dataclasses import dataclass

from core.config import DIVERGING_PALETTE, NEAR_MEDIAN_FRACTION, NEUTRAL_COLOR, UNKNOWN_COLOR
from core.ranges import ValueRange

DERIVED = "derived"
FIXED = "fixed"
DEGENERATE = "degenerate"


@dataclass(frozen=True)
class Bucket:
    lower: float
    upper: float
    color: str
    rank: int
    label: str = ""

    @property
    def is_empty(self) -> bool:
        return self.upper <= self.lower

    def contains(self, value: float, include_upper: bool = False) -> bool:
        if include_upper:
            return self.lower <= value <= self.upper
        return self.lower <= value < self.upper


# Reserved no-data bucket
UNKNOWN_BUCKET = Bucket(lower=math.nan, upper=math.nan, color=UNKNOWN_COLOR, rank=-1, label="No data")


@dataclass(frozen=True)
class BucketScheme:
    """
    Ordered, contiguous buckets for one (layer, scope) selection.

    Attributes:
        buckets: Buckets from lowest to highest
        kind: "derived", "fixed" or "degenerate"
    """

    buckets: tuple[Bucket, ...]
    kind: str = DERIVED

    def __post_init__(self):
        if not self.buckets:
            raise ValueError("A bucket scheme needs at least one bucket")
        for bucket in self.buckets:
            if math.isnan(bucket.lower) or math.isnan(bucket.upper):
                raise ValueError("Bucket bounds must be numbers")
            if bucket.lower > bucket.upper:
                raise ValueError(f"Bucket lower bound {bucket.lower} exceeds upper bound {bucket.upper}")
            if bucket.color == UNKNOWN_COLOR:
                raise ValueError("The no-data color is reserved")
        for below, above in zip(self.buckets, self.buckets[1:]):
            if below.upper != above.lower:
                raise ValueError(
                    f"Buckets must be contiguous: {below.upper} does not meet {above.lower}"
                )

    @property
    def lower(self) -> float:
        return self.buckets[0].lower

    @property
    def upper(self) -> float:
        return self.buckets[-1].upper

    @property
    def colors(self) -> list[str]:
        return [b.color for b in self.buckets]


def build_scheme(edges: list[float], colors: list[str], kind: str = DERIVED) -> BucketScheme:
    """Build a scheme from n+1 ascending edges and n colors."""
    if len(edges) != len(colors) + 1:
        raise ValueError(f"Expected {len(colors) + 1} edges for {len(colors)} colors, got {len(edges)}")
    buckets = tuple(
        Bucket(lower=float(lo), upper=float(hi), color=color, rank=i)
        for i, (lo, hi, color) in enumerate(zip(edges, edges[1:], colors))
    )
    return BucketScheme(buckets=buckets, kind=kind)


def degenerate_scheme(value: float) -> BucketScheme:
    """Single neutral bucket for a range where min == max."""
    bucket = Bucket(lower=float(value), upper=float(value), color=NEUTRAL_COLOR, rank=0)
    return BucketScheme(buckets=(bucket,), kind=DEGENERATE)


def _split(start: float, stop: float, parts: int) -> list[float]:
    """Linearly spaced edges from start to stop, exact at both ends."""
    edges = [start + (stop - start) * i / parts for i in range(parts)]
    edges.append(stop)
    return edges


def derive_scheme(value_range: ValueRange, near_median_fraction: float = NEAR_MEDIAN_FRACTION,
                  palette: list[str] = DIVERGING_PALETTE) -> BucketScheme:
    """
    Seven buckets centered on the median.

    Three bands below the median, one near-median band whose half-width is
    near_median_fraction of (max - min), and three bands above. The outer
    bands split [min, band start] and [band end, max] evenly. Bands that
    would fall outside [min, max] collapse to zero width.

    Args:
        value_range: Range of the current selection
        near_median_fraction: Half-width of the center band as a fraction of the span
        palette: Seven colors from lowest to highest

    Returns:
        BucketScheme (a single-bucket degenerate scheme when min == max)
    """
    if not 0 <= near_median_fraction < 0.5:
        raise ValueError(f"near_median_fraction must be in [0, 0.5), got {near_median_fraction}")
    if len(palette) != 7:
        raise ValueError(f"Derived schemes need 7 colors, got {len(palette)}")

    if value_range.is_degenerate:
        return degenerate_scheme(value_range.min)

    lo, hi, median = value_range.min, value_range.max, value_range.median
    half_width = near_median_fraction * value_range.span
    band_lo = max(lo, median - half_width)
    band_hi = min(hi, median + half_width)

    edges = _split(lo, band_lo, 3) + _split(band_hi, hi, 3)
    return build_scheme(edges, list(palette), kind=DERIVED)


def classify(value, scheme: BucketScheme) -> Bucket:
    """
    Map a value to its bucket.

    None and non-finite values go to UNKNOWN_BUCKET. Values outside the
    scheme go to the nearest end bucket.
    """
    if value is None or isinstance(value, bool):
        return UNKNOWN_BUCKET
    try:
        value = float(value)
    except (TypeError, ValueError):
        return UNKNOWN_BUCKET
    if not math.isfinite(value):
        return UNKNOWN_BUCKET

    filled = [b for b in scheme.buckets if not b.is_empty]
    if not filled:
        return scheme.buckets[0]

    if value < filled[0].lower:
        return filled[0]
    for bucket in filled[:-1]:
        if bucket.contains(value):
            return bucket
    return filled[-1]
