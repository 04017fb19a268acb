"""Analysis layers and per-layer value extraction.

Each layer declares the raw fields it reads, in fallback order, together with
the scale applied to each field. A field's unit is fixed by its name: a
``*_pct`` field is already a percentage, a bare fraction field is scaled by
100. Values are never rescaled based on their magnitude.
"""

import math
from dataclasses import dataclass
from enum import Enum

from core.config import CURRENT_YEAR, PRIOR_YEAR
from core.records import RegionRecord


class AnalysisLayer(str, Enum):
    TAX_CHANGE = "tax_change"
    ASSESSMENT_CHANGE = "assessment_change"
    TAX_BURDEN_CHANGE = "tax_burden_change"
    PROPERTY_CLASS = "property_class"


HIGHLIGHTABLE_LAYERS = frozenset({
    AnalysisLayer.TAX_CHANGE,
    AnalysisLayer.ASSESSMENT_CHANGE,
    AnalysisLayer.TAX_BURDEN_CHANGE,
})


@dataclass(frozen=True)
class FieldSpec:
    """A raw field and the factor that converts it to percentage points."""

    name: str
    scale: float = 1.0


@dataclass(frozen=True)
class DerivedChange:
    """Percent change computed from a prior-year and current-year field."""

    prior: str
    current: str


@dataclass(frozen=True)
class LayerSpec:
    """
    Declared behaviour of one analysis layer.

    Attributes:
        label: Display label
        metric_label: Label for the extracted metric in tooltips
        chain: Fields tried in order; first usable value wins
        derived: Optional fallback computed from prior/current fields
        prior_fields: Fields for the year N-1 value, in fallback order
        current_fields: Fields for the year N value, in fallback order
        value_format: "currency" or "percent" for prior/current values
        caption: Short explanation shown under the legend
    """

    label: str
    metric_label: str
    chain: tuple[FieldSpec, ...] = ()
    derived: DerivedChange | None = None
    prior_fields: tuple[str, ...] = ()
    current_fields: tuple[str, ...] = ()
    value_format: str = "currency"
    caption: str = ""

    @property
    def value_fields(self) -> tuple[str, ...]:
        """Fields that can produce the metric: the chain, then the derived inputs."""
        fields = [spec.name for spec in self.chain]
        if self.derived:
            fields.extend([self.derived.prior, self.derived.current])
        return tuple(dict.fromkeys(fields))


# Property class share fields (already percentages)
PROPERTY_CLASS_FIELDS = {
    "Residential": "pct_residential",
    "Commercial": "pct_commercial",
    "Industrial": "pct_industrial",
    "Agricultural": "pct_agricultural",
    "Exempt": "pct_exempt",
}

LAYER_SPECS = {
    AnalysisLayer.TAX_CHANGE: LayerSpec(
        label="Tax Change",
        metric_label="Tax change",
        chain=(FieldSpec("tax_change_pct"), FieldSpec("tax_pct_change")),
        derived=DerivedChange(f"tax_{PRIOR_YEAR}", f"tax_{CURRENT_YEAR}"),
        prior_fields=(f"median_tax_{PRIOR_YEAR}", f"tax_{PRIOR_YEAR}"),
        current_fields=(f"median_tax_{CURRENT_YEAR}", f"tax_{CURRENT_YEAR}"),
        caption="Percent change in property tax.",
    ),
    AnalysisLayer.ASSESSMENT_CHANGE: LayerSpec(
        label="Assessment Change",
        metric_label="Assessment change",
        chain=(FieldSpec("assessment_change_pct"), FieldSpec("assessment_pct_change")),
        derived=DerivedChange(f"assessment_{PRIOR_YEAR}", f"assessment_{CURRENT_YEAR}"),
        prior_fields=(f"median_assessment_{PRIOR_YEAR}", f"assessment_{PRIOR_YEAR}"),
        current_fields=(f"median_assessment_{CURRENT_YEAR}", f"assessment_{CURRENT_YEAR}"),
        caption="Percent change in assessed value after reassessment.",
    ),
    AnalysisLayer.TAX_BURDEN_CHANGE: LayerSpec(
        label="Tax Burden Change",
        metric_label="Tax burden change",
        # tax_burden_change is a unit fraction (0.05 == 5%)
        chain=(FieldSpec("tax_burden_change_pct"), FieldSpec("tax_burden_change", scale=100.0)),
        prior_fields=(f"tax_burden_pct_{PRIOR_YEAR}",),
        current_fields=(f"tax_burden_pct_{CURRENT_YEAR}",),
        value_format="percent",
        caption="Change in taxes as a share of assessed value, in percentage points.",
    ),
    AnalysisLayer.PROPERTY_CLASS: LayerSpec(
        label="Property Class",
        metric_label="Largest property class",
        value_format="percent",
        caption="Each area is colored by its largest property class by parcel share.",
    ),
}


def parse_layer(layer) -> AnalysisLayer:
    """Coerce a layer name or enum member to an AnalysisLayer."""
    if isinstance(layer, AnalysisLayer):
        return layer
    try:
        return AnalysisLayer(layer)
    except ValueError:
        raise ValueError(f"Unknown analysis layer: {layer!r}") from None


def to_number(value) -> float | None:
    """Convert a raw attribute to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def first_number(record: RegionRecord, fields) -> float | None:
    """Return the first usable number among fields."""
    for name in fields:
        number = to_number(record.get(name))
        if number is not None:
            return number
    return None


def percent_change(prior: float | None, current: float | None) -> float | None:
    if prior is None or current is None or prior == 0:
        return None
    return (current - prior) / abs(prior) * 100


def extract(layer, record: RegionRecord) -> float | None:
    """
    Extract the layer's metric for a region, in percentage points.

    Returns None when no field in the layer's chain is usable, including
    for the property class layer, which has no single scalar.
    """
    spec = LAYER_SPECS[parse_layer(layer)]

    for field_spec in spec.chain:
        number = to_number(record.get(field_spec.name))
        if number is not None:
            return number * field_spec.scale

    if spec.derived:
        return percent_change(
            to_number(record.get(spec.derived.prior)),
            to_number(record.get(spec.derived.current)),
        )
    return None


def class_shares(record: RegionRecord) -> list[tuple[str, float | None]]:
    """Property class composition as (class label, share) pairs."""
    return [(label, to_number(record.get(name))) for label, name in PROPERTY_CLASS_FIELDS.items()]


def dominant_class(record: RegionRecord) -> str | None:
    """Class with the largest share; ties go to the first declared class."""
    best_label, best_share = None, None
    for label, share in class_shares(record):
        if share is None:
            continue
        if best_share is None or share > best_share:
            best_label, best_share = label, share
    return best_label


def is_valid_for_layer(layer, record: RegionRecord) -> bool:
    """
    True if the record carries a field the layer can compute a value from.

    Prior/current display fields such as median_tax_2025 do not count.
    """
    layer = parse_layer(layer)
    if layer == AnalysisLayer.PROPERTY_CLASS:
        fields = tuple(PROPERTY_CLASS_FIELDS.values())
    else:
        fields = LAYER_SPECS[layer].value_fields
    return any(to_number(record.get(name)) is not None for name in fields)
