"""Top-K outlier ranking for highlightable layers."""

from dataclasses import dataclass

import pandas as pd

from core.config import TOP_K_OUTLIERS
from core.layers import HIGHLIGHTABLE_LAYERS, extract, parse_layer
from core.records import RegionRecord


@dataclass(frozen=True)
class RankedRegion:
    """A region, its extracted value and its rank (1 = largest absolute change)."""

    record: RegionRecord
    value: float
    rank: int


def rank(records: list[RegionRecord], layer, top_k: int = TOP_K_OUTLIERS) -> list[RankedRegion]:
    """
    Rank regions by absolute change, largest first.

    Regions without a value are left out. Ties keep input order.

    Args:
        records: Regions for the active scope
        layer: Active analysis layer
        top_k: Maximum number of regions returned

    Returns:
        List of RankedRegion (empty for non-highlightable layers)
    """
    layer = parse_layer(layer)
    if layer not in HIGHLIGHTABLE_LAYERS or top_k <= 0:
        return []

    values = [extract(layer, record) for record in records]
    df = pd.DataFrame({"position": range(len(records)), "value": values}, dtype=float)
    df = df.dropna(subset=["value"])
    if df.empty:
        return []

    df["magnitude"] = df["value"].abs()
    top = df.sort_values("magnitude", ascending=False, kind="stable").head(top_k)

    return [
        RankedRegion(record=records[int(row.position)], value=float(row.value), rank=i)
        for i, row in enumerate(top.itertuples(index=False), start=1)
    ]
