"""Region record store.

Loads the records for one (scope, layer) selection. Counties are fetched
concurrently in worker threads; if any county fails the whole load fails.
Each load gets an increasing token, and a load that finishes after a newer
one has started is discarded.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from core.config import ALL_COUNTIES, COUNTIES
from core.errors import DataUnavailable, LoadSuperseded, MalformedRecord
from core.layers import AnalysisLayer, is_valid_for_layer, parse_layer
from core.records import RegionRecord

logger = logging.getLogger(__name__)


class CountySource(Protocol):
    """Blocking source of GeoJSON features for one county."""

    def fetch(self, county: str, layer: AnalysisLayer) -> list[dict]:
        ...


@dataclass(frozen=True)
class LoadResult:
    token: int
    scope: str
    layer: AnalysisLayer
    records: tuple[RegionRecord, ...]


def validate_scope(scope: str, counties=COUNTIES) -> str:
    """Normalize a scope name and check it is "all" or a known county."""
    normalized = str(scope).strip().lower().replace(" ", "_")
    if normalized == ALL_COUNTIES or normalized in counties:
        return normalized
    raise ValueError(f"Unknown scope: {scope!r}")


def parse_features(features: list[dict], county: str) -> list[RegionRecord]:
    """Build records from features, dropping any without a GEOID."""
    records = []
    for feature in features:
        try:
            record = RegionRecord.from_properties(
                feature.get("properties"), county, geometry=feature.get("geometry")
            )
        except MalformedRecord as e:
            logger.warning("Dropping feature: %s", e)
            continue
        records.append(record)
    return records


class RegionStore:
    """
    Loads region records and holds the most recent result.

    Args:
        source: CountySource used for every county fetch
        counties: Counties making up the "all" scope
    """

    def __init__(self, source: CountySource, counties=COUNTIES):
        self.source = source
        self.counties = list(counties)
        self._latest_token = 0
        self.current: LoadResult | None = None

    @property
    def latest_token(self) -> int:
        return self._latest_token

    async def _fetch_county(self, county: str, layer: AnalysisLayer) -> list[RegionRecord]:
        try:
            features = await asyncio.to_thread(self.source.fetch, county, layer)
        except DataUnavailable:
            raise
        except Exception as e:
            # Any source failure (I/O, parse errors) fails this county
            raise DataUnavailable(f"Could not load data for {county}: {e}", county=county) from e
        return parse_features(features or [], county)

    async def load(self, scope: str, layer) -> list[RegionRecord]:
        """
        Load records for a scope and layer.

        Returns:
            Records passing the layer's validity filter

        Raises:
            DataUnavailable: a county could not be loaded, or two counties
                report the same GEOID
            LoadSuperseded: a newer load started before this one finished
            ValueError: unknown scope or layer
        """
        scope = validate_scope(scope, self.counties)
        layer = parse_layer(layer)

        self._latest_token += 1
        token = self._latest_token

        counties = self.counties if scope == ALL_COUNTIES else [scope]
        logger.info("Load %d: scope=%s layer=%s counties=%s", token, scope, layer.value, counties)

        try:
            per_county = await asyncio.gather(
                *(self._fetch_county(county, layer) for county in counties)
            )
        except DataUnavailable:
            if token != self._latest_token:
                raise LoadSuperseded(token, self._latest_token) from None
            raise

        if token != self._latest_token:
            logger.info("Load %d superseded by load %d", token, self._latest_token)
            raise LoadSuperseded(token, self._latest_token)

        records = []
        seen = {}
        for county, county_records in zip(counties, per_county):
            for record in county_records:
                if record.geoid in seen:
                    if seen[record.geoid] != county:
                        raise DataUnavailable(
                            f"GEOID {record.geoid} reported by both {seen[record.geoid]} and {county}",
                            county=county,
                        )
                    logger.warning("Dropping duplicate GEOID %s in %s", record.geoid, county)
                    continue
                seen[record.geoid] = county
                if is_valid_for_layer(layer, record):
                    records.append(record)

        dropped = sum(len(r) for r in per_county) - len(records)
        if dropped:
            logger.info("Load %d: dropped %d regions (no %s data or duplicate GEOID)", token, dropped, layer.value)

        self.current = LoadResult(token=token, scope=scope, layer=layer, records=tuple(records))
        return records
