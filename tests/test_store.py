import asyncio
import logging
import threading

import pytest

from core.errors import DataUnavailable, LoadSuperseded
from core.layers import AnalysisLayer
from core.pipeline import build_choropleth
from core.records import RegionRecord
from core.store import RegionStore, parse_features, validate_scope


def _feature(geoid, **properties) -> dict:
    props = dict(properties)
    if geoid is not None:
        props["GEOID"] = geoid
    return {"type": "Feature", "properties": props, "geometry": None}


class FakeSource:
    def __init__(self, features: dict, failing=(), gated=None, error=OSError):
        self.features = features
        self.failing = set(failing)
        self.error = error
        self.gated = gated
        self.gate = threading.Event()
        self.calls = []

    def fetch(self, county, layer):
        self.calls.append((county, layer))
        if county == self.gated:
            self.gate.wait(timeout=5)
        if county in self.failing:
            raise self.error(f"{county} unreachable")
        return self.features.get(county, [])


FEATURES = {
    "new_castle": [_feature("N1", tax_change_pct=-4.0), _feature("N2", tax_change_pct=2.0)],
    "kent": [_feature("K1", tax_change_pct=40.0), _feature("K2", NAME="No data here")],
    "sussex": [_feature("S1", tax_change_pct=12.0), _feature(None, tax_change_pct=99.0)],
}


def test_load_single_county_filters_and_sets_current() -> None:
    store = RegionStore(FakeSource(FEATURES))
    records = asyncio.run(store.load("kent", "tax_change"))

    assert [r.geoid for r in records] == ["K1"]
    assert store.current.scope == "kent"
    assert store.current.layer is AnalysisLayer.TAX_CHANGE
    assert store.current.records == tuple(records)


def test_load_all_fetches_every_county_once() -> None:
    source = FakeSource(FEATURES)
    store = RegionStore(source)
    records = asyncio.run(store.load("all", AnalysisLayer.TAX_CHANGE))

    assert sorted(county for county, _ in source.calls) == ["kent", "new_castle", "sussex"]
    assert [r.geoid for r in records] == ["N1", "N2", "K1", "S1"]
    assert {r.county for r in records} == {"new_castle", "kent", "sussex"}


def test_missing_geoid_is_dropped_with_warning(caplog) -> None:
    store = RegionStore(FakeSource(FEATURES))
    with caplog.at_level(logging.WARNING, logger="core.store"):
        records = asyncio.run(store.load("sussex", "tax_change"))

    assert [r.geoid for r in records] == ["S1"]
    assert "no GEOID" in caplog.text


def test_one_failing_county_fails_the_whole_load() -> None:
    store = RegionStore(FakeSource(FEATURES, failing={"kent"}))

    with pytest.raises(DataUnavailable) as excinfo:
        asyncio.run(store.load("all", "tax_change"))

    assert excinfo.value.county == "kent"
    assert store.current is None


def test_duplicate_geoid_across_counties_is_rejected() -> None:
    features = {"kent": [_feature("X", tax_change_pct=1)], "sussex": [_feature("X", tax_change_pct=2)]}
    store = RegionStore(FakeSource(features))

    with pytest.raises(DataUnavailable):
        asyncio.run(store.load("all", "tax_change"))


def test_superseded_load_is_discarded() -> None:
    source = FakeSource(FEATURES, gated="sussex")
    store = RegionStore(source)

    async def scenario():
        first = asyncio.create_task(store.load("sussex", "tax_change"))
        await asyncio.sleep(0)
        second = await store.load("kent", "tax_change")
        source.gate.set()
        with pytest.raises(LoadSuperseded) as excinfo:
            await first
        return second, excinfo.value

    second, superseded = asyncio.run(scenario())

    assert [r.geoid for r in second] == ["K1"]
    assert superseded.token == 1
    assert superseded.latest_token == 2
    assert store.current.scope == "kent"
    assert store.current.token == 2


def test_superseded_failure_reports_superseded() -> None:
    source = FakeSource(FEATURES, failing={"sussex"}, gated="sussex")
    store = RegionStore(source)

    async def scenario():
        first = asyncio.create_task(store.load("sussex", "tax_change"))
        await asyncio.sleep(0)
        await store.load("kent", "tax_change")
        source.gate.set()
        await first

    with pytest.raises(LoadSuperseded):
        asyncio.run(scenario())


def test_store_load_matches_direct_pipeline_on_merged_records() -> None:
    store = RegionStore(FakeSource(FEATURES))
    merged = asyncio.run(store.load("all", "tax_change"))

    direct = []
    for county in ["new_castle", "kent", "sussex"]:
        for record in parse_features(FEATURES[county], county):
            if record.get("tax_change_pct") is not None:
                direct.append(record)

    from_store = build_choropleth(merged, "tax_change", "all")
    from_direct = build_choropleth(direct, "tax_change", "all")
    assert from_store.value_range == from_direct.value_range
    assert from_store.styles == from_direct.styles


def test_validate_scope() -> None:
    assert validate_scope("New Castle") == "new_castle"
    assert validate_scope("ALL") == "all"
    with pytest.raises(ValueError):
        validate_scope("cecil")
    with pytest.raises(ValueError):
        asyncio.run(RegionStore(FakeSource({})).load("cecil", "tax_change"))


def test_parse_features_keeps_geometry() -> None:
    geometry = {"type": "Point", "coordinates": [-75.1, 38.7]}
    records = parse_features([{"properties": {"GEOID": "G"}, "geometry": geometry}], "sussex")
    assert records == [RegionRecord.from_properties({"GEOID": "G"}, "sussex")]
    assert records[0].geometry == geometry


def test_display_only_fields_do_not_pass_the_layer_filter() -> None:
    features = {
        "sussex": [
            _feature("A", tax_change_pct=5.0),
            _feature("B", median_tax_2025=900),
            _feature("C", tax_burden_pct_2024=1.2),
        ],
    }
    store = RegionStore(FakeSource(features))

    tax = asyncio.run(store.load("sussex", "tax_change"))
    burden = asyncio.run(store.load("sussex", "tax_burden_change"))

    assert [r.geoid for r in tax] == ["A"]
    assert burden == []


def test_unexpected_source_error_becomes_data_unavailable() -> None:
    store = RegionStore(FakeSource(FEATURES, failing={"new_castle"}, error=ValueError))

    with pytest.raises(DataUnavailable) as excinfo:
        asyncio.run(store.load("all", "tax_change"))

    assert excinfo.value.county == "new_castle"
    assert isinstance(excinfo.value.__cause__, ValueError)
