import json
from pathlib import Path

import duckdb
import pytest

from core.errors import DataUnavailable
from core.layers import AnalysisLayer
from utils.db import DuckDBCountySource, create_connection, is_remote


def _write_collection(path: Path) -> None:
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"GEOID": "10005050100", "NAME": "Lewes", "tax_change_pct": 10.5},
                "geometry": {"type": "Polygon", "coordinates": [[[-75.1, 38.7], [-75.0, 38.7], [-75.0, 38.8], [-75.1, 38.7]]]},
            },
            {
                "type": "Feature",
                "properties": {"GEOID": "10005050200", "NAME": "Milton", "tax_change_pct": None},
                "geometry": {"type": "Polygon", "coordinates": [[[-75.3, 38.7], [-75.2, 38.7], [-75.2, 38.8], [-75.3, 38.7]]]},
            },
            {
                "type": "Feature",
                "properties": {"GEOID": "10005050300", "NAME": "Georgetown", "tax_change_pct": 3},
                "geometry": {"type": "Polygon", "coordinates": [[[-75.4, 38.6], [-75.3, 38.6], [-75.3, 38.7], [-75.4, 38.6]]]},
            },
        ],
    }
    path.write_text(json.dumps(collection), encoding="utf-8")


def test_fetch_reads_features_from_county_file(tmp_path: Path) -> None:
    _write_collection(tmp_path / "sussex_all_layers.json")
    source = DuckDBCountySource(duckdb.connect(), base_path=str(tmp_path))

    features = source.fetch("sussex", AnalysisLayer.TAX_CHANGE)

    assert len(features) == 3
    props = {f["properties"]["GEOID"]: f["properties"] for f in features}
    assert props["10005050100"]["NAME"] == "Lewes"
    assert props["10005050100"]["tax_change_pct"] == pytest.approx(10.5)
    assert props["10005050200"]["tax_change_pct"] is None
    assert props["10005050300"]["tax_change_pct"] == pytest.approx(3.0)
    assert features[0]["geometry"]["type"] == "Polygon"


def test_fetch_uses_layer_in_file_pattern(tmp_path: Path) -> None:
    _write_collection(tmp_path / "kent_tax_change.json")
    source = DuckDBCountySource(duckdb.connect(), base_path=str(tmp_path), file_pattern="{county}_{layer}.json")

    assert source.path_for("kent", AnalysisLayer.TAX_CHANGE).endswith("kent_tax_change.json")
    assert len(source.fetch("kent", AnalysisLayer.TAX_CHANGE)) == 3


def test_missing_file_raises_data_unavailable(tmp_path: Path) -> None:
    source = DuckDBCountySource(duckdb.connect(), base_path=str(tmp_path))

    with pytest.raises(DataUnavailable) as excinfo:
        source.fetch("kent", AnalysisLayer.TAX_CHANGE)
    assert excinfo.value.county == "kent"


def test_local_base_path_needs_no_extensions(tmp_path: Path) -> None:
    assert not is_remote(str(tmp_path))
    assert is_remote("gs://bucket/data")
    conn = create_connection(str(tmp_path))
    assert conn.execute("SELECT 1").fetchone() == (1,)
