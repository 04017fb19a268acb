import pytest

from core.errors import MalformedRecord
from core.records import RegionRecord


def test_from_properties_picks_display_name_in_order() -> None:
    record = RegionRecord.from_properties(
        {"GEOID": "A", "NAME": "Tract 501", "CITY_NAME": "Lewes"}, "sussex"
    )
    assert record.name == "Lewes"
    assert RegionRecord.from_properties({"GEOID": "B", "NAMELSAD": "Census Tract 7"}, "kent").name == "Census Tract 7"
    assert RegionRecord.from_properties({"GEOID": "C"}, "kent").name == "C"


def test_from_properties_requires_geoid() -> None:
    with pytest.raises(MalformedRecord):
        RegionRecord.from_properties({"NAME": "Nowhere"}, "kent")
    with pytest.raises(MalformedRecord):
        RegionRecord.from_properties({"GEOID": "  "}, "kent")
    with pytest.raises(MalformedRecord):
        RegionRecord.from_properties(None, "kent")


def test_attributes_are_read_only() -> None:
    record = RegionRecord.from_properties({"GEOID": 10001, "tax_change_pct": 3}, "kent")
    assert record.geoid == "10001"
    with pytest.raises(TypeError):
        record.attributes["tax_change_pct"] = 4
