"""Immutable region records built from GeoJSON feature properties."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from core.errors import MalformedRecord

# Display name fields, in order of preference
NAME_FIELDS = ("CITY_NAME", "NAME", "NAMELSAD")


@dataclass(frozen=True)
class RegionRecord:
    """
    One region (community or tract) in a county.

    Attributes:
        geoid: Region identifier, unique within a county
        name: Display name
        county: Owning county scope
        attributes: Raw properties from the source feature (read-only)
        geometry: Feature geometry, passed through to the renderer untouched
    """

    geoid: str
    name: str
    county: str
    attributes: Mapping[str, Any] = field(default_factory=dict, repr=False, hash=False)
    geometry: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any] | None, county: str,
                        geometry: Any = None) -> "RegionRecord":
        """
        Build a record from a feature's properties.

        Raises:
            MalformedRecord: if GEOID is missing or blank
        """
        properties = dict(properties or {})
        geoid = properties.get("GEOID")
        if geoid is None or not str(geoid).strip():
            raise MalformedRecord(f"Feature in {county} has no GEOID")
        geoid = str(geoid).strip()

        name = geoid
        for name_field in NAME_FIELDS:
            candidate = properties.get(name_field)
            if candidate is not None and str(candidate).strip():
                name = str(candidate).strip()
                break

        return cls(
            geoid=geoid,
            name=name,
            county=county,
            attributes=MappingProxyType(properties),
            geometry=geometry,
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)
