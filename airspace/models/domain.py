"""Core domain models for the restriction geometry pipeline.

These models represent restriction records and derived layers as immutable
value objects. Geometry is carried as shapely objects restricted to the
Polygon / MultiPolygon variants (GeometryCollection is admitted only so the
facility merger can drop it explicitly).

Coordinates are always ``(longitude, latitude)`` in WGS84 degrees.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon

from airspace.models.enums import GeometryKind
from airspace.spatial.geojson import feature, geometry_from_geojson

UNKNOWN_FACILITY = "unknown"
CLIPPED_NOTE = "Clipped to search area"


class Coordinate(BaseModel):
    """A WGS84 position, longitude first.

    Range checks live in airspace.validation.request so that out-of-range
    input surfaces as InvalidCoordinate rather than a pydantic error.
    """

    model_config = ConfigDict(frozen=True)

    lng: float = Field(description="Longitude in degrees")
    lat: float = Field(description="Latitude in degrees")

    def as_tuple(self) -> tuple[float, float]:
        return (self.lng, self.lat)


class RestrictionRecord(BaseModel):
    """A raw or merged restriction polygon with its opaque property bag.

    Attributes:
        geometry: Restriction footprint
        properties: Authority, category, severity and textual metadata.
            Carried through the pipeline untouched except where the
            facility merger or clipper explicitly amend it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    geometry: Polygon | MultiPolygon | GeometryCollection
    properties: dict[str, Any] = Field(default_factory=dict)

    @property
    def geometry_kind(self) -> GeometryKind:
        return GeometryKind(self.geometry.geom_type)

    @property
    def is_polygonal(self) -> bool:
        return self.geometry_kind is not GeometryKind.COLLECTION

    @property
    def facility_key(self) -> str:
        """Grouping key: facility, then grid ID, then "unknown"."""
        for key in ("facility", "gridId"):
            value = self.properties.get(key)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                return text
        return UNKNOWN_FACILITY

    @property
    def identifier(self) -> str:
        """Best available human-readable identifier, used in logs."""
        return str(self.properties.get("id") or self.facility_key)

    @property
    def notes(self) -> str:
        return str(self.properties.get("notes") or "")

    @classmethod
    def from_feature(cls, geojson_feature: dict[str, Any]) -> "RestrictionRecord":
        """Build a record from a GeoJSON Feature.

        Raises:
            UnsupportedGeometryKind: If the feature geometry is missing or is
                not a Polygon, MultiPolygon or GeometryCollection
        """
        geometry = geometry_from_geojson(geojson_feature.get("geometry"))
        properties = dict(geojson_feature.get("properties") or {})
        return cls(geometry=geometry, properties=properties)

    def to_feature(self) -> dict[str, Any]:
        return feature(self.geometry, self.properties)


class ClippedRestriction(RestrictionRecord):
    """A restriction intersected with the search area.

    ``clipped`` marks provenance; the ``notes`` property has been amended
    (not replaced) with a clipping annotation by the AreaClipper.
    """

    clipped: bool = True

    def to_feature(self) -> dict[str, Any]:
        properties = dict(self.properties)
        properties["clipped"] = self.clipped
        return feature(self.geometry, properties)


def append_note(existing: str | None, note: str) -> str:
    """Append ``note`` to an existing notes string without discarding it."""
    if not existing:
        return note
    return f"{existing}; {note}"
