"""Geometry builders shared by the unit tests."""

from shapely.geometry import Polygon, box

from airspace.models.domain import Coordinate, RestrictionRecord

SAN_FRANCISCO = Coordinate(lng=-122.4194, lat=37.7749)


def square(center: Coordinate, half_width_deg: float, dx: float = 0.0, dy: float = 0.0) -> Polygon:
    """Axis-aligned square around ``center`` offset by (dx, dy) degrees."""
    lng, lat = center.lng + dx, center.lat + dy
    half = half_width_deg
    return box(lng - half, lat - half, lng + half, lat + half)


def make_record(geometry, **properties) -> RestrictionRecord:
    return RestrictionRecord(geometry=geometry, properties=properties)


def polygon_feature(polygon: Polygon, **properties) -> dict:
    """GeoJSON Feature for a hole-free polygon."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[list(coord) for coord in polygon.exterior.coords]],
        },
        "properties": properties,
    }


# Outer rings a real feed can send that cannot be read as coordinates
MALFORMED_RINGS = {
    "short-vertex": [[-122.42, 37.77], [-122.41], [-122.41, 37.78], [-122.42, 37.77]],
    "non-numeric": [[-122.42, 37.77], ["a", 37.77], [-122.41, 37.78], [-122.42, 37.77]],
    "nan": [[-122.42, 37.77], [float("nan"), 37.77], [-122.41, 37.78], [-122.42, 37.77]],
    "scalar-vertex": [[-122.42, 37.77], 5, [-122.41, 37.78], [-122.42, 37.77]],
}


def malformed_feature(ring: list, **properties) -> dict:
    """GeoJSON Polygon Feature whose outer ring is ``ring`` verbatim."""
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring]},
        "properties": properties,
    }
