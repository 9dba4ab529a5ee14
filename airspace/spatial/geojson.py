"""GeoJSON boundary conversion.

Geometry enters and leaves the pipeline as GeoJSON with ``[longitude,
latitude]`` coordinate order. This module converts between GeoJSON
mappings and shapely geometries without ever reordering axes, and rejects
geometry kinds that boolean operations are not defined over.
"""

import logging
import math
from typing import Any

from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon, mapping, shape
from shapely.geometry.base import BaseGeometry

from airspace.validation.errors import MalformedGeometry, UnsupportedGeometryKind

logger = logging.getLogger(__name__)

MIN_RING_COORDS = 4


def geometry_from_geojson(geometry: dict[str, Any] | None) -> BaseGeometry:
    """Convert a GeoJSON geometry mapping into a shapely geometry.

    Polygon and MultiPolygon rings are built explicitly so that short or
    unclosed rings in real-world data do not abort the conversion:
    - unclosed rings are closed by repeating the first coordinate
    - a hole with fewer than 4 coordinates is dropped
    - a polygon whose outer ring has fewer than 4 coordinates is dropped
      (the result may be an empty Polygon, which the kernel treats as
      degenerate)

    GeometryCollection is converted as-is so that callers can exclude it
    explicitly.

    Args:
        geometry: GeoJSON geometry mapping

    Returns:
        Polygon, MultiPolygon or GeometryCollection

    Raises:
        UnsupportedGeometryKind: For missing geometry or any other type
        MalformedGeometry: If Polygon or MultiPolygon coordinates cannot be read
    """
    if not geometry:
        raise UnsupportedGeometryKind("null")

    kind = geometry.get("type")

    if kind in ("Polygon", "MultiPolygon"):
        try:
            return _polygonal_from_coordinates(kind, geometry.get("coordinates") or [])
        except (GEOSException, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Unreadable {kind} coordinates: {e}")
            raise MalformedGeometry(kind, str(e)) from e

    if kind == "GeometryCollection":
        try:
            return shape(geometry)
        except (GEOSException, ValueError, TypeError, KeyError) as e:
            logger.warning(f"Unreadable GeometryCollection treated as unsupported: {e}")
            raise UnsupportedGeometryKind(kind) from e

    raise UnsupportedGeometryKind(str(kind))


def _polygonal_from_coordinates(kind: str, coordinates: list) -> Polygon | MultiPolygon:
    if kind == "Polygon":
        polygon = _polygon_from_rings(coordinates)
        return polygon if polygon is not None else Polygon()

    polygons = [
        polygon
        for polygon in (_polygon_from_rings(rings) for rings in coordinates)
        if polygon is not None
    ]
    return MultiPolygon(polygons) if polygons else MultiPolygon()


def _polygon_from_rings(rings: list) -> Polygon | None:
    if not rings:
        return None

    shell = close_ring(rings[0])
    if len(shell) < MIN_RING_COORDS:
        logger.debug(f"Dropping polygon with {len(shell)}-coordinate outer ring")
        return None

    holes = []
    for ring in rings[1:]:
        hole = close_ring(ring)
        if len(hole) < MIN_RING_COORDS:
            logger.debug(f"Dropping {len(hole)}-coordinate hole")
            continue
        holes.append(hole)

    return Polygon(shell, holes)


def close_ring(ring: list) -> list[tuple[float, float]]:
    """Read a ``[[lng, lat], ...]`` ring as floats, closing it if needed.

    Raises:
        IndexError: If a vertex has fewer than two ordinates
        TypeError: If a vertex is not a sequence
        ValueError: If an ordinate is not numeric or not finite
    """
    coords = []
    # Altitude (third ordinate) is discarded: the model is strictly 2-D.
    for point in ring:
        lng, lat = float(point[0]), float(point[1])
        if not (math.isfinite(lng) and math.isfinite(lat)):
            msg = f"non-finite coordinate {point!r}"
            raise ValueError(msg)
        coords.append((lng, lat))
    if coords and coords[0] != coords[-1]:
        coords.append(coords[0])
    return coords


def geometry_to_geojson(geometry: BaseGeometry) -> dict[str, Any]:
    """Render a shapely geometry as a GeoJSON mapping (longitude first)."""
    return mapping(geometry)


def feature(geometry: BaseGeometry, properties: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build a GeoJSON Feature."""
    return {
        "type": "Feature",
        "geometry": geometry_to_geojson(geometry),
        "properties": dict(properties or {}),
    }


def feature_collection(features: list[dict[str, Any]]) -> dict[str, Any]:
    """Build a GeoJSON FeatureCollection."""
    return {"type": "FeatureCollection", "features": list(features)}
