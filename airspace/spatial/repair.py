"""Validity repair for restriction geometry.

Before any boolean operation each input is checked ring by ring:
- a degenerate outer ring (zero area, collapsed after repair) excludes its
  whole polygon from the operation
- a degenerate hole is dropped from its parent polygon
- self-intersecting rings are repaired with shapely's make_valid, keeping
  only the polygonal parts of the result

Repair never touches the other operand of an operation.
"""

import logging

from shapely import set_precision
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.validation import explain_validity, make_valid

from airspace.validation.errors import UnsupportedGeometryKind

logger = logging.getLogger(__name__)


def repair_geometry(
    geometry: BaseGeometry | None,
    min_area: float = 0.0,
) -> Polygon | MultiPolygon | None:
    """Repair a Polygon or MultiPolygon for use in a boolean operation.

    Args:
        geometry: Input geometry
        min_area: Planar area at or below which a polygon is degenerate

    Returns:
        Valid Polygon or MultiPolygon, or None if every part is degenerate

    Raises:
        UnsupportedGeometryKind: If the geometry is not a Polygon or MultiPolygon
    """
    if geometry is None:
        return None

    if isinstance(geometry, Polygon):
        parts = [geometry]
    elif isinstance(geometry, MultiPolygon):
        parts = list(geometry.geoms)
    else:
        raise UnsupportedGeometryKind(geometry.geom_type)

    # Fast path: most published polygons are already valid
    if geometry.is_valid and geometry.area > min_area:
        if all(part.area > min_area for part in parts):
            return geometry

    repaired: list[Polygon] = []
    for part in parts:
        repaired.extend(repair_polygon(part, min_area=min_area))

    if not repaired:
        return None
    if len(repaired) == 1:
        return repaired[0]

    # Parts repaired independently may now overlap
    return as_polygonal(polygonal_parts(unary_union(repaired)), min_area=min_area)


def repair_polygon(polygon: Polygon, min_area: float = 0.0) -> list[Polygon]:
    """Repair a single polygon ring by ring.

    Returns:
        Zero or more valid polygons (zero when the outer ring is degenerate)
    """
    if polygon.is_empty:
        return []

    if polygon.is_valid and polygon.area > min_area:
        return [polygon]

    shell_parts = _repair_ring(Polygon(polygon.exterior), min_area)
    if not shell_parts:
        logger.debug(f"Excluding polygon with degenerate outer ring: {explain_validity(polygon)}")
        return []

    hole_parts: list[Polygon] = []
    for interior in polygon.interiors:
        repaired_hole = _repair_ring(Polygon(interior), min_area)
        if not repaired_hole:
            logger.debug("Dropping degenerate hole")
            continue
        hole_parts.extend(repaired_hole)

    shell = unary_union(shell_parts)
    if hole_parts:
        shell = shell.difference(unary_union(hole_parts))

    return [part for part in polygonal_parts(shell) if part.area > min_area]


def _repair_ring(ring_polygon: Polygon, min_area: float) -> list[Polygon]:
    """Repair a hole-free polygon built from a single ring."""
    if ring_polygon.is_valid:
        return [ring_polygon] if ring_polygon.area > min_area else []
    return [part for part in polygonal_parts(make_valid(ring_polygon)) if part.area > min_area]


def polygonal_parts(geometry: BaseGeometry | None) -> list[Polygon]:
    """Flatten a geometry into its non-empty Polygon parts.

    Lines and points (e.g. collapsed slivers produced by make_valid or by
    boolean operations on touching inputs) are discarded.
    """
    if geometry is None or geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        return [part for member in geometry.geoms for part in polygonal_parts(member)]
    return []


def as_polygonal(parts: list[Polygon], min_area: float = 0.0) -> Polygon | MultiPolygon | None:
    """Collapse polygon parts into a Polygon, a MultiPolygon, or None."""
    kept = [part for part in parts if part.area > min_area]
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return MultiPolygon(kept)


def apply_precision(
    geometry: Polygon | MultiPolygon | None,
    grid_size: float = 0.0,
) -> Polygon | MultiPolygon | None:
    """Snap coordinates to a grid (degrees). A grid size of 0 is a no-op.

    Note:
        Snapping may slightly modify coordinates and areas. Use the same
        grid_size for every operation in a request.
    """
    if geometry is None or grid_size <= 0:
        return geometry
    return set_precision(geometry, grid_size=grid_size)
