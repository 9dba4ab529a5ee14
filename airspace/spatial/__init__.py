"""Spatial operations for restriction analysis.

This package provides:
- GeometryKernel (airspace.spatial.kernel): geodesic disk, union,
  intersection, difference
- Validity repair of restriction geometry
- GeoJSON boundary conversion (longitude-first)
- Explicit outcome types for per-operation fallback policy

Commonly used exports:
- repair_geometry: Repair a Polygon/MultiPolygon, None when degenerate
- polygonal_parts: Flatten any geometry to its Polygon parts
- apply_precision: Snap coordinates to a grid
- geometry_from_geojson: GeoJSON mapping to shapely geometry
- feature / feature_collection: GeoJSON builders
- run_with_fallback / OpResult / OpStatus: fallback policy

Note: GeometryKernel is imported from airspace.spatial.kernel directly;
it depends on the domain models, which depend on this package.
"""

from airspace.spatial.geojson import (
    feature,
    feature_collection,
    geometry_from_geojson,
    geometry_to_geojson,
)
from airspace.spatial.repair import (
    apply_precision,
    as_polygonal,
    polygonal_parts,
    repair_geometry,
)
from airspace.spatial.results import OpResult, OpStatus, run_with_fallback

__all__ = [
    "repair_geometry",
    "polygonal_parts",
    "as_polygonal",
    "apply_precision",
    "geometry_from_geojson",
    "geometry_to_geojson",
    "feature",
    "feature_collection",
    "OpResult",
    "OpStatus",
    "run_with_fallback",
]
