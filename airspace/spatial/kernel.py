"""Primitive 2-D geometry operations for restriction analysis.

The kernel knows nothing about restrictions or facilities. It provides:
- buffer: great-circle disk around a point, as a many-sided polygon
- union / intersect / difference over Polygon and MultiPolygon
- validity repair of every operand before any boolean operation
- geodesic area for reporting

All boolean operations work in WGS84 degree space exactly as the input
is given - there is no reprojection. Only the search disk is built with
geodesic distances, so that it is a true disk on the ellipsoid rather than
a circle in degree space.
"""

import logging
import math
from collections.abc import Iterable

from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union

from airspace.config import DEFAULT_GEOMETRY_CONFIG, GeometryConfig
from airspace.models.domain import Coordinate
from airspace.spatial.repair import (
    apply_precision,
    as_polygonal,
    polygonal_parts,
    repair_geometry,
)
from airspace.units import miles_to_metres
from airspace.validation.errors import (
    DifferenceFailed,
    GeometryError,
    IntersectionFailed,
    InvalidRadius,
    UnionFailed,
)

logger = logging.getLogger(__name__)

Geometry = Polygon | MultiPolygon


class GeometryKernel:
    """Boolean operations and disk construction over WGS84 polygons.

    Instances hold only immutable configuration and are safe to share
    between concurrent requests.
    """

    def __init__(self, config: GeometryConfig = DEFAULT_GEOMETRY_CONFIG):
        self.config = config
        self._geod = Geod(ellps=config.ellipsoid)

    def buffer(self, center: Coordinate, radius_miles: float) -> Polygon:
        """Approximate a geodesic disk around ``center``.

        Each vertex is the forward geodesic destination from the centre at an
        evenly spaced azimuth, so every vertex lies exactly ``radius_miles``
        from the centre on the ellipsoid. The ring is oriented
        counter-clockwise (RFC 7946 exterior ring order).

        Args:
            center: Disk centre
            radius_miles: Radius in statute miles

        Returns:
            Polygon with ``config.buffer_segments`` vertices

        Raises:
            InvalidRadius: If the radius is not a finite number greater than zero
        """
        if (
            isinstance(radius_miles, bool)
            or not isinstance(radius_miles, int | float)
            or not math.isfinite(radius_miles)
            or radius_miles <= 0
        ):
            msg = (
                "Buffer radius must be a finite number of miles greater than 0, "
                f"got {radius_miles!r}"
            )
            raise InvalidRadius(msg, radius_miles)

        segments = self.config.buffer_segments
        distance_m = miles_to_metres(radius_miles)
        azimuths = [360.0 * i / segments for i in range(segments)]

        lngs, lats, _back_azimuths = self._geod.fwd(
            [center.lng] * segments,
            [center.lat] * segments,
            azimuths,
            [distance_m] * segments,
        )

        ring = list(zip(lngs, lats, strict=True))
        ring.append(ring[0])

        return orient(Polygon(ring), sign=1.0)

    def union(self, geometries: Iterable[BaseGeometry]) -> Geometry:
        """Union Polygon/MultiPolygon inputs into one geometry.

        Degenerate inputs are excluded after repair. The result is a Polygon
        when the union is a single piece, otherwise a MultiPolygon whose parts
        neither touch nor overlap.

        Raises:
            UnsupportedGeometryKind: If any input is not a Polygon or MultiPolygon
            UnionFailed: If every input is degenerate, or the engine fails
        """
        repaired = [
            geometry
            for geometry in (self._prepare(geometry, UnionFailed) for geometry in geometries)
            if geometry is not None
        ]
        if not repaired:
            msg = "Union failed: every input geometry is degenerate"
            raise UnionFailed(msg)

        try:
            result = self._finish(unary_union(repaired))
        except GEOSException as e:
            msg = f"Union failed in geometry engine: {e}"
            raise UnionFailed(msg) from e

        if result is None:
            msg = "Union failed: result has zero area"
            raise UnionFailed(msg)
        return result

    def intersect(self, a: BaseGeometry, b: BaseGeometry) -> Geometry | None:
        """Intersect two geometries.

        Returns:
            Intersection, or None when the inputs are disjoint (or one of them
            is degenerate, so it takes no part in the operation)

        Raises:
            UnsupportedGeometryKind: If either input is not a Polygon or MultiPolygon
            IntersectionFailed: If the engine fails
        """
        left = self._prepare(a, IntersectionFailed)
        right = self._prepare(b, IntersectionFailed)
        if left is None or right is None:
            return None

        try:
            if not left.intersects(right):
                return None
            return self._finish(left.intersection(right))
        except GEOSException as e:
            msg = f"Intersection failed in geometry engine: {e}"
            raise IntersectionFailed(msg) from e

    def difference(self, minuend: BaseGeometry, subtrahend: BaseGeometry) -> Geometry | None:
        """Subtract ``subtrahend`` from ``minuend``.

        Returns:
            The remaining geometry; the (repaired) minuend unchanged if the
            subtrahend is degenerate; or None when the subtrahend fully covers
            the minuend. None is a valid outcome, not a failure.

        Raises:
            UnsupportedGeometryKind: If either input is not a Polygon or MultiPolygon
            DifferenceFailed: If the minuend is degenerate, or the engine fails
        """
        left = self._prepare(minuend, DifferenceFailed)
        right = self._prepare(subtrahend, DifferenceFailed)

        if left is None:
            msg = "Difference failed: minuend is degenerate"
            raise DifferenceFailed(msg)
        if right is None:
            return left

        try:
            if not left.intersects(right):
                return left
            return self._finish(left.difference(right))
        except GEOSException as e:
            msg = f"Difference failed in geometry engine: {e}"
            raise DifferenceFailed(msg) from e

    def repair(self, geometry: BaseGeometry) -> Geometry | None:
        """Repair a geometry; None means it is degenerate.

        Raises:
            UnsupportedGeometryKind: If the input is not a Polygon or MultiPolygon
        """
        return repair_geometry(geometry, min_area=self.config.min_area_sq_deg)

    def is_degenerate(self, geometry: BaseGeometry) -> bool:
        return self.repair(geometry) is None

    def geodesic_area_m2(self, geometry: BaseGeometry | None) -> float:
        """Area on the ellipsoid in square metres (0 for None/empty)."""
        if geometry is None or geometry.is_empty:
            return 0.0
        area, _perimeter = self._geod.geometry_area_perimeter(geometry)
        return abs(area)

    def _prepare(
        self, geometry: BaseGeometry, failure: type[GeometryError]
    ) -> Geometry | None:
        """Repair and snap one operand; engine errors become ``failure``."""
        try:
            repaired = self.repair(geometry)
            snapped = apply_precision(repaired, grid_size=self.config.precision_grid_size)
            if snapped is not repaired:
                # Snapping can collapse thin parts
                snapped = as_polygonal(
                    polygonal_parts(snapped), min_area=self.config.min_area_sq_deg
                )
        except GEOSException as e:
            msg = f"Operand repair failed in geometry engine: {e}"
            raise failure(msg) from e
        return snapped

    def _finish(self, geometry: BaseGeometry) -> Geometry | None:
        snapped = apply_precision(
            as_polygonal(polygonal_parts(geometry), min_area=self.config.min_area_sq_deg),
            grid_size=self.config.precision_grid_size,
        )
        return as_polygonal(polygonal_parts(snapped), min_area=self.config.min_area_sq_deg)
