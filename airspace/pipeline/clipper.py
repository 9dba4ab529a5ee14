"""Clipping of merged restrictions to the search area."""

import logging
from collections.abc import Sequence

from shapely.geometry import Polygon

from airspace.models.domain import (
    CLIPPED_NOTE,
    ClippedRestriction,
    RestrictionRecord,
    append_note,
)
from airspace.spatial.kernel import GeometryKernel
from airspace.spatial.results import run_with_fallback
from airspace.validation.errors import IntersectionFailed, UnsupportedGeometryKind

logger = logging.getLogger(__name__)


class AreaClipper:
    """Intersects restrictions with the search area.

    - Disjoint restriction: excluded (outside the area of interest)
    - Overlapping restriction: replaced by a ClippedRestriction
    - Engine failure: original, unclipped restriction kept (over-restriction
      is preferred to under-restriction)
    - Unsupported geometry kind: excluded
    """

    def __init__(self, kernel: GeometryKernel):
        self.kernel = kernel

    def clip(
        self,
        restrictions: Sequence[RestrictionRecord],
        search_area: Polygon,
    ) -> list[RestrictionRecord]:
        """Clip every restriction to ``search_area``.

        Returns:
            ClippedRestriction instances, plus any original records kept
            as a fallback after an intersection failure
        """
        clipped: list[RestrictionRecord] = []
        excluded = 0

        for restriction in restrictions:
            try:
                outcome = run_with_fallback(
                    self.kernel.intersect,
                    restriction.geometry,
                    search_area,
                    fallback=restriction,
                    recoverable=(IntersectionFailed,),
                )
            except UnsupportedGeometryKind as e:
                logger.warning(f"Excluding restriction {restriction.identifier}: {e}")
                excluded += 1
                continue

            if outcome.is_empty:
                excluded += 1
                continue

            if outcome.used_fallback:
                logger.warning(
                    f"Clipping failed for restriction {restriction.identifier} "
                    f"({outcome.error}); keeping unclipped geometry"
                )
                clipped.append(restriction)
                continue

            clipped.append(self._annotate(restriction, outcome.value))

        logger.info(
            f"Clipped {len(restrictions)} restrictions to search area: "
            f"{len(clipped)} kept, {excluded} outside"
        )
        return clipped

    def _annotate(self, restriction: RestrictionRecord, geometry) -> ClippedRestriction:
        properties = dict(restriction.properties)
        properties["notes"] = append_note(restriction.notes, CLIPPED_NOTE)
        properties["clippedAreaSqMeters"] = round(self.kernel.geodesic_area_m2(geometry), 2)
        return ClippedRestriction(geometry=geometry, properties=properties)
