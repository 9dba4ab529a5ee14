"""Allowed-flight area calculation.

The allowed area is the search disk minus every clipped restriction,
computed by folding the disk through successive differences.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from shapely.geometry import MultiPolygon, Polygon

from airspace.models.domain import RestrictionRecord
from airspace.models.enums import ConfidenceLevel
from airspace.spatial.geojson import feature, feature_collection
from airspace.spatial.kernel import GeometryKernel
from airspace.spatial.results import run_with_fallback
from airspace.validation.errors import (
    DifferenceFailed,
    PipelineCancelled,
    UnsupportedGeometryKind,
)

logger = logging.getLogger(__name__)

SYSTEM_AUTHORITY = "System"


@dataclass(frozen=True)
class AllowedAreaResult:
    """Result of the allowed-area fold.

    Attributes:
        geometry: Remaining allowed geometry, None when fully restricted
        fully_restricted: True when the restrictions cover the whole search area
        applied: Number of restrictions subtracted
        skipped: Identifiers of restrictions skipped after a difference failure
        area_sq_meters: Geodesic area of the allowed geometry
    """

    geometry: Polygon | MultiPolygon | None
    fully_restricted: bool = False
    applied: int = 0
    skipped: tuple[str, ...] = field(default_factory=tuple)
    area_sq_meters: float = 0.0

    @property
    def properties(self) -> dict[str, Any]:
        return {
            "id": "allowed-area",
            "name": "Allowed Flight Area",
            "type": "ALLOWED",
            "authority": SYSTEM_AUTHORITY,
            "confidenceLevel": ConfidenceLevel.HIGH.value,
            "description": "Search area outside every applicable restriction",
            "restrictionsApplied": self.applied,
            "skippedRestrictions": list(self.skipped),
            "areaSqMeters": round(self.area_sq_meters, 2),
        }

    def to_feature_collection(self) -> dict[str, Any]:
        """Zero features when fully restricted, otherwise exactly one."""
        if self.geometry is None:
            return feature_collection([])
        return feature_collection([feature(self.geometry, self.properties)])


class AllowedAreaCalculator:
    """Subtracts clipped restrictions from the search area."""

    def __init__(self, kernel: GeometryKernel):
        self.kernel = kernel

    def compute(
        self,
        search_area: Polygon,
        restrictions: Sequence[RestrictionRecord],
        should_cancel: Callable[[], bool] | None = None,
    ) -> AllowedAreaResult:
        """Fold the search area through a difference with every restriction.

        Because each step only shrinks the remaining region, the result does
        not depend on restriction order.

        Args:
            search_area: Search disk
            restrictions: Clipped restrictions, processed in the given order
            should_cancel: Polled between iterations; returning True aborts

        Returns:
            AllowedAreaResult. With no restrictions the geometry is
            ``search_area`` itself.

        Raises:
            PipelineCancelled: If ``should_cancel`` returns True
        """
        if not restrictions:
            logger.info("No applicable restrictions; entire search area is allowed")
            return AllowedAreaResult(
                geometry=search_area,
                area_sq_meters=self.kernel.geodesic_area_m2(search_area),
            )

        remaining: Polygon | MultiPolygon = search_area
        skipped: list[str] = []
        applied = 0

        for restriction in restrictions:
            if should_cancel is not None and should_cancel():
                msg = f"Allowed-area calculation cancelled after {applied} restrictions"
                raise PipelineCancelled(msg)

            outcome = run_with_fallback(
                self.kernel.difference,
                remaining,
                restriction.geometry,
                fallback=remaining,
                recoverable=(DifferenceFailed, UnsupportedGeometryKind),
            )

            if outcome.is_empty:
                logger.info(
                    f"Restriction {restriction.identifier} covers the remaining area; "
                    "search area is fully restricted"
                )
                return AllowedAreaResult(
                    geometry=None,
                    fully_restricted=True,
                    applied=applied + 1,
                    skipped=tuple(skipped),
                )

            if outcome.used_fallback:
                logger.warning(
                    f"Skipping restriction {restriction.identifier} in allowed-area "
                    f"calculation: {outcome.error}"
                )
                skipped.append(restriction.identifier)
                continue

            remaining = outcome.value
            applied += 1

        logger.info(f"Allowed area computed from {applied} restrictions ({len(skipped)} skipped)")
        return AllowedAreaResult(
            geometry=remaining,
            applied=applied,
            skipped=tuple(skipped),
            area_sq_meters=self.kernel.geodesic_area_m2(remaining),
        )
