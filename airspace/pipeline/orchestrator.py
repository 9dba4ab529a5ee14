"""Restriction pipeline orchestration.

Composes facility merging, clipping and the allowed-area fold:

    raw restriction records -> FacilityMerger -> AreaClipper
        -> AllowedAreaCalculator -> RestrictionLayers

compute_restriction_layers() is a pure synchronous function of already
fetched input. RestrictionPipeline adds the single asynchronous step, the
restriction fetch, with a deadline that degrades to "no restrictions".
"""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from shapely.geometry import Polygon

from airspace.config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from airspace.models.domain import Coordinate, RestrictionRecord
from airspace.models.enums import ConfidenceLevel
from airspace.pipeline.allowed import SYSTEM_AUTHORITY, AllowedAreaCalculator, AllowedAreaResult
from airspace.pipeline.clipper import AreaClipper
from airspace.pipeline.merger import FacilityMerger
from airspace.sources.base import RestrictionSource, fetch_with_timeout, records_from_features
from airspace.spatial.geojson import feature, feature_collection
from airspace.spatial.kernel import GeometryKernel
from airspace.validation.errors import PipelineCancelled
from airspace.validation.request import validate_center, validate_radius

logger = logging.getLogger(__name__)

RawRestriction = RestrictionRecord | dict[str, Any]


@dataclass(frozen=True)
class RestrictionLayers:
    """The layers returned for one request.

    Attributes:
        center: Validated search centre
        radius_miles: Search radius (statute miles)
        search_area: Search disk polygon
        restrictions: Merged and clipped restrictions
        allowed: Allowed-area fold result
    """

    center: Coordinate
    radius_miles: float
    search_area: Polygon
    restrictions: tuple[RestrictionRecord, ...]
    allowed: AllowedAreaResult
    search_area_sq_meters: float = 0.0

    def search_area_collection(self) -> dict[str, Any]:
        properties = {
            "id": "search-area",
            "name": "Search Area",
            "authority": SYSTEM_AUTHORITY,
            "confidenceLevel": ConfidenceLevel.HIGH.value,
            "center": [self.center.lng, self.center.lat],
            "radiusMiles": self.radius_miles,
            "areaSqMeters": round(self.search_area_sq_meters, 2),
        }
        return feature_collection([feature(self.search_area, properties)])

    def restrictions_collection(self) -> dict[str, Any]:
        return feature_collection([record.to_feature() for record in self.restrictions])

    def to_geojson(self) -> dict[str, dict[str, Any]]:
        """GeoJSON FeatureCollections keyed by layer name."""
        return {
            "searchArea": self.search_area_collection(),
            "restrictions": self.restrictions_collection(),
            "allowedArea": self.allowed.to_feature_collection(),
        }


def coerce_records(raw_restrictions: Sequence[RawRestriction]) -> list[RestrictionRecord]:
    """Accept records or GeoJSON Feature dicts; unsupported features are excluded."""
    records: list[RestrictionRecord] = []
    features: list[dict[str, Any]] = []
    for item in raw_restrictions:
        if isinstance(item, RestrictionRecord):
            records.append(item)
        else:
            features.append(item)
    if features:
        records.extend(records_from_features(features))
    return records


def compute_restriction_layers(
    center: Coordinate | tuple[float, float],
    radius_miles: float,
    raw_restrictions: Sequence[RawRestriction],
    kernel: GeometryKernel | None = None,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
    should_cancel: Callable[[], bool] | None = None,
) -> RestrictionLayers:
    """Compute the search area, restriction and allowed-area layers.

    Pipeline:
    1. Validate centre and radius (errors propagate to the caller)
    2. Build the geodesic search disk
    3. Merge restrictions per facility
    4. Clip merged restrictions to the search disk
    5. Subtract clipped restrictions from the disk

    Per-restriction geometry failures are absorbed by each stage's fallback
    policy; the result is always complete.

    Args:
        center: Search centre, Coordinate or ``(longitude, latitude)``
        radius_miles: Search radius in statute miles
        raw_restrictions: RestrictionRecords or GeoJSON Features
        kernel: Geometry kernel (default configuration if omitted)
        config: Pipeline configuration (maximum radius)
        should_cancel: Polled between restriction iterations

    Returns:
        RestrictionLayers

    Raises:
        InvalidRadius: If the radius is not > 0 or exceeds the maximum
        InvalidCoordinate: If the centre is outside the WGS84 range
        PipelineCancelled: If ``should_cancel`` returns True
    """
    start_time = time.perf_counter()
    center = validate_center(center)
    radius_miles = validate_radius(radius_miles, max_radius_miles=config.max_radius_miles)
    kernel = kernel or GeometryKernel()

    logger.info(
        f"Computing restriction layers: center=({center.lng:.6f}, {center.lat:.6f}) "
        f"radius={radius_miles:g}mi raw={len(raw_restrictions)}"
    )

    search_area = kernel.buffer(center, radius_miles)
    records = coerce_records(raw_restrictions)

    merged = FacilityMerger(kernel).merge(records)
    _check_cancelled(should_cancel, "merging")

    clipped = AreaClipper(kernel).clip(merged, search_area)
    _check_cancelled(should_cancel, "clipping")

    allowed = AllowedAreaCalculator(kernel).compute(
        search_area, clipped, should_cancel=should_cancel
    )

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Restriction layers computed in {elapsed:.3f}s: {len(clipped)} restrictions, "
        f"fully_restricted={allowed.fully_restricted}"
    )

    return RestrictionLayers(
        center=center,
        radius_miles=radius_miles,
        search_area=search_area,
        restrictions=tuple(clipped),
        allowed=allowed,
        search_area_sq_meters=kernel.geodesic_area_m2(search_area),
    )


def _check_cancelled(should_cancel: Callable[[], bool] | None, stage: str) -> None:
    if should_cancel is not None and should_cancel():
        msg = f"Restriction pipeline cancelled after {stage}"
        raise PipelineCancelled(msg)


class RestrictionPipeline:
    """Fetches raw restrictions and computes the restriction layers.

    Holds no per-request state; one instance may serve concurrent requests.
    """

    def __init__(
        self,
        source: RestrictionSource,
        kernel: GeometryKernel | None = None,
        config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
    ):
        self.source = source
        self.kernel = kernel or GeometryKernel()
        self.config = config

    async def fetch(
        self, center: Coordinate | tuple[float, float], radius_miles: float
    ) -> list[RestrictionRecord]:
        """Validate the request, then fetch raw restrictions under the deadline.

        Raises:
            InvalidRadius: If the radius is invalid (no fetch is attempted)
            InvalidCoordinate: If the centre is invalid (no fetch is attempted)
        """
        center = validate_center(center)
        radius_miles = validate_radius(radius_miles, max_radius_miles=self.config.max_radius_miles)
        return await fetch_with_timeout(
            self.source, center, radius_miles, timeout_seconds=self.config.fetch_timeout_seconds
        )

    def run(
        self,
        center: Coordinate | tuple[float, float],
        radius_miles: float,
        raw_restrictions: Sequence[RawRestriction],
        should_cancel: Callable[[], bool] | None = None,
    ) -> RestrictionLayers:
        return compute_restriction_layers(
            center,
            radius_miles,
            raw_restrictions,
            kernel=self.kernel,
            config=self.config,
            should_cancel=should_cancel,
        )

    async def run_async(
        self, center: Coordinate | tuple[float, float], radius_miles: float
    ) -> RestrictionLayers:
        """Fetch, then compute synchronously. The fetch is the only await."""
        raw_restrictions = await self.fetch(center, radius_miles)
        return self.run(center, radius_miles, raw_restrictions)
