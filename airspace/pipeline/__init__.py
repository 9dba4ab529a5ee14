"""Restriction geometry pipeline.

- FacilityMerger: one record per facility via union
- AreaClipper: restrictions intersected with the search disk
- AllowedAreaCalculator: search disk minus clipped restrictions
- compute_restriction_layers / RestrictionPipeline: orchestration
"""

from airspace.pipeline.allowed import AllowedAreaCalculator, AllowedAreaResult
from airspace.pipeline.clipper import AreaClipper
from airspace.pipeline.merger import FacilityMerger, group_by_facility, merged_properties
from airspace.pipeline.orchestrator import (
    RestrictionLayers,
    RestrictionPipeline,
    compute_restriction_layers,
)

__all__ = [
    "FacilityMerger",
    "group_by_facility",
    "merged_properties",
    "AreaClipper",
    "AllowedAreaCalculator",
    "AllowedAreaResult",
    "RestrictionLayers",
    "RestrictionPipeline",
    "compute_restriction_layers",
]
