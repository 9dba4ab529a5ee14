"""Restriction data sources.

- RestrictionSource: protocol every source implements
- StaticRestrictionSource: fixed records (GeoJSON files, tests)
- FaaFacilityMapSource: FAA UAS Facility Map ArcGIS service
- fetch_with_timeout: deadline wrapper that degrades to no restrictions
"""

from airspace.sources.base import (
    RestrictionSource,
    StaticRestrictionSource,
    fetch_with_timeout,
    records_from_features,
)
from airspace.sources.faa import FaaFacilityMapSource

__all__ = [
    "RestrictionSource",
    "StaticRestrictionSource",
    "FaaFacilityMapSource",
    "fetch_with_timeout",
    "records_from_features",
]
