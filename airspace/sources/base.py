"""Restriction source protocol and in-memory implementation.

A restriction source is the only asynchronous collaborator of the pipeline.
The pipeline never generates restrictions itself; it is always handed
records fetched by a source.
"""

import asyncio
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from airspace.models.domain import Coordinate, RestrictionRecord
from airspace.validation.errors import UnsupportedGeometryKind

logger = logging.getLogger(__name__)


class RestrictionSource(Protocol):
    """Protocol for restriction data providers (FAA, city GIS, fixtures...)."""

    async def fetch(self, center: Coordinate, radius_miles: float) -> list[RestrictionRecord]:
        """Return raw restriction records around ``center``.

        Implementations may fail or hang; callers wrap them with
        fetch_with_timeout.
        """
        ...


def records_from_features(features: Iterable[dict[str, Any]]) -> list[RestrictionRecord]:
    """Convert GeoJSON Features to records, excluding unsupported geometry."""
    records = []
    for index, geojson_feature in enumerate(features):
        try:
            records.append(RestrictionRecord.from_feature(geojson_feature))
        except UnsupportedGeometryKind as e:
            feature_id = (geojson_feature.get("properties") or {}).get("id", index)
            logger.warning(f"Excluding raw restriction {feature_id}: {e}")
    return records


class StaticRestrictionSource:
    """Serves a fixed set of records regardless of the query.

    Used by the CLI (GeoJSON file input) and in tests.
    """

    def __init__(self, records: Iterable[RestrictionRecord]):
        self.records = list(records)

    @classmethod
    def from_feature_collection(cls, collection: dict[str, Any]) -> "StaticRestrictionSource":
        return cls(records_from_features(collection.get("features") or []))

    @classmethod
    def from_file(cls, path: Path) -> "StaticRestrictionSource":
        with open(path, encoding="utf-8") as f:
            return cls.from_feature_collection(json.load(f))

    async def fetch(self, center: Coordinate, radius_miles: float) -> list[RestrictionRecord]:
        return list(self.records)


async def fetch_with_timeout(
    source: RestrictionSource,
    center: Coordinate,
    radius_miles: float,
    timeout_seconds: float,
) -> list[RestrictionRecord]:
    """Fetch raw restrictions, degrading to an empty list on timeout or error.

    An empty list makes the pipeline report the entire search area as
    allowed; a failed fetch never fails the request. Cancellation of the
    surrounding task is propagated.
    """
    try:
        records = await asyncio.wait_for(
            source.fetch(center, radius_miles), timeout=timeout_seconds
        )
    except TimeoutError:
        logger.warning(
            f"Restriction fetch timed out after {timeout_seconds:g}s; "
            "continuing with no restrictions"
        )
        return []
    except Exception as e:
        logger.warning(f"Restriction fetch failed ({e}); continuing with no restrictions")
        return []

    logger.info(f"Fetched {len(records)} raw restriction records")
    return list(records)
