"""Facility merging.

Groups raw restriction records by owning facility and reduces each group
to a single (possibly multi-part) record via GeometryKernel.union.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from numbers import Real
from typing import Any

from airspace.models.domain import RestrictionRecord
from airspace.spatial.kernel import GeometryKernel
from airspace.spatial.results import run_with_fallback
from airspace.validation.errors import UnionFailed, UnsupportedGeometryKind

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unnamed Airspace"
DEFAULT_CATEGORY = "FAA"
DEFAULT_TYPE = "AUTH_REQUIRED"
DEFAULT_SOURCE = "FAA UAS Facility Map"

# Altitude ceilings: the highest value across a facility's grids is kept
ALTITUDE_LIMIT_FIELDS = ("maxAGL", "altitudeMax", "ceiling")


def group_by_facility(records: Sequence[RestrictionRecord]) -> dict[str, list[RestrictionRecord]]:
    """Group records by facility key, preserving first-seen order."""
    groups: dict[str, list[RestrictionRecord]] = {}
    for record in records:
        groups.setdefault(record.facility_key, []).append(record)
    return groups


class FacilityMerger:
    """Merges same-facility restriction polygons into one record per facility."""

    def __init__(self, kernel: GeometryKernel):
        self.kernel = kernel

    def merge(self, records: Sequence[RestrictionRecord]) -> list[RestrictionRecord]:
        """Merge records so that each facility key maps to one record.

        The only exception is a facility whose union fails: its original
        members are re-emitted unmerged so that no restriction is lost.

        Args:
            records: Raw restriction records

        Returns:
            Merged records in first-seen facility order
        """
        groups = group_by_facility(records)
        merged: list[RestrictionRecord] = []

        for facility, members in groups.items():
            merged.extend(self._merge_group(facility, members))

        logger.info(
            f"Merged {len(records)} restriction records into {len(merged)} "
            f"across {len(groups)} facilities"
        )
        return merged

    def _merge_group(
        self, facility: str, members: list[RestrictionRecord]
    ) -> list[RestrictionRecord]:
        if len(members) == 1:
            return members

        survivors = []
        for member in members:
            if not member.is_polygonal:
                logger.warning(
                    f"Facility {facility}: dropping {member.identifier} "
                    f"({member.geometry_kind.value} cannot be unioned)"
                )
                continue
            survivors.append(member)

        if not survivors:
            logger.warning(f"Facility {facility}: no mergeable geometry remains, dropping facility")
            return []

        if len(survivors) == 1:
            return survivors

        outcome = run_with_fallback(
            self.kernel.union,
            [member.geometry for member in survivors],
            fallback=None,
            recoverable=(UnionFailed, UnsupportedGeometryKind),
        )
        if not outcome.succeeded:
            logger.warning(
                f"Facility {facility}: union of {len(survivors)} grids failed "
                f"({outcome.error}); keeping original records"
            )
            return survivors

        logger.debug(f"Facility {facility}: merged {len(survivors)} grids")
        return [
            RestrictionRecord(
                geometry=outcome.value,
                properties=merged_properties(facility, survivors),
            )
        ]


def merged_properties(facility: str, members: Sequence[RestrictionRecord]) -> dict[str, Any]:
    """Build the property bag of a merged facility record.

    Starts from the first member's properties, stamps the facility key,
    fills fixed defaults for missing descriptive fields and, for each
    altitude-limit field, keeps the value of the member whose limit is
    numerically highest (as that member wrote it, e.g. "400" stays a string).
    """
    properties = dict(members[0].properties)
    properties["facility"] = facility

    for key, default in (
        ("name", DEFAULT_NAME),
        ("category", DEFAULT_CATEGORY),
        ("type", DEFAULT_TYPE),
        ("source", DEFAULT_SOURCE),
        ("notes", ""),
    ):
        if _is_absent(properties.get(key)):
            properties[key] = default

    for key in ALTITUDE_LIMIT_FIELDS:
        highest = _highest_limit(member.properties.get(key) for member in members)
        if highest is not None:
            properties[key] = highest

    properties["mergedCount"] = len(members)
    grid_ids = [
        member.properties["gridId"]
        for member in members
        if not _is_absent(member.properties.get("gridId"))
    ]
    if grid_ids:
        properties["mergedGridIds"] = grid_ids

    return properties


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _highest_limit(values: Iterable[Any]) -> Any:
    """Original value of the numerically highest limit (None if none is numeric)."""
    best_number = None
    best_value = None
    for value in values:
        number = _as_number(value)
        if number is not None and (best_number is None or number > best_number):
            best_number, best_value = number, value
    return best_value


def _as_number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
