"""Domain models for restriction records and request payloads."""

from airspace.models.domain import (
    ClippedRestriction,
    Coordinate,
    RestrictionRecord,
)
from airspace.models.enums import (
    ConfidenceLevel,
    DistanceUnit,
    GeometryKind,
    RestrictionCategory,
    RestrictionType,
)
from airspace.models.request import RestrictionRequest

__all__ = [
    "Coordinate",
    "RestrictionRecord",
    "ClippedRestriction",
    "RestrictionRequest",
    "ConfidenceLevel",
    "DistanceUnit",
    "GeometryKind",
    "RestrictionCategory",
    "RestrictionType",
]
