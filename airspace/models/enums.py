"""Enumerations shared by restriction records, API payloads and the pipeline."""

from enum import StrEnum


class RestrictionCategory(StrEnum):
    """Category of authority responsible for a restriction."""

    FAA = "FAA"
    STATE = "STATE"
    CITY = "CITY"
    PRIVATE = "PRIVATE"


class RestrictionType(StrEnum):
    """Severity of a restriction."""

    NO_FLY = "NO_FLY"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    ADVISORY = "ADVISORY"


class ConfidenceLevel(StrEnum):
    """Confidence in the accuracy of a layer's data."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class GeometryKind(StrEnum):
    """Geometry variants a RestrictionRecord may carry.

    Only POLYGON and MULTIPOLYGON take part in boolean operations;
    COLLECTION records are excluded by the facility merger and the clipper.
    """

    POLYGON = "Polygon"
    MULTIPOLYGON = "MultiPolygon"
    COLLECTION = "GeometryCollection"


class DistanceUnit(StrEnum):
    """Radius units accepted at the HTTP/CLI boundary."""

    MILES = "miles"
    KILOMETERS = "kilometers"
    METERS = "meters"
    FEET = "feet"
