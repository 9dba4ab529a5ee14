"""Error taxonomy for the restriction geometry pipeline.

Request-level input errors propagate to the caller and reject the request.
Geometry errors are raised per operation and absorbed by the pipeline stage
that invoked the operation, which applies its declared fallback.

A search area fully covered by restrictions is not an error: the kernel
signals it by returning None from difference().
"""


class AirspaceError(Exception):
    """Base class for all errors raised by the airspace package."""


class InvalidInputError(AirspaceError):
    """Top-level request input is outside the accepted domain."""

    field: str = "input"

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.message = message
        self.value = value


class InvalidRadius(InvalidInputError):
    """Search radius is not a finite positive number within the allowed maximum."""

    field = "radius"


class InvalidCoordinate(InvalidInputError):
    """Search centre is outside the WGS84 longitude/latitude range."""

    field = "center"


class GeometryError(AirspaceError):
    """Base class for recoverable per-geometry failures."""


class UnsupportedGeometryKind(GeometryError):
    """Boolean operations are only defined over Polygon and MultiPolygon."""

    def __init__(self, kind: str):
        super().__init__(f"Unsupported geometry kind: {kind}. Expected Polygon or MultiPolygon")
        self.kind = kind


class MalformedGeometry(UnsupportedGeometryKind):
    """Polygon or MultiPolygon coordinates could not be read.

    Raised while converting GeoJSON or ESRI rings. Records carrying it are
    excluded like any other unsupported geometry.
    """

    def __init__(self, kind: str, reason: str):
        GeometryError.__init__(self, f"Malformed {kind} coordinates: {reason}")
        self.kind = kind
        self.reason = reason


class UnionFailed(GeometryError):
    """Union could not be computed (every input degenerate, or engine failure)."""


class IntersectionFailed(GeometryError):
    """Intersection raised inside the geometry engine."""


class DifferenceFailed(GeometryError):
    """Difference could not be computed (degenerate minuend, or engine failure)."""


class PipelineCancelled(AirspaceError):
    """The caller asked the pipeline to stop between restriction iterations."""
