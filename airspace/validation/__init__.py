"""Validation and error taxonomy for restriction requests and geometry.

This package provides:
1. Exception taxonomy (errors.py) - input errors (fatal to the request) and
   geometry errors (recoverable per restriction)
2. Request validation (request.py) - range checks for the search centre and radius

Note: request validators are imported from airspace.validation.request
directly; the domain models depend on this package's error types.
"""

from airspace.validation.errors import (
    AirspaceError,
    DifferenceFailed,
    GeometryError,
    IntersectionFailed,
    InvalidCoordinate,
    InvalidInputError,
    InvalidRadius,
    MalformedGeometry,
    PipelineCancelled,
    UnionFailed,
    UnsupportedGeometryKind,
)

__all__ = [
    "AirspaceError",
    "InvalidInputError",
    "InvalidRadius",
    "InvalidCoordinate",
    "GeometryError",
    "UnsupportedGeometryKind",
    "MalformedGeometry",
    "UnionFailed",
    "IntersectionFailed",
    "DifferenceFailed",
    "PipelineCancelled",
]
