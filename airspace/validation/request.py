"""Range checks for the top-level restriction request."""

import math
from numbers import Real

from airspace.models.domain import Coordinate
from airspace.validation.errors import InvalidCoordinate, InvalidRadius


def validate_center(center: Coordinate | tuple[float, float]) -> Coordinate:
    """Coerce and range-check the search centre.

    Args:
        center: Coordinate, or a ``(longitude, latitude)`` tuple

    Returns:
        Validated Coordinate

    Raises:
        InvalidCoordinate: If either component is non-numeric, non-finite or
            outside the WGS84 range
    """
    if not isinstance(center, Coordinate):
        try:
            lng, lat = center
        except (TypeError, ValueError) as e:
            msg = "Center must be a Coordinate or a (longitude, latitude) pair"
            raise InvalidCoordinate(msg, center) from e
        if not _is_number(lng) or not _is_number(lat):
            msg = "Center longitude and latitude must be numbers"
            raise InvalidCoordinate(msg, center)
        center = Coordinate(lng=float(lng), lat=float(lat))

    if not math.isfinite(center.lat) or not -90 <= center.lat <= 90:
        msg = "Invalid latitude. Must be between -90 and 90."
        raise InvalidCoordinate(msg, center.lat)

    if not math.isfinite(center.lng) or not -180 <= center.lng <= 180:
        msg = "Invalid longitude. Must be between -180 and 180."
        raise InvalidCoordinate(msg, center.lng)

    return center


def validate_radius(radius_miles: float, max_radius_miles: float | None = None) -> float:
    """Check the search radius (statute miles).

    Raises:
        InvalidRadius: If the radius is non-numeric, non-finite, <= 0 or
            above ``max_radius_miles``
    """
    if not _is_number(radius_miles) or not math.isfinite(radius_miles):
        msg = "Invalid radius. Must be a finite number of miles."
        raise InvalidRadius(msg, radius_miles)

    if radius_miles <= 0:
        msg = "Invalid radius. Must be greater than 0."
        raise InvalidRadius(msg, radius_miles)

    if max_radius_miles is not None and radius_miles > max_radius_miles:
        msg = f"Invalid radius. Must not exceed {max_radius_miles:g} miles."
        raise InvalidRadius(msg, radius_miles)

    return float(radius_miles)


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)
