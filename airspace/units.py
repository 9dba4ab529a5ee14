"""Radius unit conversion at the system boundary.

The pipeline works in statute miles only. Requests expressed in other
units are converted once, here, before entering the pipeline.
"""

from airspace.config import CONSTANTS
from airspace.models.enums import DistanceUnit

_METRES_PER_UNIT = {
    DistanceUnit.MILES: CONSTANTS.METRES_PER_MILE,
    DistanceUnit.KILOMETERS: CONSTANTS.METRES_PER_KILOMETRE,
    DistanceUnit.METERS: 1.0,
    DistanceUnit.FEET: CONSTANTS.METRES_PER_FOOT,
}


def to_miles(value: float, unit: DistanceUnit | str = DistanceUnit.MILES) -> float:
    """Convert a distance to statute miles.

    Args:
        value: Distance in ``unit``
        unit: DistanceUnit or its string value (e.g. "meters")

    Returns:
        Distance in statute miles

    Raises:
        ValueError: If ``unit`` is not a known DistanceUnit
    """
    unit = DistanceUnit(unit)
    if unit is DistanceUnit.MILES:
        return value
    return value * _METRES_PER_UNIT[unit] / CONSTANTS.METRES_PER_MILE


def miles_to_metres(value: float) -> float:
    return value * CONSTANTS.METRES_PER_MILE
