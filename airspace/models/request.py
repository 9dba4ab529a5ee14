"""Request schema for the restriction layers endpoint."""

from pydantic import BaseModel, Field

from airspace.models.enums import DistanceUnit


class RestrictionRequest(BaseModel):
    """Body of ``POST /api/restrictions``.

    Range checks are deliberately not expressed as Field constraints: they
    are applied by the pipeline so that invalid centres and radii are
    reported as validation errors with HTTP 400.

    Attributes:
        lat: Latitude of the search centre (degrees)
        lng: Longitude of the search centre (degrees)
        radius: Search radius, in ``units``
        units: Unit of ``radius``; converted to miles before entering the pipeline
    """

    lat: float = Field(..., description="Latitude (-90 to 90)")
    lng: float = Field(..., description="Longitude (-180 to 180)")
    radius: float = Field(..., description="Search radius")
    units: DistanceUnit = Field(default=DistanceUnit.MILES, description="Unit of radius")

    model_config = {
        "json_schema_extra": {
            "example": {
                "lat": 37.7749,
                "lng": -122.4194,
                "radius": 1.0,
                "units": "miles",
            }
        }
    }
