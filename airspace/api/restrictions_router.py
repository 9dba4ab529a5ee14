"""Restriction layers endpoint.

POST /api/restrictions computes the search area, the applicable restrictions
and the allowed-flight area for a point and radius. GET /api/docs-summary
describes the endpoint.
"""

import logging
from datetime import UTC, datetime
from functools import lru_cache

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from airspace.common.tracing import current_request_id
from airspace.config import DebugConfig, PipelineConfig
from airspace.debug import save_debug_layers
from airspace.models.domain import Coordinate
from airspace.models.request import RestrictionRequest
from airspace.pipeline.orchestrator import RestrictionPipeline
from airspace.sources.base import RestrictionSource
from airspace.sources.faa import FaaFacilityMapSource
from airspace.units import to_miles
from airspace.validation.errors import InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

API_VERSION = "1.0.0"


@lru_cache
def get_restriction_source() -> RestrictionSource:
    """Restriction source shared by all requests (overridable in tests)."""
    return FaaFacilityMapSource()


@lru_cache
def get_pipeline_config() -> PipelineConfig:
    return PipelineConfig()


def _validation_error(error: InvalidInputError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Validation Error",
            "message": error.message,
            "field": error.field,
        },
    )


@router.post("/restrictions")
async def get_restrictions(
    request: RestrictionRequest,
    source: RestrictionSource = Depends(get_restriction_source),
    config: PipelineConfig = Depends(get_pipeline_config),
):
    """Compute restriction layers for a search disk.

    The restriction fetch is awaited under the configured deadline; the
    geometry work runs in the threadpool so the event loop stays responsive.

    Returns:
        ``{"success": true, "data": {searchArea, restrictions, allowedArea},
        "metadata": {...}}``, or HTTP 400 for an invalid centre or radius
    """
    radius_miles = to_miles(request.radius, request.units)
    logger.info(
        f"Processing restriction request: lat={request.lat}, lng={request.lng}, "
        f"radius={request.radius}{request.units.value}"
    )

    request_id = current_request_id()
    pipeline = RestrictionPipeline(source=source, config=config)
    center = Coordinate(lng=request.lng, lat=request.lat)

    try:
        raw_restrictions = await pipeline.fetch(center, radius_miles)
        layers = await run_in_threadpool(pipeline.run, center, radius_miles, raw_restrictions)
    except InvalidInputError as e:
        logger.warning(f"Rejected restriction request: {e.message}")
        return _validation_error(e)

    await run_in_threadpool(save_debug_layers, layers, request_id, DebugConfig.from_env())

    return {
        "success": True,
        "data": layers.to_geojson(),
        "metadata": {
            "requestId": request_id,
            "timestamp": datetime.now(UTC).isoformat(),
            "request": request.model_dump(mode="json"),
            "radiusMiles": radius_miles,
            "restrictionCount": len(layers.restrictions),
            "fullyRestricted": layers.allowed.fully_restricted,
        },
    }


@router.get("/docs-summary")
async def docs_summary():
    """Describe the restriction endpoint and its formats."""
    return {
        "service": "Drone Flight Restriction API",
        "version": API_VERSION,
        "endpoints": {
            "POST /api/restrictions": {
                "description": "Get flight restrictions for a location and radius",
                "requestBody": {
                    "lat": "Latitude (number, -90 to 90)",
                    "lng": "Longitude (number, -180 to 180)",
                    "radius": "Search radius (number, > 0)",
                    "units": "miles (default), kilometers, meters or feet",
                },
                "response": {
                    "searchArea": "GeoJSON FeatureCollection of the search disk",
                    "restrictions": "GeoJSON FeatureCollection of merged, clipped restrictions",
                    "allowedArea": "GeoJSON FeatureCollection of the allowed-flight area",
                },
            },
            "GET /health": {"description": "Health check endpoint"},
        },
        "notes": [
            "All coordinates use WGS84 (EPSG:4326), longitude first",
            "The allowed area is empty when restrictions cover the whole search area",
        ],
    }
