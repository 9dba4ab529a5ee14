"""HTTP API for restriction layers.

Each feature has its own router module, assembled here into a single
FastAPI app.

Endpoints:
    GET  /health              - Health check
    POST /api/restrictions    - Search area, restrictions and allowed area
    GET  /api/docs-summary    - Endpoint description
"""

from fastapi import FastAPI

from airspace.api.health_router import router as health_router
from airspace.api.restrictions_router import router as restrictions_router
from airspace.common.tracing import TraceIdMiddleware

app = FastAPI(title="Drone Airspace Restriction API")

app.add_middleware(TraceIdMiddleware)
app.include_router(health_router)
app.include_router(restrictions_router)
