"""Configuration and constants for the airspace restriction service.

This module defines the tunable parameters of the restriction geometry
pipeline and its collaborators.

Includes configuration for:
- Geometry kernel (GeometryConfig with GEOM_ prefix)
- FAA UAS Facility Map source (SourceConfig with FAA_ prefix)
- Pipeline orchestration (PipelineConfig with PIPELINE_ prefix)
- HTTP API server (ApiServerConfig with API_ prefix)

Configuration can be overridden via:
1. Environment variables (e.g., GEOM_BUFFER_SEGMENTS=128, FAA_TIMEOUT_SECONDS=5)
2. .env file in the current directory
3. Default values in code
"""

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class PhysicalConstants:
    """Unit conversion factors and reference systems.

    These are NOT configurable - they are fixed conversion factors that
    should never vary. Radii are carried in statute miles inside the
    pipeline; these factors are only used at the edges.
    """

    CRS_WGS84: str = "EPSG:4326"

    METRES_PER_MILE: float = 1609.344
    METRES_PER_FOOT: float = 0.3048
    METRES_PER_KILOMETRE: float = 1_000.0
    FEET_PER_MILE: float = 5_280.0


# Module-level singleton for physical constants
CONSTANTS = PhysicalConstants()


class GeometryConfig(BaseSettings):
    """Configuration for the geometry kernel.

    Can be overridden via environment variables with GEOM_ prefix:
    - GEOM_BUFFER_SEGMENTS
    - GEOM_PRECISION_GRID_SIZE
    - GEOM_MIN_AREA_SQ_DEG
    - GEOM_ELLIPSOID

    Attributes:
        buffer_segments: Number of vertices used to approximate the search disk
        precision_grid_size: Coordinate snapping grid in degrees (0 disables snapping)
        min_area_sq_deg: Polygons at or below this planar area are degenerate
        ellipsoid: Ellipsoid used for geodesic destination and area calculations
    """

    model_config = SettingsConfigDict(
        env_prefix="GEOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    buffer_segments: int = Field(
        default=64, ge=32, le=1024, description="Vertices in the search disk polygon"
    )
    precision_grid_size: float = Field(
        default=0.0,
        ge=0,
        description="Coordinate precision grid in degrees (0 disables snapping)",
    )
    min_area_sq_deg: float = Field(
        default=1e-14,
        ge=0,
        description="Planar area (square degrees) at or below which a polygon is degenerate",
    )
    ellipsoid: str = Field(default="WGS84", description="pyproj ellipsoid name")


DEFAULT_GEOMETRY_CONFIG = GeometryConfig()


class SourceConfig(BaseSettings):
    """Configuration for the FAA UAS Facility Map restriction source.

    Can be overridden via environment variables with FAA_ prefix:
    - FAA_API_URL
    - FAA_TIMEOUT_SECONDS
    - FAA_ENVELOPE_EXPANSION
    - FAA_PAGE_SIZE
    - FAA_MAX_PAGES
    """

    model_config = SettingsConfigDict(
        env_prefix="FAA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(
        default=(
            "https://services6.arcgis.com/ssFJjBXIUyZDrSYZ/ArcGIS/rest/services/"
            "FAA_UAS_FacilityMap_Data/FeatureServer/0/query"
        ),
        description="ArcGIS FeatureServer query endpoint",
    )
    timeout_seconds: float = Field(default=10.0, gt=0, description="HTTP timeout (seconds)")
    envelope_expansion: float = Field(
        default=1.0,
        ge=1.0,
        description="Multiplier applied to the search radius when building the query envelope",
    )
    page_size: int = Field(default=1000, ge=1, le=2000, description="Features per page")
    max_pages: int = Field(default=5, ge=1, description="Upper bound on paginated requests")

    @field_validator("api_url")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "FAA API URL cannot be empty"
            raise ValueError(msg)
        return v


class PipelineConfig(BaseSettings):
    """Configuration for request-level pipeline orchestration.

    Can be overridden via environment variables with PIPELINE_ prefix:
    - PIPELINE_FETCH_TIMEOUT_SECONDS
    - PIPELINE_MAX_RADIUS_MILES
    """

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    fetch_timeout_seconds: float = Field(
        default=12.0, gt=0, description="Deadline for the restriction fetch (seconds)"
    )
    max_radius_miles: float = Field(
        default=100.0, gt=0, description="Largest accepted search radius (statute miles)"
    )


DEFAULT_PIPELINE_CONFIG = PipelineConfig()


class ApiServerConfig(BaseSettings):
    """Configuration for the HTTP API server.

    Can be overridden via environment variables with API_ prefix:
    - API_HOST (default: 0.0.0.0)
    - API_PORT (default: 8085)
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=8085, ge=1, le=65535, description="Port for the API server")


class DebugConfig:
    """Debug output configuration.

    WARNING: For local development only. Never enable in production.
    - Adds disk I/O overhead
    - Consumes storage space
    """

    def __init__(
        self,
        enabled: bool = False,
        output_dir: Path = Path("/tmp/airspace-debug"),
    ):
        self.enabled = enabled
        self.output_dir = output_dir

    @classmethod
    def from_env(cls) -> "DebugConfig":
        return cls(
            enabled=os.environ.get("DEBUG_OUTPUT", "false").lower() == "true",
            output_dir=Path(os.environ.get("DEBUG_OUTPUT_DIR", "/tmp/airspace-debug")),
        )
