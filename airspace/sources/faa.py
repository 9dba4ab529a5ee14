"""FAA UAS Facility Map restriction source.

Queries the FAA UAS Facility Map ArcGIS FeatureServer for the grid cells
intersecting an envelope around the search disk and maps the ESRI JSON
response to restriction records.
"""

import logging
from typing import Any

import httpx
from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import LinearRing, MultiPolygon, Polygon

from airspace.config import SourceConfig
from airspace.models.domain import Coordinate, RestrictionRecord
from airspace.models.enums import ConfidenceLevel, RestrictionCategory, RestrictionType
from airspace.spatial.geojson import MIN_RING_COORDS, close_ring
from airspace.units import miles_to_metres

logger = logging.getLogger(__name__)

FAA_AUTHORITY = "Federal Aviation Administration"
FAA_SOURCE = "FAA UAS Facility Map"
FAA_FALLBACK_URL = "https://www.faa.gov/uas/"
USER_AGENT = "airspace-restrictions/1.0"


class FaaFacilityMapSource:
    """Fetches FAA UAS Facility Map grids around a search centre."""

    def __init__(self, config: SourceConfig | None = None):
        self.config = config or SourceConfig()
        self._geod = Geod(ellps="WGS84")

    async def fetch(self, center: Coordinate, radius_miles: float) -> list[RestrictionRecord]:
        """Fetch and map every grid intersecting the search envelope.

        HTTP and decoding failures are logged and yield whatever pages were
        already retrieved (usually an empty list).
        """
        envelope = self.envelope(center, radius_miles)
        esri_features: list[dict[str, Any]] = []

        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds, headers={"User-Agent": USER_AGENT}
        ) as client:
            for page in range(self.config.max_pages):
                params = self._query_params(envelope, offset=page * self.config.page_size)
                try:
                    response = await client.get(self.config.api_url, params=params)
                    response.raise_for_status()
                    payload = response.json()
                except httpx.TimeoutException as e:
                    logger.warning(f"FAA Facility Map request timed out: {e}")
                    break
                except httpx.HTTPStatusError as e:
                    logger.warning(f"FAA Facility Map returned HTTP {e.response.status_code}")
                    break
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning(f"FAA Facility Map request failed: {e}")
                    break

                if "error" in payload:
                    logger.warning(f"FAA Facility Map query error: {payload['error']}")
                    break

                esri_features.extend(payload.get("features") or [])
                if not payload.get("exceededTransferLimit"):
                    break
            else:
                logger.warning(
                    f"FAA Facility Map results truncated after {self.config.max_pages} pages"
                )

        records = [
            record
            for record in (esri_feature_to_record(item) for item in esri_features)
            if record is not None
        ]
        logger.info(f"FAA Facility Map returned {len(esri_features)} grids, {len(records)} usable")
        return records

    def envelope(
        self, center: Coordinate, radius_miles: float
    ) -> tuple[float, float, float, float]:
        """Bounding envelope ``(min_lng, min_lat, max_lng, max_lat)`` of the search disk."""
        distance_m = miles_to_metres(radius_miles * self.config.envelope_expansion)
        lngs, lats, _ = self._geod.fwd(
            [center.lng] * 4, [center.lat] * 4, [0.0, 90.0, 180.0, 270.0], [distance_m] * 4
        )
        return (min(lngs), min(lats), max(lngs), max(lats))

    def _query_params(
        self, envelope: tuple[float, float, float, float], offset: int
    ) -> dict[str, str]:
        return {
            "f": "json",
            "geometry": ",".join(f"{value:.6f}" for value in envelope),
            "geometryType": "esriGeometryEnvelope",
            "inSR": "4326",
            "spatialRel": "esriSpatialRelIntersects",
            "outFields": "*",
            "returnGeometry": "true",
            "outSR": "4326",
            "resultOffset": str(offset),
            "resultRecordCount": str(self.config.page_size),
        }


def esri_feature_to_record(esri_feature: dict[str, Any]) -> RestrictionRecord | None:
    """Map one ESRI JSON feature to a restriction record.

    A grid whose rings cannot be read is skipped on its own; the other grids
    of the response are unaffected.

    Returns:
        RestrictionRecord, or None when the feature has no usable polygon geometry
    """
    attributes = esri_feature.get("attributes") or {}
    try:
        geometry = esri_rings_to_geometry((esri_feature.get("geometry") or {}).get("rings"))
    except (GEOSException, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Skipping FAA grid {attributes.get('GRID_ID')} with malformed rings: {e}")
        return None
    if geometry is None:
        logger.debug(f"Skipping FAA feature without polygon rings: {attributes.get('OBJECTID')}")
        return None

    max_agl = attributes.get("MAX_AGL", attributes.get("CEILING")) or 0
    grid_id = attributes.get("GRID_ID")
    airspace = attributes.get("AIRSPACE") or "Unknown"
    restriction_type = RestrictionType.NO_FLY if max_agl == 0 else RestrictionType.AUTH_REQUIRED

    properties = {
        "id": f"faa-{grid_id if grid_id is not None else attributes.get('OBJECTID')}",
        "category": RestrictionCategory.FAA.value,
        "type": restriction_type.value,
        "authority": FAA_AUTHORITY,
        "description": f"FAA UAS Facility Map - {airspace} - Max AGL: {max_agl}ft",
        "sourceUrl": attributes.get("UASFM_URL") or FAA_FALLBACK_URL,
        "confidenceLevel": ConfidenceLevel.HIGH.value,
        "jurisdiction": {"country": "United States"},
        "source": FAA_SOURCE,
        "maxAGL": max_agl,
        "airspace": attributes.get("AIRSPACE"),
        "facility": attributes.get("FACILITY") or attributes.get("APT1_FAAID"),
        "gridId": grid_id,
        "effectiveDate": attributes.get("EFFECTIVE") or attributes.get("LAST_EDIT"),
        "notes": "",
    }
    return RestrictionRecord(geometry=geometry, properties=properties)


def esri_rings_to_geometry(rings: list | None) -> Polygon | MultiPolygon | None:
    """Convert ESRI polygon rings to a shapely Polygon or MultiPolygon.

    ESRI stores outer rings clockwise and holes counter-clockwise in a
    single flat list; each hole is attached to the outer ring covering it.
    Rings with fewer than 4 coordinates are dropped.

    Raises:
        ValueError: If an ordinate is not numeric or not finite
        IndexError: If a vertex has fewer than two ordinates
    """
    if not rings:
        return None

    shells: list[LinearRing] = []
    holes: list[LinearRing] = []
    for ring in rings:
        coords = close_ring(ring)
        if len(coords) < MIN_RING_COORDS:
            continue
        linear_ring = LinearRing(coords)
        (holes if linear_ring.is_ccw else shells).append(linear_ring)

    if not shells:
        return None

    polygons = []
    for shell in shells:
        shell_polygon = Polygon(shell)
        interiors = [hole for hole in holes if _covers(shell_polygon, hole)]
        polygons.append(Polygon(shell, interiors))

    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)


def _covers(shell: Polygon, hole: LinearRing) -> bool:
    # Unrepaired shells may be self-intersecting; repair happens in the kernel
    try:
        return shell.covers(hole)
    except GEOSException:
        return False
