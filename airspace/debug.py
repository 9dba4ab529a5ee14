"""Debug output of restriction layers.

WARNING: For local development and debugging only. Never enable in production.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

import geopandas as gpd

from airspace.config import CONSTANTS, DebugConfig
from airspace.pipeline.orchestrator import RestrictionLayers

logger = logging.getLogger(__name__)


def layer_to_gdf(collection: dict[str, Any]) -> gpd.GeoDataFrame:
    """Build a GeoDataFrame from a GeoJSON FeatureCollection.

    Nested property values (dicts, lists) are JSON-encoded because GeoPackage
    columns are scalar.
    """
    features = [
        {
            **item,
            "properties": {
                key: json.dumps(value) if isinstance(value, dict | list) else value
                for key, value in (item.get("properties") or {}).items()
            },
        }
        for item in collection["features"]
    ]
    if not features:
        return gpd.GeoDataFrame(geometry=[], crs=CONSTANTS.CRS_WGS84)
    return gpd.GeoDataFrame.from_features(features, crs=CONSTANTS.CRS_WGS84)


def save_debug_layers(
    layers: RestrictionLayers,
    request_id: str,
    config: DebugConfig,
) -> None:
    """Save each non-empty layer to a GeoPackage if debug output is enabled.

    Args:
        layers: Computed restriction layers
        request_id: Identifier used to organise output
        config: Debug configuration
    """
    if not config.enabled:
        return

    output_dir = config.output_dir / request_id
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%H%M%S")

    for name, collection in layers.to_geojson().items():
        gdf = layer_to_gdf(collection)
        if gdf.empty:
            logger.debug(f"Skipping empty debug layer {name}")
            continue

        output_path = output_dir / f"{timestamp}_{name}.gpkg"
        try:
            gdf.to_file(output_path, driver="GPKG")
            logger.debug(f"Saved debug output: {output_path} ({len(gdf)} features)")
        except Exception as e:
            logger.warning(f"Failed to save debug output {name}: {e}")
