"""Command line interface.

Usage:
    airspace compute --lat 37.7749 --lng -122.4194 --radius 1 restrictions.geojson
    airspace fetch --lat 37.7749 --lng -122.4194 --radius 1
    airspace serve --port 8085
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from airspace.common.tracing import new_request_id
from airspace.config import DebugConfig, SourceConfig
from airspace.debug import save_debug_layers
from airspace.main import configure_logging, run_server
from airspace.models.domain import Coordinate
from airspace.models.enums import DistanceUnit
from airspace.pipeline.orchestrator import RestrictionLayers, RestrictionPipeline
from airspace.sources.base import StaticRestrictionSource
from airspace.sources.faa import FaaFacilityMapSource
from airspace.units import to_miles
from airspace.validation.errors import InvalidInputError

logger = logging.getLogger(__name__)

app = typer.Typer(help="Compute drone airspace restriction layers")

LatOption = Annotated[float, typer.Option(help="Latitude of the search centre")]
LngOption = Annotated[float, typer.Option(help="Longitude of the search centre")]
RadiusOption = Annotated[float, typer.Option(help="Search radius")]
UnitsOption = Annotated[DistanceUnit, typer.Option(help="Unit of --radius")]
OutputOption = Annotated[
    Path | None, typer.Option("--output", "-o", help="Write the layers JSON here instead of stdout")
]


def _emit(layers: RestrictionLayers, output: Path | None) -> None:
    payload = json.dumps(layers.to_geojson(), indent=2)
    if output is None:
        typer.echo(payload)
    else:
        output.write_text(payload)
        typer.secho(f"Wrote restriction layers to {output}", fg=typer.colors.GREEN, err=True)

    save_debug_layers(layers, new_request_id(), DebugConfig.from_env())


def _run(
    pipeline: RestrictionPipeline, center: Coordinate, radius_miles: float
) -> RestrictionLayers:
    try:
        return asyncio.run(pipeline.run_async(center, radius_miles))
    except InvalidInputError as e:
        typer.secho(f"Invalid request: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e


@app.command()
def compute(
    restrictions_file: Annotated[
        Path,
        typer.Argument(help="GeoJSON FeatureCollection of raw restrictions", exists=True),
    ],
    lat: LatOption,
    lng: LngOption,
    radius: RadiusOption,
    units: UnitsOption = DistanceUnit.MILES,
    output: OutputOption = None,
) -> None:
    """Compute layers from restrictions stored in a GeoJSON file."""
    configure_logging()
    source = StaticRestrictionSource.from_file(restrictions_file)
    pipeline = RestrictionPipeline(source=source)
    layers = _run(pipeline, Coordinate(lng=lng, lat=lat), to_miles(radius, units))
    _emit(layers, output)


@app.command()
def fetch(
    lat: LatOption,
    lng: LngOption,
    radius: RadiusOption,
    units: UnitsOption = DistanceUnit.MILES,
    output: OutputOption = None,
) -> None:
    """Compute layers from restrictions fetched from the FAA UAS Facility Map."""
    configure_logging()
    pipeline = RestrictionPipeline(source=FaaFacilityMapSource(SourceConfig()))
    layers = _run(pipeline, Coordinate(lng=lng, lat=lat), to_miles(radius, units))
    _emit(layers, output)


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Interface to bind")] = None,
    port: Annotated[int | None, typer.Option(help="Port to listen on")] = None,
) -> None:
    """Run the HTTP API."""
    configure_logging()
    run_server(host=host, port=port)


if __name__ == "__main__":
    app()
