"""Unit tests for the FAA UAS Facility Map source."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from shapely.geometry import MultiPolygon, Polygon

from airspace.config import SourceConfig
from airspace.sources.faa import (
    FAA_AUTHORITY,
    FaaFacilityMapSource,
    esri_feature_to_record,
    esri_rings_to_geometry,
)
from tests.helpers import MALFORMED_RINGS

# ESRI outer rings are clockwise
CLOCKWISE_SQUARE = [
    [-122.43, 37.77],
    [-122.43, 37.78],
    [-122.42, 37.78],
    [-122.42, 37.77],
    [-122.43, 37.77],
]


def esri_feature(max_agl=100, grid_id="G1", facility="SFO", rings=None):
    return {
        "attributes": {
            "OBJECTID": 7,
            "MAX_AGL": max_agl,
            "GRID_ID": grid_id,
            "FACILITY": facility,
            "AIRSPACE": "Class B",
            "EFFECTIVE": "2024-01-01",
            "UASFM_URL": "https://example.test/uasfm",
        },
        "geometry": {"rings": rings if rings is not None else [CLOCKWISE_SQUARE]},
    }


def mock_async_client(get):
    """AsyncClient stand-in whose get() is ``get``."""
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    client.get = get
    return client


def json_response(payload):
    # raise_for_status() and json() are synchronous on httpx.Response
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json = MagicMock(return_value=payload)
    return response


def test_feature_maps_to_auth_required_record():
    record = esri_feature_to_record(esri_feature(max_agl=200))

    properties = record.properties
    assert properties["id"] == "faa-G1"
    assert properties["type"] == "AUTH_REQUIRED"
    assert properties["category"] == "FAA"
    assert properties["authority"] == FAA_AUTHORITY
    assert properties["maxAGL"] == 200
    assert properties["facility"] == "SFO"
    assert properties["gridId"] == "G1"
    assert properties["airspace"] == "Class B"
    assert properties["confidenceLevel"] == "HIGH"
    assert properties["sourceUrl"] == "https://example.test/uasfm"
    assert "Max AGL: 200ft" in properties["description"]
    assert record.facility_key == "SFO"


def test_zero_ceiling_is_no_fly():
    record = esri_feature_to_record(esri_feature(max_agl=0))

    assert record.properties["type"] == "NO_FLY"


def test_feature_without_rings_is_skipped():
    feature = esri_feature()
    feature["geometry"] = {"x": -122.4, "y": 37.7}

    assert esri_feature_to_record(feature) is None


@pytest.mark.parametrize("ring", list(MALFORMED_RINGS.values()), ids=list(MALFORMED_RINGS))
def test_grid_with_unreadable_ring_is_skipped(ring, caplog):
    with caplog.at_level(logging.WARNING, logger="airspace.sources.faa"):
        record = esri_feature_to_record(esri_feature(grid_id="BAD", rings=[ring]))

    assert record is None
    assert "BAD" in caplog.text


def test_clockwise_ring_is_shell_and_ccw_ring_is_hole():
    hole = [
        [-122.428, 37.772],
        [-122.422, 37.772],
        [-122.422, 37.778],
        [-122.428, 37.778],
        [-122.428, 37.772],
    ]

    geometry = esri_rings_to_geometry([CLOCKWISE_SQUARE, hole])

    assert isinstance(geometry, Polygon)
    assert len(geometry.interiors) == 1


def test_two_outer_rings_make_multipolygon():
    other = [[x + 1.0, y] for x, y in CLOCKWISE_SQUARE]

    geometry = esri_rings_to_geometry([CLOCKWISE_SQUARE, other])

    assert isinstance(geometry, MultiPolygon)


def test_short_rings_dropped():
    assert esri_rings_to_geometry([[[0, 0], [1, 1]]]) is None
    assert esri_rings_to_geometry([]) is None


def test_envelope_contains_search_disk(kernel, center):
    source = FaaFacilityMapSource(SourceConfig(envelope_expansion=1.0))

    min_lng, min_lat, max_lng, max_lat = source.envelope(center, 1.0)
    disk = kernel.buffer(center, 1.0)

    d_min_lng, d_min_lat, d_max_lng, d_max_lat = disk.bounds
    assert min_lng <= d_min_lng + 1e-9
    assert min_lat <= d_min_lat + 1e-9
    assert max_lng >= d_max_lng - 1e-9
    assert max_lat >= d_max_lat - 1e-9


@pytest.mark.anyio
async def test_fetch_maps_features(center):
    get = AsyncMock(return_value=json_response({"features": [esri_feature()]}))

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = mock_async_client(get)
        records = await FaaFacilityMapSource(SourceConfig()).fetch(center, 1.0)

    assert len(records) == 1
    params = get.call_args.kwargs["params"]
    assert params["geometryType"] == "esriGeometryEnvelope"
    assert params["resultOffset"] == "0"


@pytest.mark.anyio
async def test_fetch_follows_pagination(center):
    pages = [
        json_response({"features": [esri_feature(grid_id="G1")], "exceededTransferLimit": True}),
        json_response({"features": [esri_feature(grid_id="G2")]}),
    ]
    get = AsyncMock(side_effect=pages)

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = mock_async_client(get)
        records = await FaaFacilityMapSource(SourceConfig(page_size=1)).fetch(center, 1.0)

    assert [r.properties["gridId"] for r in records] == ["G1", "G2"]
    assert get.call_args_list[1].kwargs["params"]["resultOffset"] == "1"


@pytest.mark.anyio
async def test_fetch_timeout_returns_empty_and_warns(center, caplog):
    get = AsyncMock(side_effect=httpx.TimeoutException("timeout"))

    with caplog.at_level(logging.WARNING, logger="airspace.sources.faa"):
        with patch("httpx.AsyncClient") as mock_client_cls:
            mock_client_cls.return_value = mock_async_client(get)
            records = await FaaFacilityMapSource(SourceConfig()).fetch(center, 1.0)

    assert records == []
    assert "timed out" in caplog.text


@pytest.mark.anyio
async def test_fetch_http_error_returns_empty(center):
    request = httpx.Request("GET", "https://example.test")
    error_response = httpx.Response(503, request=request)
    response = MagicMock()
    response.raise_for_status = MagicMock(
        side_effect=httpx.HTTPStatusError("unavailable", request=request, response=error_response)
    )
    get = AsyncMock(return_value=response)

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = mock_async_client(get)
        records = await FaaFacilityMapSource(SourceConfig()).fetch(center, 1.0)

    assert records == []


@pytest.mark.anyio
async def test_fetch_service_error_payload_returns_empty(center):
    get = AsyncMock(return_value=json_response({"error": {"code": 400, "message": "bad query"}}))

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = mock_async_client(get)
        records = await FaaFacilityMapSource(SourceConfig()).fetch(center, 1.0)

    assert records == []


@pytest.mark.anyio
async def test_fetch_keeps_good_grids_when_one_is_malformed(center):
    payload = {
        "features": [
            esri_feature(grid_id="BAD", rings=[MALFORMED_RINGS["short-vertex"]]),
            esri_feature(grid_id="G1"),
        ]
    }
    get = AsyncMock(return_value=json_response(payload))

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = mock_async_client(get)
        records = await FaaFacilityMapSource(SourceConfig()).fetch(center, 1.0)

    assert [r.properties["gridId"] for r in records] == ["G1"]
