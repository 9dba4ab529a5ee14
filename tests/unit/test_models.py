"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError
from shapely.geometry import GeometryCollection, Point, box

from airspace.models.domain import (
    CLIPPED_NOTE,
    UNKNOWN_FACILITY,
    ClippedRestriction,
    Coordinate,
    RestrictionRecord,
    append_note,
)
from airspace.models.enums import DistanceUnit, GeometryKind
from airspace.models.request import RestrictionRequest
from airspace.validation.errors import UnsupportedGeometryKind


def test_coordinate_is_frozen():
    coordinate = Coordinate(lng=1.0, lat=2.0)

    with pytest.raises(ValidationError):
        coordinate.lat = 3.0

    assert coordinate.as_tuple() == (1.0, 2.0)


def test_record_rejects_point_geometry():
    with pytest.raises(ValidationError):
        RestrictionRecord(geometry=Point(0, 0), properties={})


def test_record_geometry_kind():
    assert RestrictionRecord(geometry=box(0, 0, 1, 1)).geometry_kind is GeometryKind.POLYGON
    collection = RestrictionRecord(geometry=GeometryCollection([box(0, 0, 1, 1)]))
    assert not collection.is_polygonal


@pytest.mark.parametrize(
    ("properties", "expected"),
    [
        ({"facility": " KSFO ", "gridId": "G1"}, "KSFO"),
        ({"facility": "", "gridId": "G1"}, "G1"),
        ({"gridId": 42}, "42"),
        ({}, UNKNOWN_FACILITY),
    ],
)
def test_facility_key(properties, expected):
    assert RestrictionRecord(geometry=box(0, 0, 1, 1), properties=properties).facility_key == expected


def test_from_feature_and_to_feature():
    feature = {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
        "properties": {"id": "r1", "facility": "F"},
    }

    record = RestrictionRecord.from_feature(feature)

    assert record.identifier == "r1"
    assert record.to_feature()["properties"] == {"id": "r1", "facility": "F"}
    assert record.to_feature()["geometry"]["type"] == "Polygon"


def test_from_feature_rejects_points():
    feature = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}}

    with pytest.raises(UnsupportedGeometryKind):
        RestrictionRecord.from_feature(feature)


def test_clipped_restriction_feature_marks_clipped():
    clipped = ClippedRestriction(geometry=box(0, 0, 1, 1), properties={"notes": CLIPPED_NOTE})

    assert clipped.to_feature()["properties"]["clipped"] is True
    assert "clipped" not in clipped.properties


def test_append_note():
    assert append_note("", CLIPPED_NOTE) == CLIPPED_NOTE
    assert append_note(None, CLIPPED_NOTE) == CLIPPED_NOTE
    assert append_note("Class B", CLIPPED_NOTE) == f"Class B; {CLIPPED_NOTE}"


def test_request_defaults_to_miles():
    request = RestrictionRequest(lat=1.0, lng=2.0, radius=3.0)

    assert request.units is DistanceUnit.MILES
