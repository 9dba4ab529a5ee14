"""Unit tests for the geometry kernel."""

import math

import pytest
from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Point, Polygon, box

from airspace.config import GeometryConfig
from airspace.models.domain import Coordinate
from airspace.spatial.kernel import GeometryKernel
from airspace.validation.errors import (
    DifferenceFailed,
    IntersectionFailed,
    InvalidRadius,
    UnionFailed,
    UnsupportedGeometryKind,
)
from tests.helpers import square


def test_buffer_vertices_lie_on_the_geodesic_radius(kernel, center):
    """Every disk vertex should be exactly the radius from the centre."""
    disk = kernel.buffer(center, 2.0)
    geod = Geod(ellps="WGS84")

    for lng, lat in list(disk.exterior.coords)[:-1]:
        _, _, distance = geod.inv(center.lng, center.lat, lng, lat)
        assert distance == pytest.approx(2.0 * 1609.344, rel=1e-9)


def test_buffer_has_configured_segment_count(center):
    """Test disk resolution follows buffer_segments."""
    kernel = GeometryKernel(GeometryConfig(buffer_segments=128))

    disk = kernel.buffer(center, 1.0)

    # Closed ring repeats the first vertex
    assert len(disk.exterior.coords) == 129


def test_buffer_is_valid_and_counter_clockwise(kernel, center):
    disk = kernel.buffer(center, 1.0)

    assert disk.is_valid
    assert disk.exterior.is_ccw
    assert disk.contains(Point(center.lng, center.lat))


def test_buffer_area_close_to_circle(kernel, center):
    """Test 64-gon area is close to pi r^2 (within polygon approximation error)."""
    disk = kernel.buffer(center, 1.0)

    expected = math.pi * 1609.344**2
    assert kernel.geodesic_area_m2(disk) == pytest.approx(expected, rel=0.01)


def test_buffer_near_pole_stays_valid(kernel):
    disk = kernel.buffer(Coordinate(lng=10.0, lat=89.0), 5.0)

    assert disk.is_valid
    assert not disk.is_empty


@pytest.mark.parametrize("radius", [0, -1.0, float("nan"), float("inf")])
def test_buffer_rejects_invalid_radius(kernel, center, radius):
    with pytest.raises(InvalidRadius):
        kernel.buffer(center, radius)


def test_union_of_overlapping_squares_is_single_polygon(kernel):
    a = box(0, 0, 2, 2)
    b = box(1, 1, 3, 3)

    result = kernel.union([a, b])

    assert isinstance(result, Polygon)
    assert result.area == pytest.approx(7.0)


def test_union_of_disjoint_squares_is_multipolygon(kernel):
    result = kernel.union([box(0, 0, 1, 1), box(5, 5, 6, 6)])

    assert isinstance(result, MultiPolygon)
    assert len(result.geoms) == 2


def test_union_is_idempotent(kernel):
    """Union of N identical copies equals the polygon itself."""
    polygon = box(0, 0, 1, 1)

    result = kernel.union([polygon] * 5)

    assert result.symmetric_difference(polygon).area == pytest.approx(0.0, abs=1e-12)


def test_union_skips_degenerate_inputs(kernel):
    collapsed = Polygon([(0, 0), (1, 1), (2, 2), (0, 0)])

    result = kernel.union([collapsed, box(0, 0, 1, 1)])

    assert result.area == pytest.approx(1.0)


def test_union_fails_when_every_input_is_degenerate(kernel):
    collapsed = Polygon([(0, 0), (1, 1), (2, 2), (0, 0)])

    with pytest.raises(UnionFailed):
        kernel.union([collapsed, Polygon()])


def test_union_rejects_collections(kernel):
    with pytest.raises(UnsupportedGeometryKind):
        kernel.union([box(0, 0, 1, 1), GeometryCollection([box(2, 2, 3, 3)])])


def test_intersect_returns_overlap(kernel):
    result = kernel.intersect(box(0, 0, 2, 2), box(1, 1, 3, 3))

    assert result.area == pytest.approx(1.0)


def test_intersect_disjoint_returns_none(kernel):
    assert kernel.intersect(box(0, 0, 1, 1), box(5, 5, 6, 6)) is None


def test_intersect_touching_edge_returns_none(kernel):
    """A shared edge has no area and is not a restriction overlap."""
    assert kernel.intersect(box(0, 0, 1, 1), box(1, 0, 2, 1)) is None


def test_intersect_with_degenerate_operand_returns_none(kernel):
    collapsed = Polygon([(0, 0), (1, 1), (2, 2), (0, 0)])

    assert kernel.intersect(collapsed, box(0, 0, 3, 3)) is None


def test_intersect_repairs_bowtie(kernel):
    """Self-intersecting input is repaired rather than failing."""
    bowtie = Polygon([(0, 0), (2, 2), (2, 0), (0, 2), (0, 0)])
    assert not bowtie.is_valid

    result = kernel.intersect(bowtie, box(0, 0, 2, 2))

    assert result is not None
    assert result.is_valid
    assert result.area == pytest.approx(2.0)


def test_difference_removes_overlap(kernel):
    result = kernel.difference(box(0, 0, 2, 2), box(1, 0, 2, 2))

    assert result.area == pytest.approx(2.0)


def test_difference_fully_covered_returns_none(kernel):
    assert kernel.difference(box(1, 1, 2, 2), box(0, 0, 3, 3)) is None


def test_difference_disjoint_returns_minuend(kernel):
    minuend = box(0, 0, 1, 1)

    assert kernel.difference(minuend, box(5, 5, 6, 6)).equals(minuend)


def test_difference_degenerate_subtrahend_returns_minuend(kernel):
    minuend = box(0, 0, 1, 1)
    collapsed = Polygon([(0, 0), (1, 1), (2, 2), (0, 0)])

    assert kernel.difference(minuend, collapsed).equals(minuend)


def test_difference_degenerate_minuend_fails(kernel):
    collapsed = Polygon([(0, 0), (1, 1), (2, 2), (0, 0)])

    with pytest.raises(DifferenceFailed):
        kernel.difference(collapsed, box(0, 0, 1, 1))


def test_difference_splitting_produces_multipolygon(kernel):
    result = kernel.difference(box(0, 0, 3, 1), box(1, -1, 2, 2))

    assert isinstance(result, MultiPolygon)
    assert result.area == pytest.approx(2.0)


def test_precision_grid_snaps_results(center):
    kernel = GeometryKernel(GeometryConfig(precision_grid_size=1e-6))

    result = kernel.intersect(kernel.buffer(center, 1.0), square(center, 0.005))

    for lng, lat in result.exterior.coords:
        assert round(lng / 1e-6) * 1e-6 == pytest.approx(lng, abs=1e-12)
        assert round(lat / 1e-6) * 1e-6 == pytest.approx(lat, abs=1e-12)


def test_geodesic_area_of_none_is_zero(kernel):
    assert kernel.geodesic_area_m2(None) == 0.0
    assert kernel.geodesic_area_m2(Polygon()) == 0.0


def test_is_degenerate(kernel):
    assert kernel.is_degenerate(Polygon([(0, 0), (1, 1), (2, 2), (0, 0)]))
    assert not kernel.is_degenerate(box(0, 0, 1, 1))


@pytest.mark.parametrize(
    ("operation", "error"),
    [
        (lambda k: k.union([box(0, 0, 1, 1)]), UnionFailed),
        (lambda k: k.intersect(box(0, 0, 2, 2), box(1, 1, 3, 3)), IntersectionFailed),
        (lambda k: k.difference(box(0, 0, 2, 2), box(1, 1, 3, 3)), DifferenceFailed),
    ],
    ids=["union", "intersect", "difference"],
)
def test_engine_error_during_repair_maps_to_operation_failure(kernel, mocker, operation, error):
    mocker.patch(
        "airspace.spatial.kernel.repair_geometry",
        side_effect=GEOSException("ring does not form a closed linestring"),
    )

    with pytest.raises(error, match="closed linestring"):
        operation(kernel)
