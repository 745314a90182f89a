import numpy as np
import pytest
from shapely.geometry import LineString, Point, Polygon

from cartokernel.base.coords import coord_set_from_arrays, coord_set_from_points
from cartokernel.base.polygon import (
    contours_contain,
    contours_distance_from_point,
    distance_from_point,
    nearest_feature,
    polygon_contains,
    polygon_contains_points,
)
from cartokernel.base.tests.fixtures.shapes import l_shape, square, zigzag_path


def test_square_contains_scenario():
    pts = square()
    assert polygon_contains(pts[:, 0], pts[:, 1], 5.0, 5.0)
    assert not polygon_contains(pts[:, 0], pts[:, 1], 15.0, 5.0)


def test_boundary_points_classified_consistently():
    pts = square()
    xs, ys = pts[:, 0], pts[:, 1]
    # minimum edges in, maximum edges out
    assert polygon_contains(xs, ys, 0.0, 5.0)
    assert polygon_contains(xs, ys, 5.0, 0.0)
    assert not polygon_contains(xs, ys, 10.0, 5.0)
    assert not polygon_contains(xs, ys, 5.0, 10.0)
    for _ in range(3):
        assert polygon_contains(xs, ys, 0.0, 0.0) == polygon_contains(xs, ys, 0.0, 0.0)


def test_ray_through_vertex_counted_once():
    # diamond: the ray from the centre passes exactly through the right vertex
    xs = np.array([0.0, 5.0, 10.0, 5.0])
    ys = np.array([5.0, 0.0, 5.0, 10.0])
    assert polygon_contains(xs, ys, 5.0, 5.0)
    assert not polygon_contains(xs, ys, -1.0, 5.0)
    assert not polygon_contains(xs, ys, 11.0, 5.0)


def test_orientation_does_not_matter():
    pts = square()[::-1]
    assert polygon_contains(pts[:, 0], pts[:, 1], 5.0, 5.0)


def test_concave_polygon_matches_shapely():
    pts = l_shape()
    poly = Polygon(pts)
    rng = np.random.default_rng(seed=12345)
    px = rng.uniform(-2.0, 12.0, size=300)
    py = rng.uniform(-2.0, 12.0, size=300)
    got = polygon_contains_points(pts[:, 0], pts[:, 1], px, py)
    expected = np.array([poly.contains(Point(x, y)) for x, y in zip(px, py)])
    assert np.array_equal(got, expected)


def test_degenerate_polygons():
    assert not polygon_contains([0.0, 1.0], [0.0, 1.0], 0.5, 0.5)
    with pytest.raises(ValueError):
        polygon_contains([], [], 0.0, 0.0)


def test_distance_to_polyline():
    xs, ys = zigzag_path()
    d, nx, ny = distance_from_point(xs, ys, 2.0, 3.0)
    assert d == 3.0
    assert (nx, ny) == (2.0, 0.0)
    d, nx, ny = distance_from_point(xs, ys, 7.0, 2.0)
    assert np.isclose(d, 2.0)
    assert (nx, ny) == (5.0, 2.0)


def test_distance_beyond_path_end_uses_endpoint():
    xs, ys = zigzag_path()
    d, nx, ny = distance_from_point(xs, ys, 13.0, 9.0)
    assert d == 5.0
    assert (nx, ny) == (10.0, 5.0)


def test_polygon_flag_adds_closing_segment():
    pts = square()
    xs, ys = pts[:, 0], pts[:, 1]
    # near the closing edge (0,10)-(0,0)
    open_d, _, _ = distance_from_point(xs, ys, -1.0, 5.0, is_polygon=False)
    closed_d, nx, ny = distance_from_point(xs, ys, -1.0, 5.0, is_polygon=True)
    assert closed_d == 1.0
    assert (nx, ny) == (0.0, 5.0)
    assert open_d > closed_d


def test_two_points_never_wrap():
    d_open = distance_from_point([0.0, 10.0], [0.0, 0.0], 5.0, 1.0, is_polygon=False)
    d_closed = distance_from_point([0.0, 10.0], [0.0, 0.0], 5.0, 1.0, is_polygon=True)
    assert d_open == d_closed


def test_distance_matches_shapely():
    pts = l_shape()
    ring = LineString(np.vstack([pts, pts[:1]]))
    rng = np.random.default_rng(seed=7)
    for x, y in rng.uniform(-5.0, 15.0, size=(50, 2)):
        d, nx, ny = distance_from_point(pts[:, 0], pts[:, 1], x, y, is_polygon=True)
        assert np.isclose(d, ring.distance(Point(x, y)))
        assert np.isclose(np.hypot(x - nx, y - ny), d)


def test_distance_zero_length_segments():
    d, nx, ny = distance_from_point([1.0, 1.0, 1.0], [1.0, 1.0, 1.0], 4.0, 5.0)
    assert d == 5.0
    assert (nx, ny) == (1.0, 1.0)


def test_distance_empty_view_raises():
    with pytest.raises(ValueError):
        distance_from_point([], [], 0.0, 0.0)
    with pytest.raises(ValueError):
        coord_set_from_arrays([], []).distance_from_point(False, 0.0, 0.0)


def test_contours_with_hole():
    outer = coord_set_from_points(square(10.0))
    hole = coord_set_from_points(square(4.0, origin=(3.0, 3.0)))
    assert contours_contain([outer, hole], 1.0, 1.0)
    assert not contours_contain([outer, hole], 5.0, 5.0)
    assert not contours_contain([outer, hole], 20.0, 5.0)
    d, nx, ny = contours_distance_from_point([outer, hole], 5.0, 4.0, is_polygon=True)
    assert d == 1.0
    assert (nx, ny) == (5.0, 3.0)


def test_nearest_feature():
    features = [
        coord_set_from_points(square(2.0, origin=(0.0, 0.0))),
        coord_set_from_points(square(2.0, origin=(10.0, 0.0))),
        [coord_set_from_arrays([0.0, 20.0], [6.0, 6.0])],
    ]
    idx, d, nx, ny = nearest_feature(features, 10.0, 4.5, is_polygon=True)
    # the long segment's vertices are far away but the segment itself is nearest
    assert idx == 2
    assert d == 1.5
    assert (nx, ny) == (10.0, 6.0)
    idx, d, _, _ = nearest_feature(features, 1.0, 2.5, is_polygon=True)
    assert idx == 0
    assert np.isclose(d, 0.5)


def test_nearest_feature_tie_goes_to_lowest_index():
    a = coord_set_from_arrays([0.0, 0.0], [0.0, 10.0])
    b = coord_set_from_arrays([4.0, 4.0], [0.0, 10.0])
    idx, d, _, _ = nearest_feature([b, a], 2.0, 5.0)
    assert idx == 0
    assert d == 2.0


def test_nearest_feature_requires_features():
    with pytest.raises(ValueError):
        nearest_feature([], 0.0, 0.0)
