import numpy as np
import pytest

from cartokernel.base.coords import (
    CoordSet,
    WritableCoordSet,
    coord_pair,
    coord_set_from_arrays,
    coord_set_from_points,
    coord_set_of_two_points,
)
from cartokernel.base.rect import RectFP
from cartokernel.base.tests.fixtures.shapes import square


def test_strided_access_over_interleaved_buffer():
    buf = np.array([0.0, 1.0, 10.0, 11.0, 20.0, 21.0])
    cs = CoordSet(buf, buf[1:], step=2, count=3)
    assert len(cs) == 3
    assert [cs.x(i) for i in range(3)] == [0.0, 10.0, 20.0]
    assert [cs.y(i) for i in range(3)] == [1.0, 11.0, 21.0]
    assert list(cs) == [(0.0, 1.0), (10.0, 11.0), (20.0, 21.0)]


def test_views_share_memory_with_buffer():
    pts = square()
    cs = coord_set_from_points(pts)
    assert np.shares_memory(cs.xs, pts)
    assert np.array_equal(cs.xs, pts[:, 0])
    assert np.array_equal(cs.ys, pts[:, 1])
    # the view follows later changes to the caller's buffer
    pts[2, 0] = 99.0
    assert cs.x(2) == 99.0


def test_readonly_views_reject_writes():
    cs = coord_set_from_points(square())
    with pytest.raises(ValueError):
        cs.xs[0] = 5.0


def test_default_count_from_buffer():
    cs = CoordSet(np.arange(5.0), np.arange(5.0) * 2)
    assert cs.count == 5
    assert cs.point(4) == (4.0, 8.0)


def test_view_past_buffer_rejected():
    buf = np.arange(6.0)
    with pytest.raises(ValueError):
        CoordSet(buf, buf[1:], step=2, count=4)
    with pytest.raises(ValueError):
        CoordSet(buf, buf, step=-1, count=2)
    with pytest.raises(ValueError):
        CoordSet(np.zeros((2, 2)), np.zeros((2, 2)))


def test_coord_pair_is_single_point_with_zero_step():
    cs = coord_pair(3.0, 4.0)
    assert cs.step == 0 and cs.count == 1
    assert cs.point(0) == (3.0, 4.0)
    d, nx, ny = cs.distance_from_point(False, 0.0, 0.0)
    assert d == 5.0
    assert (nx, ny) == (3.0, 4.0)


def test_two_point_set():
    cs = coord_set_of_two_points(0.0, 0.0, 10.0, 0.0)
    assert cs.count == 2
    d, nx, ny = cs.distance_from_point(False, 4.0, 3.0)
    assert d == 3.0
    assert (nx, ny) == (4.0, 0.0)


def test_bounds():
    cs = coord_set_from_arrays([3.0, -1.0, 4.0], [2.0, 7.0, -5.0])
    assert cs.bounds() == RectFP(-1.0, -5.0, 4.0, 7.0)
    with pytest.raises(ValueError):
        coord_set_from_arrays([], []).bounds()


def test_writable_set_point_updates_buffer():
    pts = square()
    ws = coord_set_from_points(pts, writable=True)
    assert isinstance(ws, WritableCoordSet)
    ws.set_point(1, 7.0, -2.0)
    assert np.array_equal(pts[1], [7.0, -2.0])


def test_writable_reverse_in_place():
    xs = np.array([0.0, 1.0, 2.0, 3.0])
    ys = np.array([5.0, 6.0, 7.0, 8.0])
    ws = coord_set_from_arrays(xs, ys, writable=True)
    ws.reverse()
    assert np.array_equal(xs, [3.0, 2.0, 1.0, 0.0])
    assert np.array_equal(ys, [8.0, 7.0, 6.0, 5.0])


def test_writable_reverse_interleaved():
    pts = np.array([[0.0, 1.0], [2.0, 3.0], [4.0, 5.0]])
    coord_set_from_points(pts, writable=True).reverse()
    assert np.array_equal(pts, [[4.0, 5.0], [2.0, 3.0], [0.0, 1.0]])


def test_as_readonly_shares_buffers():
    xs = np.array([0.0, 1.0])
    ys = np.array([2.0, 3.0])
    ws = WritableCoordSet(xs, ys)
    ro = ws.as_readonly()
    ws.set_point(0, 9.0, 9.0)
    assert ro.point(0) == (9.0, 9.0)
    assert not ro.xs.flags.writeable


def test_writable_requires_writable_buffer():
    buf = np.arange(4.0)
    buf.flags.writeable = False
    with pytest.raises(ValueError):
        WritableCoordSet(buf, buf)


def test_coord_set_from_points_shape_check():
    with pytest.raises(ValueError):
        coord_set_from_points(np.zeros((3, 3)))
    with pytest.raises(ValueError):
        coord_set_from_arrays([1.0, 2.0], [1.0])


def test_polygon_methods_delegate():
    cs = coord_set_from_points(square())
    assert cs.polygon_contains(5.0, 5.0)
    assert not cs.polygon_contains(15.0, 5.0)
    inside = cs.polygon_contains_points([1.0, 11.0], [1.0, 1.0])
    assert np.array_equal(inside, [True, False])


def test_writable_view_over_column_slice():
    big = np.arange(12.0).reshape(4, 3)
    pts = big[:, :2]
    ws = coord_set_from_points(pts, writable=True)
    ws.set_point(0, 99.0, 98.0)
    assert np.array_equal(big[0], [99.0, 98.0, 2.0])
    ws.reverse()
    assert np.array_equal(big[:, 0], [9.0, 6.0, 3.0, 99.0])
    assert np.array_equal(big[:, 1], [10.0, 7.0, 4.0, 98.0])
    assert np.array_equal(big[:, 2], [2.0, 5.0, 8.0, 11.0])


def test_readonly_view_over_column_slice_follows_buffer():
    big = np.arange(12.0).reshape(4, 3)
    cs = coord_set_from_points(big[:, :2])
    assert np.shares_memory(cs.xs, big)
    assert cs.point(3) == (9.0, 10.0)
    big[3, 1] = -1.0
    assert cs.point(3) == (9.0, -1.0)


def test_integer_points_are_viewed_not_converted():
    pts = np.array([[0, 1], [2, 3]])
    cs = coord_set_from_points(pts)
    assert np.shares_memory(cs.xs, pts)
    pts[1, 0] = 7
    assert cs.point(1) == (7.0, 3.0)
    with pytest.raises(ValueError):
        coord_set_from_points(pts, writable=True)
    assert np.array_equal(pts, [[0, 1], [7, 3]])


def test_writable_rejects_lists():
    with pytest.raises(ValueError):
        coord_set_from_points([[0.0, 1.0], [2.0, 3.0]], writable=True)
    with pytest.raises(ValueError):
        coord_set_from_arrays([0.0, 1.0], [2.0, 3.0], writable=True)
    with pytest.raises(ValueError):
        WritableCoordSet(np.array([0, 1]), np.array([2, 3]))


def test_readonly_list_input():
    cs = coord_set_from_points([[0.0, 1.0], [2.0, 3.0]])
    assert list(cs) == [(0.0, 1.0), (2.0, 3.0)]
