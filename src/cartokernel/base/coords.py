"""Strided, non-owning views over coordinate arrays.

A `CoordSet` describes `count` coordinate pairs stored at
`x[i * step]`, `y[i * step]` for `i` in `[0, count)`. The x and y buffers are
numpy arrays owned by the caller; the view never copies them, so it is only
valid while the buffers stay alive and unmodified. Polylines and polygons are
passed around as one such view per contour.

Literal geometry (a single point, a two-point segment) is built with the
factory functions below, which allocate a tiny buffer and describe it with the
same view structure:

- `coord_pair(x, y)` : one point, step 0
- `coord_set_of_two_points(x0, y0, x1, y1)` : a segment, step 1
- `coord_set_from_points(points)` : an (N, 2) array, step 2 (step 1 per column if not C-contiguous)
- `coord_set_from_arrays(xs, ys)` : separate x and y arrays, step 1
"""
from typing import Tuple

import numpy as np

from cartokernel.base import polygon
from cartokernel.base.rect import RectFP


def _as_buffer(buf, writable):
    if writable:
        _require_float_arrays(buf)
        a = buf
    else:
        a = np.asarray(buf)
        if a.dtype.kind not in 'fiu':
            a = a.astype(float)
    if a.ndim != 1:
        raise ValueError('coordinate buffers must be 1-D arrays')
    if writable and not a.flags.writeable:
        raise ValueError('writable coordinate view requires writable buffers')
    return a


def _require_float_arrays(*bufs):
    # writes must land in the caller's array, never in a converted copy
    for buf in bufs:
        if not isinstance(buf, np.ndarray) or buf.dtype.kind != 'f':
            raise ValueError('writable coordinate views require floating-point numpy arrays')


class CoordSet:
    """A read-only set of coordinate pairs.

    Parameters
    - x, y: 1-D buffers whose element 0 is the first coordinate
    - step: distance, in elements, between successive coordinates (0 repeats one point)
    - count: number of coordinate pairs

    Index preconditions are the caller's responsibility: `x(i)` and `y(i)`
    do not check `0 <= i < count`.
    """

    _writable = False

    def __init__(self, x, y, step: int = 1, count: int = None):
        x = _as_buffer(x, self._writable)
        y = _as_buffer(y, self._writable)
        if step < 0 or (count is not None and count < 0):
            raise ValueError('step and count must be non-negative')
        if count is None:
            if step == 0:
                count = 1 if x.size and y.size else 0
            else:
                count = min(-(-x.size // step), -(-y.size // step))
        last = (count - 1) * step
        if count > 0 and (last >= x.size or last >= y.size):
            raise ValueError(f'view of {count} coordinates with step {step} extends past its buffer')
        self._x = x
        self._y = y
        self.step = int(step)
        self.count = int(count)

    def __len__(self):
        return self.count

    def __repr__(self):
        return f'{type(self).__name__}(step={self.step}, count={self.count})'

    def x(self, index: int) -> float:
        return float(self._x[index * self.step])

    def y(self, index: int) -> float:
        return float(self._y[index * self.step])

    def point(self, index: int) -> Tuple[float, float]:
        return self.x(index), self.y(index)

    def __iter__(self):
        for i in range(self.count):
            yield self.point(i)

    def _view(self, buf):
        if self.count == 0:
            return buf[:0]
        if self.step == 0:
            return np.broadcast_to(buf[:1], (self.count,))
        return buf[:(self.count - 1) * self.step + 1:self.step]

    @property
    def xs(self) -> np.ndarray:
        """The x coordinates as a numpy view (no copy)."""
        v = self._view(self._x)
        if not self._writable and v.flags.writeable:
            v = v.view()
            v.flags.writeable = False
        return v

    @property
    def ys(self) -> np.ndarray:
        """The y coordinates as a numpy view (no copy)."""
        v = self._view(self._y)
        if not self._writable and v.flags.writeable:
            v = v.view()
            v.flags.writeable = False
        return v

    def bounds(self) -> RectFP:
        """Bounding rectangle of the viewed points (requires count > 0)."""
        if self.count == 0:
            raise ValueError('bounds of an empty coordinate set')
        return RectFP.from_points(self.xs, self.ys)

    def distance_from_point(self, is_polygon: bool, x: float, y: float) -> Tuple[float, float, float]:
        """Distance from (x, y) to the path or polygon, with the nearest point on it.

        The view is a chain of `count - 1` segments, closed by one more segment
        when `is_polygon` is true and there are more than two points. A single
        point gives the distance to that point; an empty view raises ValueError.

        Returns (distance, nearest_x, nearest_y).
        """
        return polygon.distance_from_point(self.xs, self.ys, x, y, is_polygon)

    def polygon_contains(self, x: float, y: float) -> bool:
        """True if (x, y) is inside the polygon formed by the points (always closed)."""
        return polygon.polygon_contains(self.xs, self.ys, x, y)

    def polygon_contains_points(self, px, py) -> np.ndarray:
        return polygon.polygon_contains_points(self.xs, self.ys, px, py)


class WritableCoordSet(CoordSet):
    """A set of modifiable coordinate pairs viewed in place."""

    _writable = True

    def set_point(self, index: int, x: float, y: float) -> None:
        self._x[index * self.step] = x
        self._y[index * self.step] = y

    def reverse(self) -> None:
        """Reverse the order of the viewed points in place."""
        if self.count > 1 and self.step > 0:
            xs = self.xs
            ys = self.ys
            xs[:] = xs[::-1].copy()
            ys[:] = ys[::-1].copy()

    def as_readonly(self) -> CoordSet:
        """A read-only view of the same buffers."""
        return CoordSet(self._x, self._y, self.step, self.count)


def coord_pair(x: float, y: float) -> CoordSet:
    """A coordinate set holding a single point."""
    return CoordSet(np.array([x], dtype=float), np.array([y], dtype=float), step=0, count=1)


def coord_set_of_two_points(x0: float, y0: float, x1: float, y1: float) -> CoordSet:
    """A coordinate set holding the two ends of a segment."""
    return CoordSet(np.array([x0, x1], dtype=float), np.array([y0, y1], dtype=float), step=1, count=2)


def coord_set_from_points(points, writable: bool = False) -> CoordSet:
    """View an (N, 2) array of x, y pairs without copying.

    C-contiguous input is flattened and described with step 2: x at even
    offsets, y at odd offsets. Other layouts, such as the first two columns
    of a wider array, are viewed through their two columns with step 1.

    A writable view requires a floating-point numpy array. Read-only input
    that is not an array (a list of pairs, say) is converted once, and the
    view describes that converted copy.
    """
    if writable:
        _require_float_arrays(points)
    pts = np.asarray(points)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError('points must be shape (N,2)')
    cls = WritableCoordSet if writable else CoordSet
    if pts.flags.c_contiguous:
        flat = pts.reshape(-1)
        return cls(flat, flat[1:], step=2, count=pts.shape[0])
    return cls(pts[:, 0], pts[:, 1], step=1, count=pts.shape[0])


def coord_set_from_arrays(xs, ys, writable: bool = False) -> CoordSet:
    """View separate x and y arrays of equal length.

    Same conversion rules as `coord_set_from_points`.
    """
    if writable:
        _require_float_arrays(xs, ys)
    cls = WritableCoordSet if writable else CoordSet
    xs = np.asarray(xs)
    ys = np.asarray(ys)
    if xs.shape != ys.shape:
        raise ValueError('xs and ys must have the same shape')
    return cls(xs, ys, step=1, count=xs.size)


__all__ = [
    'CoordSet',
    'WritableCoordSet',
    'coord_pair',
    'coord_set_of_two_points',
    'coord_set_from_points',
    'coord_set_from_arrays',
]
