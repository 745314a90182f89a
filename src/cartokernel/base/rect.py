"""
rect.py

Axis-aligned rectangles in integer (`Rect`) and floating-point (`RectFP`)
coordinates, plus the boundary classification used to clip segments.

A rectangle is defined by its top-left (minimum) and bottom-right (maximum)
corners. The names are kept whichever way the consuming coordinate space
points "up". Emptiness is derived: a rectangle is empty when
`left >= right` or `top >= bottom`. Point containment is half-open: points on
the left and top edges are inside, points on the right and bottom edges are not.

Public names:
- `RegionFlag` : independent boundary-side bits returned by `region()`
- `Rect` : integer rectangle with Cohen-Sutherland segment clipping
- `RectFP` : floating-point rectangle

"""
import enum
import logging
import math
from typing import Optional, Tuple

import numpy as np

from cartokernel.base.config import INT32_MAX, INT32_MIN
from cartokernel.base.points import Point2

logger = logging.getLogger(__name__)


class RegionFlag(enum.IntFlag):
    """Side(s) of a rectangle's boundary lines on which a point falls."""
    INSIDE = 0
    LEFT = 1
    RIGHT = 2
    TOP = 4
    BOTTOM = 8
    TOP_LEFT = TOP | LEFT
    TOP_RIGHT = TOP | RIGHT
    BOTTOM_LEFT = BOTTOM | LEFT
    BOTTOM_RIGHT = BOTTOM | RIGHT


class _RectBase:
    """Operations shared by the integer and floating-point rectangles.

    Subclasses provide `_coord`, the numeric conversion applied to every edge.
    """

    __slots__ = ('top_left', 'bottom_right')

    def __init__(self, left=0, top=0, right=0, bottom=0):
        self.top_left = Point2(self._coord(left), self._coord(top))
        self.bottom_right = Point2(self._coord(right), self._coord(bottom))

    @staticmethod
    def _coord(value):
        raise NotImplementedError

    def __eq__(self, other):
        if not isinstance(other, _RectBase):
            return NotImplemented
        return self.top_left == other.top_left and self.bottom_right == other.bottom_right

    __hash__ = None

    def __repr__(self):
        return f'{type(self).__name__}({self.left!r}, {self.top!r}, {self.right!r}, {self.bottom!r})'

    def copy(self):
        return type(self)(self.left, self.top, self.right, self.bottom)

    @property
    def left(self):
        return self.top_left.x

    @property
    def top(self):
        return self.top_left.y

    @property
    def right(self):
        return self.bottom_right.x

    @property
    def bottom(self):
        return self.bottom_right.y

    def is_empty(self) -> bool:
        return self.left >= self.right or self.top >= self.bottom

    def width(self):
        return self.right - self.left

    def height(self):
        return self.bottom - self.top

    def top_right(self) -> Point2:
        return Point2(self.right, self.top)

    def bottom_left(self) -> Point2:
        return Point2(self.left, self.bottom)

    def contains_point(self, point) -> bool:
        """Half-open containment: minimum edges are inside, maximum edges are not."""
        x, y = point
        return self.left <= x < self.right and self.top <= y < self.bottom

    def contains_rect(self, rect) -> bool:
        """True if every edge of `rect` lies within this rectangle's closed bounds."""
        return (self.left <= rect.left and self.top <= rect.top and
                self.right >= rect.right and self.bottom >= rect.bottom)

    def intersects(self, rect) -> bool:
        """True if the half-open extents overlap on both axes.

        Empty rectangles intersect nothing, themselves included.
        """
        if self.is_empty() or rect.is_empty():
            return False
        return (self.left < rect.right and self.right > rect.left and
                self.top < rect.bottom and self.bottom > rect.top)

    def intersection(self, rect) -> None:
        """Shrink this rectangle to its overlap with `rect`; the result may be empty."""
        self.top_left = Point2(max(self.left, self._coord(rect.left)),
                               max(self.top, self._coord(rect.top)))
        self.bottom_right = Point2(min(self.right, self._coord(rect.right)),
                                   min(self.bottom, self._coord(rect.bottom)))

    def combine_point(self, point) -> None:
        """Grow this rectangle so that its bounds reach `point`."""
        x, y = point
        x = self._coord(x)
        y = self._coord(y)
        self.top_left = Point2(min(self.left, x), min(self.top, y))
        self.bottom_right = Point2(max(self.right, x), max(self.bottom, y))

    def combine_rect(self, rect) -> None:
        """Grow to the smallest rectangle containing both this one and `rect`.

        An empty `rect` changes nothing; an empty self is replaced by `rect`.
        """
        if rect.is_empty():
            return
        if self.is_empty():
            self.top_left = Point2(self._coord(rect.left), self._coord(rect.top))
            self.bottom_right = Point2(self._coord(rect.right), self._coord(rect.bottom))
            return
        self.top_left = Point2(min(self.left, self._coord(rect.left)),
                               min(self.top, self._coord(rect.top)))
        self.bottom_right = Point2(max(self.right, self._coord(rect.right)),
                                   max(self.bottom, self._coord(rect.bottom)))

    def region(self, point) -> RegionFlag:
        """Classify `point` against the four boundary lines.

        Returns `RegionFlag.INSIDE` (0) exactly when `contains_point` is true,
        so a point on the left or top edge is INSIDE. Otherwise the LEFT/RIGHT
        bit and the TOP/BOTTOM bit say which side of the rectangle the point
        lies on; corner regions carry two bits.

        Left and top edge points are not flagged as touching a boundary, as
        they would be with `<=` and `>=` tests; the classification follows
        containment instead. Clipping uses its own closed outcode, see `Rect._clip_code`.
        """
        x, y = point
        region = RegionFlag.INSIDE
        if x < self.left:
            region |= RegionFlag.LEFT
        elif x >= self.right:
            region |= RegionFlag.RIGHT
        if y < self.top:
            region |= RegionFlag.TOP
        elif y >= self.bottom:
            region |= RegionFlag.BOTTOM
        return region

    def is_on_edge(self, point) -> bool:
        """True if `point` lies on one of the four closed edges."""
        x, y = point
        on_vertical = (x == self.left or x == self.right) and self.top <= y <= self.bottom
        on_horizontal = (y == self.top or y == self.bottom) and self.left <= x <= self.right
        return on_vertical or on_horizontal


class Rect(_RectBase):
    """Integer rectangle.

    Example:
        >>> r = Rect(0, 0, 10, 10)
        >>> r.clip_segment(Point2(-5, 5), Point2(15, 5))
        (Point2(x=0, y=5), Point2(x=10, y=5))
    """

    __slots__ = ()

    @staticmethod
    def _coord(value):
        return int(value)

    @classmethod
    def maximal(cls) -> 'Rect':
        return cls(INT32_MIN, INT32_MIN, INT32_MAX, INT32_MAX)

    @classmethod
    def from_rect_fp(cls, rect: 'RectFP') -> 'Rect':
        """Smallest integer rectangle enclosing `rect`."""
        return cls(math.floor(rect.left), math.floor(rect.top),
                   math.ceil(rect.right), math.ceil(rect.bottom))

    def is_maximal(self) -> bool:
        return (self.left == INT32_MIN and self.top == INT32_MIN and
                self.right == INT32_MAX and self.bottom == INT32_MAX)

    def center(self) -> Point2:
        # integer division truncating toward zero
        return Point2(int((self.left + self.right) / 2), int((self.top + self.bottom) / 2))

    def _clip_code(self, x, y) -> RegionFlag:
        """Outcode against the closed rectangle, used only by clipping."""
        code = RegionFlag.INSIDE
        if x < self.left:
            code |= RegionFlag.LEFT
        elif x > self.right:
            code |= RegionFlag.RIGHT
        if y < self.top:
            code |= RegionFlag.TOP
        elif y > self.bottom:
            code |= RegionFlag.BOTTOM
        return code

    def _boundary_intersection(self, code, x0, y0, x1, y1) -> Tuple[int, int]:
        """Intersect the segment with the first boundary line named in `code`."""
        dx = x1 - x0
        dy = y1 - y0
        if code & RegionFlag.LEFT:
            x = self.left
            y = y0 + dy * (x - x0) / dx if dx else y0
        elif code & RegionFlag.RIGHT:
            x = self.right
            y = y0 + dy * (x - x0) / dx if dx else y0
        elif code & RegionFlag.TOP:
            y = self.top
            x = x0 + dx * (y - y0) / dy if dy else x0
        else:
            y = self.bottom
            x = x0 + dx * (y - y0) / dy if dy else x0
        return int(round(x)), int(round(y))

    def clip_segment(self, start, end) -> Optional[Tuple[Point2, Point2]]:
        """Clip the segment `start`-`end` to this rectangle (Cohen-Sutherland).

        The rectangle is treated as closed here, so a segment running along
        the right or bottom edge is kept. Intersections are computed in real
        arithmetic and rounded to integer coordinates. Each endpoint is moved
        at most once per boundary, so the loop runs at most four times.
        Both returned endpoints are rounded to integers, including ones that
        were already inside.

        Returns the clipped `(start, end)` pair, or None if the segment lies
        wholly outside.
        """
        if self.is_empty():
            return None
        x0, y0 = start
        x1, y1 = end
        code0 = self._clip_code(x0, y0)
        code1 = self._clip_code(x1, y1)
        for _ in range(4):
            if not (code0 | code1):
                break
            if code0 & code1:
                return None
            if code0:
                x0, y0 = self._boundary_intersection(code0, x0, y0, x1, y1)
                code0 = self._clip_code(x0, y0)
            else:
                x1, y1 = self._boundary_intersection(code1, x0, y0, x1, y1)
                code1 = self._clip_code(x1, y1)
        if code0 | code1:
            logger.debug('clip_segment: endpoints still outside after four clips; rejecting')
            return None
        return Point2(x0, y0).rounded(), Point2(x1, y1).rounded()

    def intersects_segment(self, start, end) -> bool:
        return self.clip_segment(start, end) is not None


class RectFP(_RectBase):
    """Floating-point rectangle; all comparisons are made in floating point."""

    __slots__ = ()

    @staticmethod
    def _coord(value):
        return float(value)

    @classmethod
    def from_rect(cls, rect: Rect) -> 'RectFP':
        return cls(rect.left, rect.top, rect.right, rect.bottom)

    @classmethod
    def from_points(cls, xs, ys) -> 'RectFP':
        """Bounding rectangle of paired coordinate sequences (must be non-empty)."""
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        if xs.size == 0 or ys.size == 0:
            raise ValueError('bounds of an empty coordinate set')
        return cls(xs.min(), ys.min(), xs.max(), ys.max())

    def center(self) -> Point2:
        return Point2((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def distance_to_point(self, x, y) -> float:
        """Euclidean distance from (x, y) to the closed rectangle; 0 inside or on an edge."""
        dx = max(self.left - x, 0.0, x - self.right)
        dy = max(self.top - y, 0.0, y - self.bottom)
        return math.hypot(dx, dy)


__all__ = ['RegionFlag', 'Rect', 'RectFP']
