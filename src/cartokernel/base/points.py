"""Point and vector primitives.

Small immutable value types for 2D and 3D points. The same class serves integer
and floating coordinates: arithmetic keeps whatever numeric type the caller
supplies, while lengths and unit vectors are always floating point.

In the vector functions left and right are defined with x increasing to the
right and y increasing upwards.

Public names:
- `Point2`, `Point3` : value types with vector arithmetic
- `PointType`, `OutlinePoint` : a point tagged as on-curve or as a spline control point
- `Line` : a start and end point
- `CoordType` : the coordinate spaces used by callers of the kernel
"""
import enum
import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_UINT64_MASK = (1 << 64) - 1


@dataclass(frozen=True, order=True)
class Point2:
    """A 2D point or vector.

    Points compare by x, then y, so sorting a collection gives a deterministic
    order and equal points hash equally.
    """
    x: float = 0
    y: float = 0

    def __add__(self, other):
        if not isinstance(other, Point2):
            return NotImplemented
        return Point2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        if not isinstance(other, Point2):
            return NotImplemented
        return Point2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor):
        if isinstance(factor, (Point2, Point3)):
            return NotImplemented
        return Point2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self):
        return Point2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def vector_length(self) -> float:
        return math.hypot(self.x, self.y)

    def cross_product(self, other: 'Point2'):
        """Scalar (z component) cross product `x1*y2 - y1*x2`."""
        return self.x * other.y - self.y * other.x

    def unit_vector(self) -> 'Point2':
        """Return this vector scaled to length 1.

        The zero vector has no direction; (1, 0) is returned for it.
        """
        length = self.vector_length()
        if length > 0:
            return Point2(self.x / length, self.y / length)
        logger.debug('unit_vector of zero-length vector; returning (1, 0)')
        return Point2(1.0, 0.0)

    def left_unit_vector(self) -> 'Point2':
        """Unit vector pointing 90 degrees left of this vector."""
        u = self.unit_vector()
        return Point2(-u.y, u.x)

    def right_unit_vector(self) -> 'Point2':
        """Unit vector pointing 90 degrees right of this vector."""
        u = self.unit_vector()
        return Point2(u.y, -u.x)

    def left_of_vector(self, point: 'Point2') -> bool:
        """True if `point` is strictly left of this vector; collinear points are neither."""
        return self.cross_product(point) > 0

    def right_of_vector(self, point: 'Point2') -> bool:
        """True if `point` is strictly right of this vector; collinear points are neither."""
        return self.cross_product(point) < 0

    def comparison_value(self) -> int:
        """Single unsigned 64-bit key for integer points: `(x << 32) + y`.

        Coordinates are taken as 32-bit integers and the sum wraps modulo 2**64.
        The key sorts in the same order as the points when both coordinates
        are non-negative.
        """
        x = int(self.x) & _UINT64_MASK
        y = int(self.y) & _UINT64_MASK
        return ((x << 32) + y) & _UINT64_MASK

    def rounded(self) -> 'Point2':
        """Return the point with both coordinates rounded to integers."""
        return Point2(int(round(self.x)), int(round(self.y)))


@dataclass(frozen=True, order=True)
class Point3:
    """A 3D point or vector, ordered by x, then y, then z."""
    x: float = 0
    y: float = 0
    z: float = 0

    @classmethod
    def from_point2(cls, point: Point2) -> 'Point3':
        return cls(point.x, point.y, 0)

    def __add__(self, other):
        if not isinstance(other, Point3):
            return NotImplemented
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        if not isinstance(other, Point3):
            return NotImplemented
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor):
        if isinstance(factor, (Point2, Point3)):
            return NotImplemented
        return Point3(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __neg__(self):
        return Point3(-self.x, -self.y, -self.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def vector_length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def unit_vector(self) -> 'Point3':
        length = self.vector_length()
        if length > 0:
            return Point3(self.x / length, self.y / length, self.z / length)
        logger.debug('unit_vector of zero-length 3D vector; returning (1, 0, 0)')
        return Point3(1.0, 0.0, 0.0)


class PointType(enum.Enum):
    """Role of a point on a path made from straight segments and Bezier splines."""
    ON_CURVE = 0
    QUADRATIC = 1   # control point of a quadratic (conic) spline
    CUBIC = 2       # control point of a cubic spline


@dataclass(frozen=True)
class OutlinePoint:
    """A point on a path, tagged with its `PointType`."""
    point: Point2 = Point2()
    type: PointType = PointType.ON_CURVE

    @classmethod
    def from_coords(cls, x, y, type: PointType = PointType.ON_CURVE) -> 'OutlinePoint':
        return cls(Point2(x, y), type)

    @property
    def x(self):
        return self.point.x

    @property
    def y(self):
        return self.point.y

    def is_on_curve(self) -> bool:
        return self.type is PointType.ON_CURVE


@dataclass(frozen=True)
class Line:
    start: Point2 = Point2()
    end: Point2 = Point2()

    def vector(self) -> Point2:
        return self.end - self.start

    def length(self) -> float:
        return self.vector().vector_length()


class CoordType(enum.Enum):
    DEGREE = 0      # longitude (x) and latitude (y) in degrees
    DISPLAY = 1     # display pixels: x increases right, y increases down
    SCREEN = 1
    MAP = 2         # projected map units
    MAP_METER = 3   # projected metres, uncorrected for projection distortion


__all__ = [
    'Point2',
    'Point3',
    'PointType',
    'OutlinePoint',
    'Line',
    'CoordType',
]
