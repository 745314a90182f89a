"""Geometric kernel: point/vector primitives, rectangle algebra and clipping,
strided coordinate views with polygon/distance queries, bilinear raster
sampling and spherical-earth distance/bearing.
"""
from cartokernel.base.points import CoordType, Line, OutlinePoint, Point2, Point3, PointType
from cartokernel.base.rect import Rect, RectFP, RegionFlag
from cartokernel.base.coords import (
    CoordSet,
    WritableCoordSet,
    coord_pair,
    coord_set_from_arrays,
    coord_set_from_points,
    coord_set_of_two_points,
)
from cartokernel.base.raster import RasterGrid, interpolated_value, interpolated_values, value_at_geo
from cartokernel.base.geo import azimuth_in_degrees, great_circle_distance_in_meters

__all__ = [
    'CoordType', 'Line', 'OutlinePoint', 'Point2', 'Point3', 'PointType',
    'Rect', 'RectFP', 'RegionFlag',
    'CoordSet', 'WritableCoordSet', 'coord_pair', 'coord_set_from_arrays',
    'coord_set_from_points', 'coord_set_of_two_points',
    'RasterGrid', 'interpolated_value', 'interpolated_values', 'value_at_geo',
    'azimuth_in_degrees', 'great_circle_distance_in_meters',
]
