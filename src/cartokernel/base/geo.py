"""Great-circle distance and azimuth on a spherical earth.

Both functions take longitude/latitude pairs in degrees and accept scalars or
numpy arrays (broadcast together); scalar input returns a float.
"""
import logging

import numpy as np

from cartokernel.base.config import DEGREES_TO_RADIANS, RADIANS_TO_DEGREES, RADIANS_TO_METRES

logger = logging.getLogger(__name__)


def _radians(*values):
    return [np.asarray(v, dtype=float) * DEGREES_TO_RADIANS for v in values]


def _result(arr):
    return float(arr) if np.ndim(arr) == 0 else arr


def great_circle_distance_in_meters(lon1, lat1, lon2, lat2):
    """Distance along the surface of a sphere with the WGS84 equatorial radius.

    Uses the spherical law of cosines. Rounding can push the cosine of the
    angle slightly past 1 for nearly identical points, so it is clamped to
    [-1, 1] before `arccos`; coincident points give exactly 0.
    """
    lon1, lat1, lon2, lat2 = _radians(lon1, lat1, lon2, lat2)
    cos_angle = np.sin(lat1) * np.sin(lat2) + np.cos(lat1) * np.cos(lat2) * np.cos(lon2 - lon1)
    overshoot = np.count_nonzero(np.abs(cos_angle) > 1.0)
    if overshoot:
        logger.debug('great_circle_distance_in_meters: clamped %d cosine value(s) outside [-1, 1]', overshoot)
    angle = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    angle = np.where((lon1 == lon2) & (lat1 == lat2), 0.0, angle)
    return _result(angle * RADIANS_TO_METRES)


def azimuth_in_degrees(lon1, lat1, lon2, lat2):
    """Initial bearing from the first point to the second.

    North is 0 and angles increase clockwise, in [0, 360). Coincident points
    give 0.
    """
    lon1, lat1, lon2, lat2 = _radians(lon1, lat1, lon2, lat2)
    dlon = lon2 - lon1
    y = np.sin(dlon) * np.cos(lat2)
    x = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    deg = np.mod(np.arctan2(y, x) * RADIANS_TO_DEGREES, 360.0) + 0.0
    # tiny negative angles round up to exactly 360
    deg = np.where(deg >= 360.0, 0.0, deg)
    return _result(deg)


__all__ = ['great_circle_distance_in_meters', 'azimuth_in_degrees']
