# -*- coding: utf-8 -*-

"""
base/config.py

Centralizes the numeric constants and defaults shared by the geometric kernel.
Keeping them in one place ensures the rectangle, raster and geo modules agree on
integer limits, sentinel values and earth dimensions.

Contents:
---------
1. INTEGER LIMITS:
   - 32-bit bounds used by integer rectangles (`Rect.maximal()`) and by the
     integer point comparison key.

2. EARTH / ANGLE CONSTANTS:
   - WGS84 semi-major axis used for great-circle distances.
   - Degree/radian conversion factors.

3. RASTER_DEFAULTS:
   - Default sample encoding and sentinel "unknown" value for the raster sampler.
     Both can be overridden per call.

Usage:
------
    from cartokernel.base.config import EQUATORIAL_RADIUS_IN_METRES, RASTER_DEFAULTS

"""
import math
from types import MappingProxyType

# ───────────────────────────────────────────────────────────────────────────────
# 1) INTEGER LIMITS
# ───────────────────────────────────────────────────────────────────────────────
INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

# ───────────────────────────────────────────────────────────────────────────────
# 2) EARTH / ANGLE CONSTANTS
# ───────────────────────────────────────────────────────────────────────────────
# Semi-major axis (equatorial radius) of the WGS 84 datum, in metres.
EQUATORIAL_RADIUS_IN_METRES = 6378137
# Converts an angle on a spherical earth to a distance along its surface.
RADIANS_TO_METRES = float(EQUATORIAL_RADIUS_IN_METRES)
DEGREES_TO_RADIANS = math.pi / 180.0
RADIANS_TO_DEGREES = 180.0 / math.pi

# ───────────────────────────────────────────────────────────────────────────────
# 3) RASTER DEFAULTS
# ───────────────────────────────────────────────────────────────────────────────
RASTER_DEFAULTS = MappingProxyType({
    'dtype': '>i2',             # big-endian signed 16-bit samples (height data)
    'unknown_value': -32768,    # sentinel marking absent data
    'channels': 1,
})
