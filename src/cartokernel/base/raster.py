"""
raster.py

Bilinear sampling of big-endian raster data (height models and similar grids)
with a sentinel value marking missing samples.

Samples are stored row by row, `stride` samples per row, each sample holding
`channels` interleaved values in a fixed-width big-endian encoding. Decoding
goes through numpy's explicit big-endian dtypes so results do not depend on the
host byte order.

Public names:
- `read_big_endian(buffer, index, dtype)` / `write_big_endian(buffer, index, value, dtype)`
- `decode_samples(buffer, dtype)` -> native-order numpy array
- `RasterGrid` : a read-only view of an encoded sample buffer
- `interpolated_value(grid, x, y, channel, unknown_value)` -> float
- `interpolated_values(grid, xs, ys, channel, unknown_value)` -> array
- `value_at_geo(grid, X, Y, channel, unknown_value)` : sample at geographic coordinates

"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np
from affine import Affine

from cartokernel.base.config import RASTER_DEFAULTS

logger = logging.getLogger(__name__)


def sample_dtype(dtype=None) -> np.dtype:
    """Normalize `dtype` to an explicit big-endian numeric dtype."""
    dt = np.dtype(RASTER_DEFAULTS['dtype'] if dtype is None else dtype)
    if dt.kind not in 'iuf':
        raise ValueError(f'unsupported raster sample type: {dt}')
    if dt.itemsize > 1:
        dt = dt.newbyteorder('>')
    return dt


def read_big_endian(buffer, index: int, dtype=None):
    """Decode the sample at position `index` (in samples, not bytes)."""
    dt = sample_dtype(dtype)
    return np.frombuffer(buffer, dtype=dt, count=1, offset=index * dt.itemsize)[0].item()


def write_big_endian(buffer, index: int, value, dtype=None) -> None:
    """Encode `value` into a writable buffer (e.g. a bytearray) at sample position `index`."""
    dt = sample_dtype(dtype)
    view = np.frombuffer(buffer, dtype=dt, count=1, offset=index * dt.itemsize)
    view[0] = value


def decode_samples(buffer, dtype=None) -> np.ndarray:
    """Decode a whole buffer into a native byte order array."""
    dt = sample_dtype(dtype)
    return np.frombuffer(buffer, dtype=dt).astype(dt.newbyteorder('='))


@dataclass
class RasterGrid:
    """A rectangular table of encoded samples.

    Parameters
    - data: bytes-like buffer of big-endian samples, never modified
    - width, height: grid size in samples
    - stride: samples per row in the buffer (defaults to `width`)
    - channels: interleaved values per sample
    - dtype: sample encoding, e.g. '>i2' or 'u1'
    - transform: optional `affine.Affine` mapping (col, row) sample positions
      to geographic coordinates, used by `value_at_geo`. A sequence of the six
      coefficients (a, b, c, d, e, f) is converted to an `Affine`.
    """
    data: Any
    width: int
    height: int
    stride: Optional[int] = None
    channels: int = RASTER_DEFAULTS['channels']
    dtype: Any = RASTER_DEFAULTS['dtype']
    transform: Any = None
    _samples: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.stride is None:
            self.stride = self.width
        if self.width <= 0 or self.height <= 0 or self.channels <= 0:
            raise ValueError('width, height and channels must be positive')
        if self.stride < self.width:
            raise ValueError('stride must be at least the grid width')
        self.dtype = sample_dtype(self.dtype)
        if self.transform is not None and not isinstance(self.transform, Affine):
            self.transform = Affine(*self.transform[:6])
        self._samples = np.frombuffer(self.data, dtype=self.dtype)
        needed = ((self.height - 1) * self.stride + self.width) * self.channels
        if self._samples.size < needed:
            raise ValueError(f'raster buffer holds {self._samples.size} samples; {needed} required')
        logger.debug('RasterGrid %dx%d, stride %d, %d channel(s), %s',
                     self.width, self.height, self.stride, self.channels, self.dtype)

    @classmethod
    def from_array(cls, values, dtype=None, transform=None) -> 'RasterGrid':
        """Encode a (H, W) or (H, W, C) array into a new grid."""
        arr = np.asarray(values)
        if arr.ndim == 2:
            arr = arr[:, :, None]
        if arr.ndim != 3:
            raise ValueError('values must be shape (H,W) or (H,W,C)')
        dt = sample_dtype(dtype)
        data = np.ascontiguousarray(arr, dtype=dt).tobytes()
        h, w, c = arr.shape
        return cls(data, w, h, channels=c, dtype=dt, transform=transform)

    def sample_index(self, col: int, row: int, channel: int = 0) -> int:
        return (row * self.stride + col) * self.channels + channel

    def sample(self, col: int, row: int, channel: int = 0):
        """Decoded value of one sample."""
        return read_big_endian(self.data, self.sample_index(col, row, channel), self.dtype)


def _check_channel(grid, channel):
    if not 0 <= channel < grid.channels:
        raise ValueError(f'channel {channel} out of range for {grid.channels}-channel raster')


def interpolated_value(grid: RasterGrid, x: float, y: float, channel: int = 0,
                       unknown_value=RASTER_DEFAULTS['unknown_value']) -> float:
    """Bilinear interpolation of one channel at fractional position (x, y).

    The sample at (floor(x), floor(y)) is taken as known. Its right-hand
    neighbour is ignored if it holds `unknown_value`, and so is the row below
    if its (blended) value is unknown. On the last column or row the weight
    of the missing neighbour is zero.

    Raises IndexError unless 0 <= x <= width - 1 and 0 <= y <= height - 1.
    """
    _check_channel(grid, channel)
    if not (0 <= x <= grid.width - 1 and 0 <= y <= grid.height - 1):
        raise IndexError(f'({x}, {y}) outside {grid.width}x{grid.height} raster')
    col = int(math.floor(x))
    row = int(math.floor(y))
    x_fraction = 1.0 if col == grid.width - 1 else 1.0 - (x - col)
    y_fraction = 1.0 if row == grid.height - 1 else 1.0 - (y - row)

    index = grid.sample_index(col, row, channel)
    top_value = read_big_endian(grid.data, index, grid.dtype)
    if x_fraction < 1:
        top_right_value = read_big_endian(grid.data, index + grid.channels, grid.dtype)
        if top_right_value != unknown_value:
            top_value = top_value * x_fraction + top_right_value * (1.0 - x_fraction)
    value = top_value
    if y_fraction < 1:
        index += grid.stride * grid.channels
        bottom_value = read_big_endian(grid.data, index, grid.dtype)
        if x_fraction < 1:
            bottom_right_value = read_big_endian(grid.data, index + grid.channels, grid.dtype)
            if bottom_right_value != unknown_value:
                bottom_value = bottom_value * x_fraction + bottom_right_value * (1.0 - x_fraction)
        if bottom_value != unknown_value:
            value = top_value * y_fraction + bottom_value * (1.0 - y_fraction)
    return float(value)


def interpolated_values(grid: RasterGrid, xs, ys, channel: int = 0,
                        unknown_value=RASTER_DEFAULTS['unknown_value']) -> np.ndarray:
    """Vectorized `interpolated_value` over arrays of positions (same rules)."""
    _check_channel(grid, channel)
    xs, ys = np.broadcast_arrays(np.asarray(xs, dtype=float), np.asarray(ys, dtype=float))
    inside = (xs >= 0) & (xs <= grid.width - 1) & (ys >= 0) & (ys <= grid.height - 1)
    if not np.all(inside):
        raise IndexError(f'{np.count_nonzero(~inside)} position(s) outside {grid.width}x{grid.height} raster')

    col = np.floor(xs).astype(int)
    row = np.floor(ys).astype(int)
    xf = np.where(col == grid.width - 1, 1.0, 1.0 - (xs - col))
    yf = np.where(row == grid.height - 1, 1.0, 1.0 - (ys - row))
    has_right = xf < 1
    has_bottom = yf < 1
    ch = grid.channels

    s = grid._samples
    # decode only the samples touched by the requested positions
    idx = (row * grid.stride + col) * ch + channel
    top = s[idx].astype(float)
    top_right = s[np.where(has_right, idx + ch, idx)].astype(float)
    top = np.where(has_right & (top_right != unknown_value), top * xf + top_right * (1.0 - xf), top)

    bidx = np.where(has_bottom, idx + grid.stride * ch, idx)
    bottom = s[bidx].astype(float)
    bottom_right = s[np.where(has_right, bidx + ch, bidx)].astype(float)
    bottom = np.where(has_right & (bottom_right != unknown_value),
                      bottom * xf + bottom_right * (1.0 - xf), bottom)
    return np.where(has_bottom & (bottom != unknown_value), top * yf + bottom * (1.0 - yf), top)


def value_at_geo(grid: RasterGrid, X, Y, channel: int = 0,
                 unknown_value=RASTER_DEFAULTS['unknown_value']):
    """Interpolate at geographic coordinates using the grid's affine transform.

    Returns a float for scalar input, otherwise an array shaped like X.
    """
    if grid.transform is None:
        raise ValueError('value_at_geo requires a RasterGrid with a transform')
    inv = ~grid.transform
    X_a = np.asarray(X, dtype=float)
    Y_a = np.asarray(Y, dtype=float)
    cols, rows = inv * (X_a, Y_a)
    # snap round-off from the inverse transform onto the grid edges
    cols = np.where(np.isclose(cols, np.round(cols), rtol=0.0, atol=1e-9), np.round(cols), cols)
    rows = np.where(np.isclose(rows, np.round(rows), rtol=0.0, atol=1e-9), np.round(rows), rows)
    values = interpolated_values(grid, cols, rows, channel, unknown_value)
    if X_a.shape == () and Y_a.shape == ():
        return float(values)
    return values


__all__ = [
    'sample_dtype',
    'read_big_endian',
    'write_big_endian',
    'decode_samples',
    'RasterGrid',
    'interpolated_value',
    'interpolated_values',
    'value_at_geo',
]
