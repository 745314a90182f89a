"""
polygon.py

Distance and point-in-polygon queries over coordinate arrays. The single-contour
functions take plain x/y arrays (usually the numpy views exposed by
`CoordSet.xs` / `CoordSet.ys`) and are vectorized over the edges.

Public functions:
- `distance_from_point(xs, ys, x, y, is_polygon)` -> (distance, nearest_x, nearest_y)
- `polygon_contains(xs, ys, x, y)` -> bool
- `polygon_contains_points(xs, ys, px, py)` -> bool array
- `contours_distance_from_point(contours, x, y, is_polygon)`
- `contours_contain(contours, x, y)`
- `nearest_feature(features, x, y, is_polygon)` -> (index, distance, nearest_x, nearest_y)

Point-in-polygon uses the crossing-number rule with a half-open edge test:
an edge is crossed by the horizontal ray from (x, y) towards +x when exactly
one of its endpoints has a y coordinate strictly greater than `y`, and the
crossing lies strictly to the right of `x`. A vertex touching the ray is
therefore counted once, and boundary points classify the same way on every
call: points on edges facing -x or -y are inside, points on edges facing +x
or +y are outside.
"""
import logging
from typing import Sequence, Tuple

import numpy as np

from cartokernel.base.rect import RectFP
from cartokernel.base.utils import safe_build_kdtree

logger = logging.getLogger(__name__)


def _edges(xs, ys, closed):
    """Return start/end coordinate arrays for the edges of a chain."""
    if closed:
        return xs, ys, np.roll(xs, -1), np.roll(ys, -1)
    return xs[:-1], ys[:-1], xs[1:], ys[1:]


def distance_from_point(xs, ys, x: float, y: float, is_polygon: bool = False) -> Tuple[float, float, float]:
    """Minimum distance from (x, y) to a chain of segments, and the nearest point.

    Parameters
    - xs, ys: 1-D arrays of vertex coordinates
    - x, y: query point
    - is_polygon: if True and there are more than two vertices, the chain is
      closed with a segment from the last vertex back to the first

    Returns
    - (distance, nearest_x, nearest_y). When several segments are equally
      near, the lowest-index segment wins.
    """
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    n = xs.size
    if n == 0:
        raise ValueError('distance_from_point requires at least one vertex')
    if n == 1:
        return float(np.hypot(x - xs[0], y - ys[0])), float(xs[0]), float(ys[0])

    x0, y0, x1, y1 = _edges(xs, ys, is_polygon and n > 2)
    vx = x1 - x0
    vy = y1 - y0
    denom = vx * vx + vy * vy
    # zero-length segments project onto their start point
    t = np.divide((x - x0) * vx + (y - y0) * vy, denom, out=np.zeros_like(denom), where=denom > 0)
    t = np.clip(t, 0.0, 1.0)
    cx = x0 + t * vx
    cy = y0 + t * vy
    d2 = (x - cx) ** 2 + (y - cy) ** 2
    idx = int(np.argmin(d2))
    return float(np.sqrt(d2[idx])), float(cx[idx]), float(cy[idx])


def _crossings(xs, ys, px, py):
    """Boolean matrix (M, N): does the ray from point m cross edge n."""
    x0, y0, x1, y1 = _edges(xs, ys, True)
    px = px[:, None]
    py = py[:, None]
    straddles = (y0[None, :] > py) != (y1[None, :] > py)
    dy = np.broadcast_to(y1 - y0, straddles.shape)
    num = (py - y0[None, :]) * (x1 - x0)[None, :]
    # straddling edges are never horizontal, so dy != 0 wherever it is used
    x_cross = x0[None, :] + np.divide(num, dy, out=np.zeros(straddles.shape), where=straddles)
    return straddles & (px < x_cross)


def polygon_contains_points(xs, ys, px, py) -> np.ndarray:
    """Vectorized point-in-polygon test for arrays of points.

    The polygon is always closed. Fewer than three vertices enclose nothing.
    """
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    px = np.atleast_1d(np.asarray(px, dtype=float))
    py = np.atleast_1d(np.asarray(py, dtype=float))
    if xs.size == 0:
        raise ValueError('polygon_contains requires at least one vertex')
    if xs.size < 3:
        return np.zeros(px.shape, dtype=bool)
    hits = _crossings(xs, ys, px.ravel(), py.ravel())
    inside = (np.count_nonzero(hits, axis=1) % 2) == 1
    return inside.reshape(px.shape)


def polygon_contains(xs, ys, x: float, y: float) -> bool:
    return bool(polygon_contains_points(xs, ys, x, y)[0])


def _as_contours(feature):
    # a single view, or a sequence of views
    if hasattr(feature, 'xs'):
        return [feature]
    return list(feature)


def contours_distance_from_point(contours: Sequence, x: float, y: float,
                                 is_polygon: bool = False) -> Tuple[float, float, float]:
    """Nearest distance over several contours (objects exposing `xs`/`ys`)."""
    contours = _as_contours(contours)
    if not contours:
        raise ValueError('contours_distance_from_point requires at least one contour')
    best = None
    for c in contours:
        result = distance_from_point(c.xs, c.ys, x, y, is_polygon)
        if best is None or result[0] < best[0]:
            best = result
    return best


def contours_contain(contours: Sequence, x: float, y: float) -> bool:
    """Even-odd membership over all contours, so nested contours act as holes."""
    inside = False
    for c in _as_contours(contours):
        if polygon_contains(c.xs, c.ys, x, y):
            inside = not inside
    return inside


def _feature_bounds(contours) -> RectFP:
    return RectFP.from_points(np.concatenate([c.xs for c in contours]),
                              np.concatenate([c.ys for c in contours]))


def nearest_feature(features: Sequence, x: float, y: float,
                    is_polygon: bool = False) -> Tuple[int, float, float, float]:
    """Find the feature nearest to (x, y).

    Parameters
    - features: sequence of features; each is a coordinate view or a
      sequence of coordinate views (its contours)
    - x, y: query point
    - is_polygon: treat every contour as closed

    Strategy
    - The feature owning the nearest vertex (KD-tree query) gives an initial
      upper bound on the answer.
    - Features are then visited in order of distance to their bounding
      rectangle; the search stops once that distance exceeds the best found.

    Returns
    - (index, distance, nearest_x, nearest_y); ties go to the lowest index.
    """
    feats = [_as_contours(f) for f in features]
    if not feats:
        raise ValueError('nearest_feature requires at least one feature')

    vertices = []
    owners = []
    for i, contours in enumerate(feats):
        for c in contours:
            pts = np.column_stack([np.asarray(c.xs, dtype=float), np.asarray(c.ys, dtype=float)])
            vertices.append(pts)
            owners.append(np.full(pts.shape[0], i, dtype=int))
    vertices = np.concatenate(vertices) if vertices else np.zeros((0, 2))
    owners = np.concatenate(owners) if owners else np.zeros(0, dtype=int)

    best_index = None
    best = None
    tree = safe_build_kdtree(vertices, name='feature_vertex_tree')
    if tree is not None:
        _, vi = tree.query([x, y], k=1)
        best_index = int(owners[int(vi)])
        best = contours_distance_from_point(feats[best_index], x, y, is_polygon)

    box_dist = [_feature_bounds(c).distance_to_point(x, y) for c in feats]
    visited = 0
    for i in np.argsort(box_dist, kind='stable'):
        i = int(i)
        if best is not None and box_dist[i] > best[0]:
            break
        if i == best_index:
            continue
        visited += 1
        result = contours_distance_from_point(feats[i], x, y, is_polygon)
        if best is None or result[0] < best[0] or (result[0] == best[0] and i < best_index):
            best_index = i
            best = result
    logger.debug('nearest_feature: evaluated %d of %d features after seeding', visited, len(feats))
    return (best_index,) + tuple(best)


__all__ = [
    'distance_from_point',
    'polygon_contains',
    'polygon_contains_points',
    'contours_distance_from_point',
    'contours_contain',
    'nearest_feature',
]
