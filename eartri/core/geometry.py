"""Geometry primitives used by the ear-clipping engine.

Two flavours live here:

* coordinate-level helpers (``point_in_triangle``, ``ring_signed_area``,
  vectorised triangle areas) operating on raw floats or numpy arrays;
* node-level predicates taking a :class:`~eartri.core.arena.NodeArena` and
  node handles (``area``, ``equals``, ``intersects``, ``locally_inside`` ...).

All comparisons are exact; no tolerance is applied. Callers that need one
must snap their coordinates beforehand.
"""
from __future__ import annotations

import numpy as np

from .arena import NodeArena

__all__ = [
    'triangles_signed_areas', 'ring_signed_area', 'point_in_triangle',
    'area', 'equals', 'intersects', 'on_segment', 'intersects_polygon',
    'locally_inside', 'middle_inside', 'sector_contains_sector',
]


# ---------------------------------------------------------------------------
# Coordinate-level helpers
# ---------------------------------------------------------------------------

def triangles_signed_areas(points, tris):
    """Vectorized signed area for a batch of triangles.

    points: (N,2) float array
    tris:   (M,3) int array
    Returns: (M,) float64 array of signed areas (0.5 * cross).
    """
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(tris, dtype=np.int64).reshape(-1, 3)
    if T.size == 0:
        return np.empty((0,), dtype=np.float64)
    p0 = pts[T[:, 0]]; p1 = pts[T[:, 1]]; p2 = pts[T[:, 2]]
    e1 = p1 - p0; e2 = p2 - p0
    return 0.5 * (e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])


def ring_signed_area(data, start, end, dim):
    """Twice the signed area of the ring stored in ``data[start:end]``.

    Positive for rings that are counter-clockwise in a y-up frame. The sum
    walks edges from the last vertex back to the first, matching the winding
    test used when rings are built.
    """
    total = 0.0
    j = end - dim
    for i in range(start, end, dim):
        total += (data[j] - data[i]) * (data[i + 1] + data[j + 1])
        j = i
    return total


def point_in_triangle(ax, ay, bx, by, cx, cy, px, py):
    """Check if point p lies within (or on the border of) convex triangle abc."""
    return ((cx - px) * (ay - py) - (ax - px) * (cy - py) >= 0 and
            (ax - px) * (by - py) - (bx - px) * (ay - py) >= 0 and
            (bx - px) * (cy - py) - (cx - px) * (by - py) >= 0)


# ---------------------------------------------------------------------------
# Node-level predicates
# ---------------------------------------------------------------------------

def area(arena: NodeArena, p: int, q: int, r: int) -> float:
    """Signed area of the node triangle (p, q, r); negative for a convex turn
    under the canonical ring winding."""
    x = arena.x; y = arena.y
    return (y[q] - y[p]) * (x[r] - x[q]) - (x[q] - x[p]) * (y[r] - y[q])


def equals(arena: NodeArena, p: int, q: int) -> bool:
    return arena.x[p] == arena.x[q] and arena.y[p] == arena.y[q]


def _sign(v: float) -> int:
    if v > 0:
        return 1
    if v < 0:
        return -1
    return 0


def on_segment(arena: NodeArena, p: int, q: int, r: int) -> bool:
    """For collinear p, q, r: does q lie on segment pr."""
    x = arena.x; y = arena.y
    return (min(x[p], x[r]) <= x[q] <= max(x[p], x[r]) and
            min(y[p], y[r]) <= y[q] <= max(y[p], y[r]))


def intersects(arena: NodeArena, p1: int, q1: int, p2: int, q2: int) -> bool:
    """Segments p1q1 and p2q2 intersect, including collinear touching."""
    o1 = _sign(area(arena, p1, q1, p2))
    o2 = _sign(area(arena, p1, q1, q2))
    o3 = _sign(area(arena, p2, q2, p1))
    o4 = _sign(area(arena, p2, q2, q1))

    if o1 != o2 and o3 != o4:
        return True

    if o1 == 0 and on_segment(arena, p1, p2, q1):
        return True
    if o2 == 0 and on_segment(arena, p1, q2, q1):
        return True
    if o3 == 0 and on_segment(arena, p2, p1, q2):
        return True
    if o4 == 0 and on_segment(arena, p2, q1, q2):
        return True
    return False


def intersects_polygon(arena: NodeArena, a: int, b: int) -> bool:
    """Diagonal ab crosses some ring edge not incident to a or b."""
    nxt = arena.next; idx = arena.i
    ai = idx[a]; bi = idx[b]
    p = a
    while True:
        pn = nxt[p]
        pi = idx[p]; pni = idx[pn]
        if pi != ai and pni != ai and pi != bi and pni != bi and intersects(arena, p, pn, a, b):
            return True
        p = pn
        if p == a:
            break
    return False


def locally_inside(arena: NodeArena, a: int, b: int) -> bool:
    """Diagonal ab starts into the polygon interior at vertex a."""
    ap = arena.prev[a]; an = arena.next[a]
    if area(arena, ap, a, an) < 0:
        return area(arena, a, b, an) >= 0 and area(arena, a, ap, b) >= 0
    return area(arena, a, b, ap) < 0 or area(arena, a, an, b) < 0


def middle_inside(arena: NodeArena, a: int, b: int) -> bool:
    """The midpoint of diagonal ab lies inside the ring (even-odd rule)."""
    x = arena.x; y = arena.y; nxt = arena.next
    px = (x[a] + x[b]) / 2
    py = (y[a] + y[b]) / 2
    inside = False
    p = a
    while True:
        pn = nxt[p]
        if ((y[p] > py) != (y[pn] > py) and y[pn] != y[p] and
                px < (x[pn] - x[p]) * (py - y[p]) / (y[pn] - y[p]) + x[p]):
            inside = not inside
        p = pn
        if p == a:
            break
    return inside


def sector_contains_sector(arena: NodeArena, m: int, p: int) -> bool:
    """Whether the sector at vertex m contains the sector at p (same coordinates)."""
    return (area(arena, arena.prev[m], m, arena.prev[p]) < 0 and
            area(arena, arena.next[p], m, arena.next[m]) < 0)
