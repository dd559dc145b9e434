"""Hole elimination: bridge every hole ring into the outer ring.

Holes are visited left to right by their leftmost vertex. For each one a
bridge vertex on the (already merged) outer ring is found with David
Eberly's ray-casting construction and the two rings are joined with
:func:`~eartri.core.ring.split_polygon`, leaving a single ring without holes.
"""
from __future__ import annotations

import math
from typing import Sequence

from .arena import NIL, NodeArena
from .geometry import locally_inside, point_in_triangle, sector_contains_sector
from .logging_utils import get_logger
from .ring import build_ring, filter_points, get_leftmost, split_polygon

logger = get_logger('eartri.holes')

__all__ = ['eliminate_holes', 'eliminate_hole', 'find_hole_bridge']


def eliminate_holes(arena: NodeArena, data: Sequence[float], hole_starts: Sequence[int],
                    outer_node: int, dim: int) -> int:
    """Link every hole into the outer ring; returns the new outer node."""
    queue = []
    n_holes = len(hole_starts)
    for k in range(n_holes):
        start = hole_starts[k] * dim
        end = hole_starts[k + 1] * dim if k < n_holes - 1 else len(data)
        ring = build_ring(arena, data, start, end, dim, False)
        if ring == arena.next[ring]:
            arena.steiner[ring] = True
        queue.append(get_leftmost(arena, ring))

    x = arena.x; y = arena.y
    queue.sort(key=lambda h: (x[h], y[h]))

    for hole in queue:
        outer_node = eliminate_hole(arena, hole, outer_node)
    return outer_node


def eliminate_hole(arena: NodeArena, hole: int, outer_node: int) -> int:
    """Bridge one hole into the outer ring.

    A hole without a usable bridge is left out of the ring; its area is then
    simply not triangulated.
    """
    bridge = find_hole_bridge(arena, hole, outer_node)
    if bridge == NIL:
        logger.debug("no bridge for hole starting at offset %d; hole dropped", arena.i[hole])
        return outer_node

    bridge_reverse = split_polygon(arena, bridge, hole)

    # filter collinear points around the cuts
    filter_points(arena, bridge_reverse, arena.next[bridge_reverse])
    return filter_points(arena, bridge, arena.next[bridge])


def find_hole_bridge(arena: NodeArena, hole: int, outer_node: int) -> int:
    """Find the outer-ring vertex to connect with the hole's leftmost vertex."""
    x = arena.x; y = arena.y; nxt = arena.next
    hx = x[hole]
    hy = y[hole]
    qx = -math.inf
    m = NIL

    # cast a ray from the hole point to the left; the intersected segment's
    # endpoint with lesser x is a potential connection point
    p = outer_node
    while True:
        pn = nxt[p]
        if hy <= y[p] and hy >= y[pn] and y[pn] != y[p]:
            qx_candidate = x[p] + (hy - y[p]) * (x[pn] - x[p]) / (y[pn] - y[p])
            if hx >= qx_candidate > qx:
                qx = qx_candidate
                if qx_candidate == hx:
                    if hy == y[p]:
                        return p
                    if hy == y[pn]:
                        return pn
                m = p if x[p] < x[pn] else pn
        p = pn
        if p == outer_node:
            break

    if m == NIL:
        return NIL

    if hx == qx:
        # hole touches an outer segment
        return arena.prev[m]

    # look for reflex vertices inside the triangle (hole point, ray hit, m);
    # if there are none, m is visible. Otherwise pick the one with the
    # minimum angle to the ray.
    stop = m
    mx = x[m]
    my = y[m]
    tan_min = math.inf

    p = m
    while True:
        px = x[p]; py = y[p]
        if (hx >= px >= mx and hx != px and
                point_in_triangle(hx if hy < my else qx, hy, mx, my, qx if hy < my else hx, hy, px, py)):
            tan = abs(hy - py) / (hx - px)
            if locally_inside(arena, p, hole) and (
                    tan < tan_min or
                    (tan == tan_min and (px > x[m] or (px == x[m] and sector_contains_sector(arena, m, p))))):
                m = p
                tan_min = tan
        p = nxt[p]
        if p == stop:
            break
    return m
