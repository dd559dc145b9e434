"""Ear-clipping engine.

The ring is consumed by cutting ears one by one. When a full lap finds no
ear the fragment escalates through increasingly aggressive phases:

``PLAIN``  fresh ring (the z-order index is rebuilt here when enabled)
``CURED``  duplicate/collinear points removed, ears retried; a stuck lap
           cuts away small local self-intersections
``SPLIT``  retried after the cure; a stuck lap splits the ring

A ring still stuck in ``SPLIT`` is split along a valid diagonal into
two rings, each pushed back as a new ``PLAIN`` fragment. Fragments live on
an explicit stack, so adversarial inputs that force many splits cannot
exhaust the interpreter's call stack. Every step either removes a node or
hands two strictly smaller rings back to the stack, so the loop terminates.
"""
from __future__ import annotations

import enum
from typing import List, Optional, Tuple

from .arena import NIL, NodeArena
from .geometry import (area, equals, intersects, intersects_polygon, locally_inside,
                       middle_inside, point_in_triangle)
from .logging_utils import get_logger
from .ring import filter_points, split_polygon
from .zorder import ZOrderFrame, index_curve, z_order

logger = get_logger('eartri.earclip')

__all__ = [
    'Phase', 'earcut_linked', 'is_ear', 'is_ear_hashed', 'cure_local_intersections',
    'split_earcut', 'is_valid_diagonal',
]


class Phase(enum.IntEnum):
    PLAIN = 0
    CURED = 1
    SPLIT = 2


def earcut_linked(arena: NodeArena, ear: int, triangles: List[int], dim: int,
                  frame: Optional[ZOrderFrame] = None, log_phases: bool = True) -> None:
    """Triangulate the ring containing ``ear``, appending vertex indices to ``triangles``."""
    prv = arena.prev; nxt = arena.next; idx = arena.i
    stack: List[Tuple[int, Phase]] = [(ear, Phase.PLAIN)]

    while stack:
        ear, phase = stack.pop()
        if ear == NIL:
            continue

        if phase is Phase.PLAIN and frame is not None:
            index_curve(arena, ear, frame)

        stop = ear
        while prv[ear] != nxt[ear]:
            p = prv[ear]
            n = nxt[ear]

            if is_ear_hashed(arena, ear, frame) if frame is not None else is_ear(arena, ear):
                triangles.append(idx[p] // dim)
                triangles.append(idx[ear] // dim)
                triangles.append(idx[n] // dim)

                arena.remove_node(ear)

                # skipping the next vertex leads to fewer sliver triangles
                ear = nxt[n]
                stop = ear
                continue

            ear = n

            if ear == stop:
                _escalate(arena, ear, phase, triangles, dim, stack, log_phases)
                break


def _escalate(arena, ear, phase, triangles, dim, stack, log_phases):
    """Queue the next attempt for a ring on which a full lap found no ear."""
    if phase is Phase.PLAIN:
        nxt_ear = filter_points(arena, ear)
        stack.append((nxt_ear, Phase.CURED))
    elif phase is Phase.CURED:
        nxt_ear = cure_local_intersections(arena, filter_points(arena, ear), triangles, dim)
        stack.append((nxt_ear, Phase.SPLIT))
    else:
        halves = split_earcut(arena, ear)
        if halves is None:
            logger.debug("no valid diagonal in stuck ring at offset %d; fragment left untriangulated",
                         arena.i[ear])
            return
        a, c = halves
        # LIFO: the first half is finished before the second is started
        stack.append((c, Phase.PLAIN))
        stack.append((a, Phase.PLAIN))
    if log_phases:
        logger.debug("ear search stuck in phase %s; escalating", phase.name)


def is_ear(arena: NodeArena, ear: int) -> bool:
    """Check whether ``ear`` forms a valid ear with its ring neighbours."""
    a = arena.prev[ear]
    b = ear
    c = arena.next[ear]

    if area(arena, a, b, c) >= 0:
        return False  # reflex, can't be an ear

    x = arena.x; y = arena.y; nxt = arena.next; prv = arena.prev
    ax = x[a]; ay = y[a]; bx = x[b]; by = y[b]; cx = x[c]; cy = y[c]

    # triangle bbox
    x0 = min(ax, bx, cx); y0 = min(ay, by, cy)
    x1 = max(ax, bx, cx); y1 = max(ay, by, cy)

    p = nxt[c]
    while p != a:
        px = x[p]; py = y[p]
        if (x0 <= px <= x1 and y0 <= py <= y1 and
                point_in_triangle(ax, ay, bx, by, cx, cy, px, py) and
                area(arena, prv[p], p, nxt[p]) >= 0):
            return False
        p = nxt[p]
    return True


def is_ear_hashed(arena: NodeArena, ear: int, frame: ZOrderFrame) -> bool:
    """Ear test restricted to nodes whose z-order key lies in the triangle's key range."""
    a = arena.prev[ear]
    b = ear
    c = arena.next[ear]

    if area(arena, a, b, c) >= 0:
        return False  # reflex, can't be an ear

    x = arena.x; y = arena.y; nxt = arena.next; prv = arena.prev
    z = arena.z; prev_z = arena.prev_z; next_z = arena.next_z
    ax = x[a]; ay = y[a]; bx = x[b]; by = y[b]; cx = x[c]; cy = y[c]

    x0 = min(ax, bx, cx); y0 = min(ay, by, cy)
    x1 = max(ax, bx, cx); y1 = max(ay, by, cy)

    # z-order range for the current triangle bbox
    min_z = z_order(x0, y0, frame)
    max_z = z_order(x1, y1, frame)

    def traps(q):
        qx = x[q]; qy = y[q]
        return (x0 <= qx <= x1 and y0 <= qy <= y1 and q != a and q != c and
                point_in_triangle(ax, ay, bx, by, cx, cy, qx, qy) and
                area(arena, prv[q], q, nxt[q]) >= 0)

    p = prev_z[ear]
    n = next_z[ear]

    # look for points inside the triangle in both directions
    while p != NIL and z[p] >= min_z and n != NIL and z[n] <= max_z:
        if traps(p):
            return False
        p = prev_z[p]
        if traps(n):
            return False
        n = next_z[n]

    # remaining points in decreasing z-order
    while p != NIL and z[p] >= min_z:
        if traps(p):
            return False
        p = prev_z[p]

    # remaining points in increasing z-order
    while n != NIL and z[n] <= max_z:
        if traps(n):
            return False
        n = next_z[n]

    return True


def cure_local_intersections(arena: NodeArena, start: int, triangles: List[int], dim: int) -> int:
    """Cut away small local self-intersections.

    For each node ``p`` where segment ``(p.prev, p.next.next)`` crosses
    ``(p, p.next)``, the triangle ``(p.prev, p, p.next.next)`` is emitted and
    ``p`` and ``p.next`` are dropped. Returns the filtered remainder.
    """
    prv = arena.prev; nxt = arena.next; idx = arena.i
    p = start
    while True:
        a = prv[p]
        b = nxt[nxt[p]]

        if (not equals(arena, a, b) and intersects(arena, a, p, nxt[p], b) and
                locally_inside(arena, a, b) and locally_inside(arena, b, a)):
            triangles.append(idx[a] // dim)
            triangles.append(idx[p] // dim)
            triangles.append(idx[b] // dim)

            # remove the two nodes involved
            arena.remove_node(p)
            arena.remove_node(nxt[p])

            p = start = b

        p = nxt[p]
        if p == start:
            break

    return filter_points(arena, p)


def split_earcut(arena: NodeArena, start: int) -> Optional[Tuple[int, int]]:
    """Split the ring along the first valid diagonal found.

    Returns the (filtered) start nodes of the two resulting rings, or None
    when no valid diagonal exists.
    """
    prv = arena.prev; nxt = arena.next; idx = arena.i
    a = start
    while True:
        b = nxt[nxt[a]]
        while b != prv[a]:
            if idx[a] != idx[b] and is_valid_diagonal(arena, a, b):
                c = split_polygon(arena, a, b)

                # filter collinear points around the cuts
                a = filter_points(arena, a, nxt[a])
                c = filter_points(arena, c, nxt[c])
                return a, c
            b = nxt[b]
        a = nxt[a]
        if a == start:
            break
    return None


def is_valid_diagonal(arena: NodeArena, a: int, b: int) -> bool:
    """Check if diagonal ab lies in the polygon interior and can split it."""
    prv = arena.prev; nxt = arena.next; idx = arena.i
    if idx[nxt[a]] == idx[b] or idx[prv[a]] == idx[b]:
        return False
    if intersects_polygon(arena, a, b):
        return False
    if (locally_inside(arena, a, b) and locally_inside(arena, b, a) and middle_inside(arena, a, b) and
            # does not create opposite-facing sectors
            (area(arena, prv[a], a, prv[b]) != 0 or area(arena, a, prv[b], b) != 0)):
        return True
    # zero-length diagonal between coincident convex corners
    return (equals(arena, a, b) and area(arena, prv[a], a, nxt[a]) > 0 and
            area(arena, prv[b], b, nxt[b]) > 0)
