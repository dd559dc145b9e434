"""Ring construction, degenerate-point filtering and the split/bridge primitive."""
from __future__ import annotations

from typing import Sequence

from .arena import NIL, NodeArena
from .geometry import area, equals, ring_signed_area

__all__ = ['build_ring', 'filter_points', 'split_polygon', 'get_leftmost']


def build_ring(arena: NodeArena, data: Sequence[float], start: int, end: int, dim: int,
               clockwise: bool) -> int:
    """Create a circular doubly linked ring from ``data[start:end]``.

    The slice is inserted forwards when its natural winding matches
    ``clockwise`` and backwards otherwise, so every ring of a given kind ends
    up with the same canonical winding. Returns the last inserted node, or
    ``NIL`` for an empty slice.
    """
    last = NIL
    if clockwise == (ring_signed_area(data, start, end, dim) > 0):
        for i in range(start, end, dim):
            last = arena.insert_node(i, data[i], data[i + 1], last)
    else:
        for i in reversed(range(start, end, dim)):
            last = arena.insert_node(i, data[i], data[i + 1], last)

    # closing vertex repeated
    if last != NIL and equals(arena, last, arena.next[last]):
        arena.remove_node(last)
        last = arena.next[last]
    return last


def filter_points(arena: NodeArena, start: int, end: int = NIL) -> int:
    """Remove duplicate and collinear points between ``start`` and ``end``.

    Steiner nodes are kept. After each removal the scan restarts from the
    removed node's predecessor, which also becomes the new end marker.
    Returns the (possibly relocated) end marker.
    """
    if start == NIL:
        return start
    if end == NIL:
        end = start

    nxt = arena.next; prv = arena.prev; steiner = arena.steiner
    p = start
    while True:
        again = False
        if not steiner[p] and (equals(arena, p, nxt[p]) or area(arena, prv[p], p, nxt[p]) == 0):
            arena.remove_node(p)
            p = end = prv[p]
            if p == nxt[p]:
                break
            again = True
        else:
            p = nxt[p]

        if not again and p == end:
            break
    return end


def split_polygon(arena: NodeArena, a: int, b: int) -> int:
    """Link ``a`` and ``b`` with a bridge.

    ``a`` and ``b`` are cloned into ``a2`` and ``b2`` and the links rewired
    so that one ring reads ``a -> b -> ...`` and the other
    ``b2 -> a2 -> ...``. Nodes of the same ring are split into two rings;
    nodes of two different rings (outer ring and hole) are merged into one.
    Returns ``b2``.
    """
    a2 = arena.alloc(arena.i[a], arena.x[a], arena.y[a])
    b2 = arena.alloc(arena.i[b], arena.x[b], arena.y[b])
    nxt = arena.next; prv = arena.prev
    an = nxt[a]
    bp = prv[b]

    nxt[a] = b
    prv[b] = a

    nxt[a2] = an
    prv[an] = a2

    nxt[b2] = a2
    prv[a2] = b2

    nxt[bp] = b2
    prv[b2] = bp
    return b2


def get_leftmost(arena: NodeArena, start: int) -> int:
    """Leftmost node of a ring (lowest y breaks ties)."""
    x = arena.x; y = arena.y
    leftmost = start
    for p in arena.ring(start):
        if x[p] < x[leftmost] or (x[p] == x[leftmost] and y[p] < y[leftmost]):
            leftmost = p
    return leftmost
