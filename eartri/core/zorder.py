"""Z-order (Morton) curve index over ring nodes.

For larger polygons the ear test only inspects nodes whose z-order key falls
in the key range of the candidate triangle's bounding box. Nodes are linked
into a second, linear list sorted by key, kept next to the ring links in the
arena.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .arena import NIL, NodeArena
from .constants import MORTON_MASKS, MORTON_SHIFTS, Z_ORDER_SCALE

__all__ = ['ZOrderFrame', 'z_order', 'index_curve', 'sort_linked']


@dataclass(frozen=True)
class ZOrderFrame:
    """Maps coordinates into the non-negative 15-bit integer range.

    ``inv_size`` is the inverse of the longer side of the bounding box.
    """
    min_x: float
    min_y: float
    inv_size: float

    @classmethod
    def from_coords(cls, data: Sequence[float], end: int, dim: int) -> Optional['ZOrderFrame']:
        """Bounding-box frame of the vertices in ``data[:end]``.

        Returns None when the box is degenerate (zero width and height).
        """
        min_x = max_x = data[0]
        min_y = max_y = data[1]
        for i in range(dim, end, dim):
            x = data[i]
            y = data[i + 1]
            if x < min_x:
                min_x = x
            if y < min_y:
                min_y = y
            if x > max_x:
                max_x = x
            if y > max_y:
                max_y = y

        size = max(max_x - min_x, max_y - min_y)
        if size == 0:
            return None
        return cls(min_x, min_y, 1.0 / size)


def _spread_bits(v: int) -> int:
    for shift, mask in zip(MORTON_SHIFTS, MORTON_MASKS):
        v = (v | (v << shift)) & mask
    return v


def z_order(x: float, y: float, frame: ZOrderFrame) -> int:
    """Z-order key of a point: interleaved bits of its quantised x and y."""
    ix = int(Z_ORDER_SCALE * (x - frame.min_x) * frame.inv_size)
    iy = int(Z_ORDER_SCALE * (y - frame.min_y) * frame.inv_size)
    return _spread_bits(ix) | (_spread_bits(iy) << 1)


def index_curve(arena: NodeArena, start: int, frame: ZOrderFrame) -> int:
    """Interlink the ring containing ``start`` in z-order.

    Keys are computed for nodes that do not have one yet, the ring links are
    copied into the z links, the copy is cut open and merge-sorted. Returns
    the head of the sorted list.
    """
    z = arena.z; x = arena.x; y = arena.y
    nxt = arena.next; prv = arena.prev
    prev_z = arena.prev_z; next_z = arena.next_z

    p = start
    while True:
        if z[p] == NIL:
            z[p] = z_order(x[p], y[p], frame)
        prev_z[p] = prv[p]
        next_z[p] = nxt[p]
        p = nxt[p]
        if p == start:
            break

    next_z[prev_z[p]] = NIL
    prev_z[p] = NIL
    return sort_linked(arena, p)


def sort_linked(arena: NodeArena, head: int) -> int:
    """Sort a z-linked list by key in place; returns the new head.

    Simon Tatham's bottom-up linked list merge sort: runs of ``in_size`` are
    merged pairwise and ``in_size`` doubles until a pass performs a single
    merge. Ties keep the node from the left run first.
    """
    z = arena.z
    prev_z = arena.prev_z; next_z = arena.next_z
    in_size = 1

    while True:
        p = head
        head = NIL
        tail = NIL
        num_merges = 0

        while p != NIL:
            num_merges += 1
            q = p
            p_size = 0
            for _ in range(in_size):
                p_size += 1
                q = next_z[q]
                if q == NIL:
                    break
            q_size = in_size

            while p_size > 0 or (q_size > 0 and q != NIL):
                if p_size != 0 and (q_size == 0 or q == NIL or z[p] <= z[q]):
                    e = p
                    p = next_z[p]
                    p_size -= 1
                else:
                    e = q
                    q = next_z[q]
                    q_size -= 1

                if tail != NIL:
                    next_z[tail] = e
                else:
                    head = e
                prev_z[e] = tail
                tail = e

            p = q

        next_z[tail] = NIL
        if num_merges <= 1:
            return head
        in_size *= 2
