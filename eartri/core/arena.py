"""Pooled storage for ring vertex nodes.

Every node lives in a :class:`NodeArena` and is addressed by an integer
handle. Node fields are stored column-wise in parallel lists, so a node is
the tuple ``(i[h], x[h], y[h], prev[h], next[h], z[h], prev_z[h], next_z[h],
steiner[h])``. ``NIL`` terminates the (non-circular) z-order list and marks
an uncomputed z-order key.

The arena is plain mutable state: two triangulations must never run against
the same arena at the same time.
"""
from __future__ import annotations

from typing import Iterator, List

NIL = -1


class NodeArena:
    """Bump allocator of ring nodes with explicit reset/release.

    ``reset()`` rewinds the allocation pointer so previously issued handles
    become dead and their slots are reused; the backing lists keep their
    capacity. ``release()`` drops the storage altogether.
    """

    __slots__ = ('i', 'x', 'y', 'prev', 'next', 'z', 'prev_z', 'next_z', 'steiner', '_top')

    def __init__(self):
        # offset of the vertex in the flat coordinate buffer
        self.i: List[int] = []
        self.x: List[float] = []
        self.y: List[float] = []
        # ring links (circular)
        self.prev: List[int] = []
        self.next: List[int] = []
        # z-order key and links (linear once indexed)
        self.z: List[int] = []
        self.prev_z: List[int] = []
        self.next_z: List[int] = []
        self.steiner: List[bool] = []
        self._top = 0

    def __len__(self) -> int:
        return self._top

    @property
    def capacity(self) -> int:
        return len(self.i)

    def alloc(self, i: int, x: float, y: float) -> int:
        """Return a fresh, unlinked node handle."""
        h = self._top
        if h < len(self.i):
            self.i[h] = i
            self.x[h] = x
            self.y[h] = y
            self.prev[h] = NIL
            self.next[h] = NIL
            self.z[h] = NIL
            self.prev_z[h] = NIL
            self.next_z[h] = NIL
            self.steiner[h] = False
        else:
            self.i.append(i)
            self.x.append(x)
            self.y.append(y)
            self.prev.append(NIL)
            self.next.append(NIL)
            self.z.append(NIL)
            self.prev_z.append(NIL)
            self.next_z.append(NIL)
            self.steiner.append(False)
        self._top = h + 1
        return h

    def reset(self) -> None:
        self._top = 0

    def release(self) -> None:
        # clear in place; callers may hold references to the column lists
        for name in ('i', 'x', 'y', 'prev', 'next', 'z', 'prev_z', 'next_z', 'steiner'):
            getattr(self, name).clear()
        self._top = 0

    def insert_node(self, i: int, x: float, y: float, last: int = NIL) -> int:
        """Create a node and link it after ``last`` (or as a one-node ring)."""
        p = self.alloc(i, x, y)
        if last == NIL:
            self.prev[p] = p
            self.next[p] = p
        else:
            nxt = self.next[last]
            self.next[p] = nxt
            self.prev[p] = last
            self.prev[nxt] = p
            self.next[last] = p
        return p

    def remove_node(self, p: int) -> None:
        """Unlink ``p`` from its ring and from the z-order list.

        Neighbours stop referencing ``p``. Its own ring links are left intact
        so the caller can still step from ``p`` to its former neighbours.
        """
        nxt = self.next[p]
        prv = self.prev[p]
        self.prev[nxt] = prv
        self.next[prv] = nxt

        pz = self.prev_z[p]
        nz = self.next_z[p]
        if pz != NIL:
            self.next_z[pz] = nz
        if nz != NIL:
            self.prev_z[nz] = pz
        self.prev_z[p] = NIL
        self.next_z[p] = NIL

    def ring(self, start: int) -> Iterator[int]:
        """Yield the handles of the ring containing ``start``, beginning there."""
        if start == NIL:
            return
        p = start
        while True:
            yield p
            p = self.next[p]
            if p == start:
                break

    def ring_size(self, start: int) -> int:
        return sum(1 for _ in self.ring(start))

    def z_chain(self, head: int) -> Iterator[int]:
        """Yield the z-order list from ``head`` following ``next_z``."""
        p = head
        while p != NIL:
            yield p
            p = self.next_z[p]


__all__ = ['NIL', 'NodeArena']
