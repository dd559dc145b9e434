"""Tests for the node arena: allocation, ring links, reset and release."""
from eartri.core.arena import NIL, NodeArena


def _ring3(arena):
    a = arena.insert_node(0, 0.0, 0.0)
    b = arena.insert_node(2, 1.0, 0.0, a)
    c = arena.insert_node(4, 1.0, 1.0, b)
    return a, b, c


class TestAllocation:
    def test_handles_are_sequential(self):
        arena = NodeArena()
        assert arena.alloc(0, 0.0, 0.0) == 0
        assert arena.alloc(2, 1.0, 0.0) == 1
        assert len(arena) == 2
        assert arena.capacity == 2

    def test_fresh_node_is_unlinked(self):
        arena = NodeArena()
        h = arena.alloc(6, 3.0, 4.0)
        assert (arena.i[h], arena.x[h], arena.y[h]) == (6, 3.0, 4.0)
        assert arena.prev[h] == NIL and arena.next[h] == NIL
        assert arena.z[h] == NIL
        assert arena.prev_z[h] == NIL and arena.next_z[h] == NIL
        assert arena.steiner[h] is False


class TestRingLinks:
    def test_insert_builds_circular_ring(self):
        arena = NodeArena()
        a, b, c = _ring3(arena)
        assert list(arena.ring(a)) == [a, b, c]
        assert arena.next[c] == a
        assert arena.prev[a] == c
        assert arena.ring_size(b) == 3

    def test_single_node_ring_points_to_itself(self):
        arena = NodeArena()
        a = arena.insert_node(0, 0.0, 0.0)
        assert arena.next[a] == a and arena.prev[a] == a

    def test_remove_keeps_own_links(self):
        arena = NodeArena()
        a, b, c = _ring3(arena)
        arena.remove_node(b)
        assert arena.next[a] == c
        assert arena.prev[c] == a
        # the removed node can still step to its former neighbours
        assert arena.next[b] == c and arena.prev[b] == a
        assert arena.ring_size(a) == 2

    def test_remove_unlinks_z_list(self):
        arena = NodeArena()
        a, b, c = _ring3(arena)
        arena.next_z[a] = b; arena.prev_z[b] = a
        arena.next_z[b] = c; arena.prev_z[c] = b
        arena.remove_node(b)
        assert arena.next_z[a] == c
        assert arena.prev_z[c] == a
        assert arena.prev_z[b] == NIL and arena.next_z[b] == NIL
        assert list(arena.z_chain(a)) == [a, c]

    def test_ring_of_nil_is_empty(self):
        assert list(NodeArena().ring(NIL)) == []


class TestResetRelease:
    def test_reset_reuses_slots(self):
        arena = NodeArena()
        a, b, c = _ring3(arena)
        arena.z[a] = 42
        arena.steiner[a] = True
        arena.reset()
        assert len(arena) == 0
        assert arena.capacity == 3

        h = arena.alloc(8, 5.0, 6.0)
        assert h == 0
        assert arena.i[h] == 8
        assert arena.z[h] == NIL
        assert arena.steiner[h] is False
        assert arena.capacity == 3

    def test_release_drops_storage_in_place(self):
        arena = NodeArena()
        xs = arena.x
        _ring3(arena)
        arena.release()
        assert len(arena) == 0
        assert arena.capacity == 0
        assert xs is arena.x and xs == []
