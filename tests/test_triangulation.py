"""End-to-end tests of the public triangulation entry points."""
import threading

import numpy as np
import pytest
from scipy.spatial import ConvexHull

from eartri.core.arena import NodeArena
from eartri.core.config import TriangulationConfig
from eartri.core.diagnostics import deviation, triangulation_area
from eartri.core.triangulation import Triangulator, triangulate, triangulate_polygon_with_holes

SQUARE_WITH_HOLE = [0, 0, 10, 0, 10, 10, 0, 10, 3, 3, 6, 3, 3, 6]


def _circle(n, r=1000.0):
    t = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False)
    return np.column_stack([r * np.cos(t), r * np.sin(t)])


def _star(spikes, r_out=10.0, r_in=4.0):
    t = np.arange(2 * spikes) * np.pi / spikes
    r = np.where(np.arange(2 * spikes) % 2 == 0, r_out, r_in)
    return np.column_stack([r * np.cos(t), r * np.sin(t)])


def _padded_square(n_extra):
    # square 0..100 with n_extra collinear points along the bottom edge
    bottom = [(100.0 * k / (n_extra + 1), 0.0) for k in range(1, n_extra + 1)]
    pts = [(0.0, 0.0)] + bottom + [(100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]
    return [c for p in pts for c in p]


class TestScenarios:
    def test_triangle(self):
        tris = triangulate([0, 0, 4, 0, 0, 3])
        assert len(tris) == 3
        assert set(tris) == {0, 1, 2}

    def test_unit_square(self):
        coords = [0, 0, 1, 0, 1, 1, 0, 1]
        tris = triangulate(coords)
        assert len(tris) == 6
        assert set(tris) == {0, 1, 2, 3}
        assert triangulation_area(coords, tris) == pytest.approx(1.0)

    def test_square_with_triangular_hole(self):
        tris = triangulate(SQUARE_WITH_HOLE, [4])
        assert len(tris) == 3 * 7
        assert triangulation_area(SQUARE_WITH_HOLE, tris) == pytest.approx(95.5)
        assert deviation(SQUARE_WITH_HOLE, [4], 2, tris) < 1e-12

    def test_duplicate_point(self):
        coords = [0, 0, 1, 0, 1, 0, 1, 1, 0, 1]
        tris = triangulate(coords)
        assert len(tris) == 6
        assert triangulation_area(coords, tris) == pytest.approx(1.0)


class TestProperties:
    @pytest.mark.parametrize("n", [3, 5, 17, 64, 200])
    def test_convex_polygon_v_minus_2(self, n):
        pts = _circle(n)
        tris = triangulate(pts.ravel())
        assert len(tris) == 3 * (n - 2)
        assert all(0 <= i < n for i in tris)
        hull_area = ConvexHull(pts).volume
        assert triangulation_area(pts.ravel(), tris) == pytest.approx(hull_area, rel=1e-9)

    @pytest.mark.parametrize("spikes", [5, 12, 50])
    def test_star_polygon(self, spikes):
        pts = _star(spikes)
        tris = triangulate(pts.ravel())
        assert len(tris) == 3 * (2 * spikes - 2)
        assert deviation(pts.ravel(), None, 2, tris) < 1e-9

    def test_threshold_independence(self):
        small = _padded_square(10)
        large = _padded_square(120)
        assert len(large) > 80 * 2 >= len(small)
        for coords in (small, large):
            for forced in (None, True, False):
                tris = triangulate(coords, config=TriangulationConfig(use_z_order=forced))
                assert len(tris) % 3 == 0
                assert deviation(coords, None, 2, tris) < 1e-9

    def test_z_order_does_not_change_result(self):
        coords = _star(60).ravel()
        plain = triangulate(coords, config=TriangulationConfig(use_z_order=False))
        hashed = triangulate(coords, config=TriangulationConfig(use_z_order=True))
        assert len(plain) == len(hashed)
        assert deviation(coords, None, 2, hashed) < 1e-9

    def test_two_holes_area_preserved(self):
        shell = [-3, -2, 3, -2, 3, 2, -3, 2]
        hole1 = [-1.5, -0.5, -0.5, -0.5, -0.5, 0.5, -1.5, 0.5]
        hole2 = [0.5, -0.5, 1.5, -0.5, 1.5, 0.5, 0.5, 0.5]
        coords = shell + hole1 + hole2
        tris = triangulate(coords, [4, 8])
        assert triangulation_area(coords, tris) == pytest.approx(22.0)

    def test_extra_dimensions_ignored(self):
        flat = triangulate([0, 0, 1, 0, 1, 1, 0, 1])
        with_z = triangulate([0, 0, 5, 1, 0, 6, 1, 1, 7, 0, 1, 8], dim=3)
        assert flat == with_z


class TestDegenerateInput:
    @pytest.mark.parametrize("coords", [
        [],
        [5, 5],
        [0, 0, 1, 1],
        [0, 0, 1, 0, 2, 0],
        [1, 1, 1, 1, 1, 1],
    ])
    def test_returns_empty(self, coords):
        assert triangulate(coords) == []

    def test_empty_holes_same_as_none(self):
        coords = [0, 0, 1, 0, 1, 1, 0, 1]
        assert triangulate(coords, []) == triangulate(coords)

    def test_unbridgeable_hole_dropped(self):
        coords = [10, 10, 20, 10, 20, 20, 10, 20, 0, 12, 1, 12, 0, 13]
        tris = triangulate(coords, [4])
        assert len(tris) == 6
        assert max(tris) < 4


class TestArgumentValidation:
    @pytest.mark.parametrize("dim", [0, 1, 2.5])
    def test_bad_dim(self, dim):
        with pytest.raises(ValueError):
            triangulate([0, 0, 1, 0, 0, 1], dim=dim)

    def test_ragged_buffer(self):
        with pytest.raises(ValueError):
            triangulate([0, 0, 1, 0, 1])

    @pytest.mark.parametrize("holes", [[3, 2], [2, 2], [-1], [7], [1.5]])
    def test_bad_hole_starts(self, holes):
        with pytest.raises(ValueError):
            triangulate([0, 0, 4, 0, 4, 4, 1, 1, 2, 1, 1, 2], holes)

    def test_array_input(self):
        arr = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        assert triangulate(arr) == triangulate(arr.ravel().tolist())
        with pytest.raises(ValueError):
            triangulate(arr, dim=3)
        with pytest.raises(ValueError):
            triangulate(arr.reshape(2, 2, 2))


class TestBuffers:
    def test_out_is_cleared_and_returned(self):
        out = [99, 98, 97]
        res = triangulate([0, 0, 1, 0, 1, 1, 0, 1], out=out)
        assert res is out
        assert out == [2, 3, 0, 0, 1, 2]

    def test_arena_is_reset_and_reused(self):
        arena = NodeArena()
        triangulate(SQUARE_WITH_HOLE, [4], arena=arena)
        cap = arena.capacity
        assert cap >= 9
        tris = triangulate([0, 0, 4, 0, 0, 3], arena=arena)
        assert set(tris) == {0, 1, 2}
        assert arena.capacity == cap
        assert len(arena) == 3


class TestTriangulator:
    def test_reuse_matches_function(self):
        tri = Triangulator()
        for coords, holes in ((SQUARE_WITH_HOLE, [4]), ([0, 0, 1, 0, 1, 1, 0, 1], None)):
            assert tri.triangulate(coords, holes) == triangulate(coords, holes)

    def test_release(self):
        tri = Triangulator()
        tri.triangulate(SQUARE_WITH_HOLE, [4])
        tri.release()
        assert tri.arena.capacity == 0
        assert len(tri.triangulate(SQUARE_WITH_HOLE, [4])) == 21

    def test_shared_between_threads(self):
        tri = Triangulator()
        coords = _star(30).ravel()
        expected = triangulate(coords)
        results = []

        def work():
            for _ in range(5):
                results.append(tri.triangulate(coords))

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(results) == 20
        assert all(r == expected for r in results)


def test_triangulate_polygon_with_holes():
    shell = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    hole = [(3.0, 3.0), (6.0, 3.0), (3.0, 6.0)]
    tris = triangulate_polygon_with_holes(shell, [hole])
    assert len(tris) == 7
    total = 0.0
    for a, b, c in tris:
        total += abs((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])) / 2.0
    assert total == pytest.approx(95.5)
