"""Smoke tests for the matplotlib plotting helper (Agg backend)."""
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from eartri.core.triangulation import triangulate
from eartri.core.visualization import plot_triangulation

SQUARE_WITH_HOLE = [0, 0, 10, 0, 10, 10, 0, 10, 3, 3, 6, 3, 3, 6]


def test_plot_to_file(tmp_path):
    tris = triangulate(SQUARE_WITH_HOLE, [4])
    out = tmp_path / "tri.png"
    ax = plot_triangulation(SQUARE_WITH_HOLE, tris, hole_starts=[4], outname=str(out))
    assert out.exists() and out.stat().st_size > 0
    assert ax.get_title().startswith("7 triangles")


def test_plot_into_existing_axes():
    fig, ax = plt.subplots()
    try:
        coords = [0, 0, 1, 0, 1, 1, 0, 1]
        res = plot_triangulation(coords, triangulate(coords), ax=ax, title="square", show_rings=False)
        assert res is ax
        assert ax.get_title() == "square"
    finally:
        plt.close(fig)


def test_plot_without_triangles_warns(caplog):
    fig, ax = plt.subplots()
    try:
        plot_triangulation([0, 0, 1, 0, 2, 0], [], ax=ax)
    finally:
        plt.close(fig)
    assert any("no triangles" in r.getMessage() for r in caplog.records)
