"""Plotting helpers for triangulation results.

Kept out of the core modules so that importing the triangulator never pulls
in matplotlib.
"""
from __future__ import annotations

import os as _os
from typing import Optional, Sequence

import matplotlib as _mpl
# Ensure a non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from .diagnostics import deviation
from .io import unflatten
from .logging_utils import get_logger

logger = get_logger('eartri.viz')

__all__ = ['plot_triangulation']

_RING_PALETTE = [(0.85, 0.2, 0.2), (0.2, 0.6, 0.8), (0.2, 0.8, 0.3), (0.75, 0.5, 0.2), (0.6, 0.2, 0.7)]


def _ring_bounds(n_vertices: int, hole_starts: Optional[Sequence[int]]):
    starts = [0] + list(hole_starts or [])
    ends = starts[1:] + [n_vertices]
    return list(zip(starts, ends))


def plot_triangulation(
    coords,
    triangles,
    dim: int = 2,
    hole_starts: Optional[Sequence[int]] = None,
    outname: Optional[str] = None,
    ax=None,
    title: Optional[str] = None,
    show_rings: bool = True,
):
    """Draw triangles and (optionally) the input rings.

    Args:
        coords: flat coordinate buffer or (N, dim) array
        triangles: flat index list or (M, 3) array
        dim: components per vertex
        hole_starts: hole start indices, used to outline each ring in its own colour
        outname: if given, the figure is saved there and closed
        ax: existing matplotlib Axes to draw into
        title: plot title; defaults to a triangle count / deviation summary
        show_rings: draw the outer ring and holes as closed polylines

    Returns the Axes drawn into.
    """
    pts = np.asarray(coords, dtype=np.float64).reshape(-1, dim)[:, :2]
    tris = unflatten(triangles)

    own_figure = ax is None
    if own_figure:
        fig, ax = plt.subplots(figsize=(6, 6))
    else:
        fig = ax.figure

    if len(tris):
        ax.triplot(pts[:, 0], pts[:, 1], tris, lw=0.6, color=(0.3, 0.3, 0.3))
    else:
        logger.warning('plot_triangulation: no triangles to draw')

    if show_rings and len(pts):
        for k, (start, end) in enumerate(_ring_bounds(len(pts), hole_starts)):
            ring = pts[start:end]
            if len(ring) < 2:
                continue
            col = _RING_PALETTE[k % len(_RING_PALETTE)]
            xs = np.append(ring[:, 0], ring[0, 0])
            ys = np.append(ring[:, 1], ring[0, 1])
            ax.plot(xs, ys, color=col, linewidth=1.4)

    # scale markers by vertex count
    npts = max(1, pts.shape[0])
    s = max(0.6, min(8.0, 200.0 / float(npts)))
    ax.scatter(pts[:, 0], pts[:, 1], s=s, color='black')
    ax.set_aspect('equal')

    if title is None:
        dev = deviation(coords, hole_starts, dim, tris)
        title = f"{len(tris)} triangles, deviation {dev:.2e}"
    ax.set_title(title)

    if outname:
        fig.savefig(outname, dpi=150)
        logger.debug('saved triangulation plot to %s', outname)
        if own_figure:
            plt.close(fig)
    return ax
