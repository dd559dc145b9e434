"""Diagnostics helpers for validating triangulation output.

Nothing here is used by the triangulation itself; these functions exist to
check results offline and in tests. They operate on the same flat buffers
as :func:`eartri.core.triangulation.triangulate`.
"""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from .geometry import ring_signed_area, triangles_signed_areas
from .logging_utils import get_logger

logger = get_logger('eartri.diagnostics')

__all__ = ['polygon_area', 'triangulation_area', 'deviation', 'check_triangles']


def _as_points(coords, dim: int) -> np.ndarray:
    return np.asarray(coords, dtype=np.float64).reshape(-1, dim)[:, :2]


def polygon_area(coords, hole_starts: Optional[Sequence[int]] = None, dim: int = 2) -> float:
    """Area of the outer ring minus the areas of all holes."""
    data = np.asarray(coords, dtype=np.float64).ravel().tolist()
    holes = list(hole_starts) if hole_starts is not None else []
    outer_len = holes[0] * dim if holes else len(data)
    total = abs(ring_signed_area(data, 0, outer_len, dim))
    for k, first in enumerate(holes):
        start = first * dim
        end = holes[k + 1] * dim if k < len(holes) - 1 else len(data)
        total -= abs(ring_signed_area(data, start, end, dim))
    return 0.5 * total


def triangulation_area(coords, triangles, dim: int = 2) -> float:
    """Summed unsigned area of the triangles (flat index list or (M, 3) array)."""
    areas = triangles_signed_areas(_as_points(coords, dim), triangles)
    return float(np.abs(areas).sum())


def deviation(coords, hole_starts: Optional[Sequence[int]], dim: int, triangles) -> float:
    """Relative difference between polygon area and triangulation area.

    Returns ``|tri_area - poly_area| / poly_area``, or ``0.0`` when both
    areas are zero. A zero-area polygon with a non-empty triangulation area
    yields ``inf``.
    """
    poly = polygon_area(coords, hole_starts, dim)
    tri = triangulation_area(coords, triangles, dim)
    if poly == 0 and tri == 0:
        return 0.0
    if poly == 0:
        return float('inf')
    return abs((tri - poly) / poly)


def check_triangles(triangles, n_vertices: int) -> Tuple[bool, Optional[str]]:
    """Structural check of a flat triangle list.

    Returns ``(ok, message)``; message is None when the list is well formed.
    """
    tris = np.asarray(triangles, dtype=np.int64).ravel()
    if tris.size % 3 != 0:
        return False, f"triangle list length {tris.size} is not a multiple of 3"
    if tris.size and (tris.min() < 0 or tris.max() >= n_vertices):
        return False, (f"triangle index out of range [0, {n_vertices}): "
                       f"min={int(tris.min())} max={int(tris.max())}")
    return True, None
