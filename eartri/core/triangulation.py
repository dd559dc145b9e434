"""Polygon triangulation entry points.

``triangulate`` turns a flat coordinate buffer (plus optional hole start
indices) into a flat list of triangle vertex indices:

    >>> triangulate([0, 0, 1, 0, 1, 1, 0, 1])
    [2, 3, 0, 0, 1, 2]

The pipeline is: outer ring -> hole bridging -> optional z-order index ->
ear clipping with filter/cure/split fallbacks. Malformed geometry never
raises; it yields an empty or best-effort triangle list. Malformed
*arguments* (bad ``dim``, ragged buffer, unsorted hole starts) raise
``ValueError``.
"""
from __future__ import annotations

import threading
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .arena import NIL, NodeArena
from .config import TriangulationConfig
from .earclip import earcut_linked
from .holes import eliminate_holes
from .logging_utils import get_logger
from .ring import build_ring
from .zorder import ZOrderFrame

logger = get_logger('eartri.triangulation')

__all__ = [
    'triangulate',
    'Triangulator',
    'triangulate_polygon_with_holes',
]


def _prepare_input(coords, hole_starts, dim: int) -> Tuple[List[float], List[int]]:
    """Validate arguments and return plain Python lists for fast scalar access."""
    if int(dim) != dim or dim < 2:
        raise ValueError(f"dim must be an integer >= 2, got {dim!r}")
    dim = int(dim)

    arr = np.asarray(coords, dtype=np.float64)
    if arr.ndim == 2:
        if arr.shape[1] != dim:
            raise ValueError(f"coords has {arr.shape[1]} columns but dim={dim}")
    elif arr.ndim > 2:
        raise ValueError(f"coords must be flat or (N, dim), got shape {arr.shape}")
    data = arr.ravel().tolist()
    if len(data) % dim != 0:
        raise ValueError(f"coords length {len(data)} is not a multiple of dim={dim}")
    n_vertices = len(data) // dim

    if hole_starts is None:
        return data, []
    holes_arr = np.asarray(hole_starts)
    if holes_arr.size == 0:
        return data, []
    if holes_arr.ndim != 1 or not np.issubdtype(holes_arr.dtype, np.integer):
        raise ValueError("hole_starts must be a flat sequence of integer vertex indices")
    if np.any(np.diff(holes_arr) <= 0):
        raise ValueError(f"hole_starts must be strictly ascending, got {holes_arr.tolist()}")
    if holes_arr[0] < 0 or holes_arr[-1] >= n_vertices:
        raise ValueError(f"hole_starts must lie in [0, {n_vertices}), got {holes_arr.tolist()}")
    return data, holes_arr.tolist()


def triangulate(coords, hole_starts: Optional[Sequence[int]] = None, dim: int = 2, *,
                arena: Optional[NodeArena] = None, out: Optional[List[int]] = None,
                config: Optional[TriangulationConfig] = None) -> List[int]:
    """Triangulate a polygon given as a flat coordinate buffer.

    Parameters
    ----------
    coords : sequence of float or ndarray
        Vertex-major coordinates, ``dim`` components per vertex; only the
        first two are used. An ``(N, dim)`` array is accepted as well.
    hole_starts : sequence of int, optional
        Vertex indices where each hole ring starts, strictly ascending.
    dim : int, default=2
        Components per vertex.
    arena : NodeArena, optional
        Node storage to reuse; it is reset before use. A private arena is
        created when omitted. An arena must not serve two calls at once.
    out : list, optional
        Output buffer; it is cleared, filled and returned.
    config : TriangulationConfig, optional
        Z-order heuristic and logging switches.

    Returns
    -------
    list of int
        Vertex indices, three per triangle. Empty for degenerate input.
    """
    cfg = config if config is not None else TriangulationConfig()
    data, holes = _prepare_input(coords, hole_starts, dim)
    dim = int(dim)

    triangles = out if out is not None else []
    triangles.clear()

    if arena is None:
        arena = NodeArena()
    arena.reset()

    outer_len = holes[0] * dim if holes else len(data)
    if outer_len == 0:
        return triangles
    outer_node = build_ring(arena, data, 0, outer_len, dim, True)
    if outer_node == NIL or arena.next[outer_node] == arena.prev[outer_node]:
        return triangles

    if holes:
        outer_node = eliminate_holes(arena, data, holes, outer_node, dim)

    frame = None
    if cfg.wants_z_order(len(data), dim):
        frame = ZOrderFrame.from_coords(data, outer_len, dim)

    earcut_linked(arena, outer_node, triangles, dim, frame, log_phases=cfg.log_phases)
    logger.debug("triangulated %d vertices (%d holes, z-order=%s) into %d triangles",
                 len(data) // dim, len(holes), frame is not None, len(triangles) // 3)
    return triangles


class Triangulator:
    """Reusable triangulator owning one node arena.

    Storage grows to the largest polygon seen and is reused by later calls.
    Calls on the same instance are serialized with a lock, so an instance can
    be shared between threads; for parallel throughput give each thread its
    own instance.
    """

    def __init__(self, config: Optional[TriangulationConfig] = None):
        self.config = config if config is not None else TriangulationConfig()
        self.arena = NodeArena()
        self._lock = threading.Lock()

    def triangulate(self, coords, hole_starts: Optional[Sequence[int]] = None, dim: int = 2,
                    out: Optional[List[int]] = None) -> List[int]:
        with self._lock:
            return triangulate(coords, hole_starts, dim, arena=self.arena, out=out, config=self.config)

    def release(self) -> None:
        """Drop the arena's storage."""
        with self._lock:
            self.arena.release()


def triangulate_polygon_with_holes(shell, holes=None, config: Optional[TriangulationConfig] = None):
    """Triangulate a polygon given as coordinate-pair rings.

    ``shell`` is a sequence of (x, y) points, ``holes`` a sequence of such
    rings. Returns a list of triangles as (x, y) coordinate triplets.
    """
    from .io import flatten

    rings = [shell] + list(holes or [])
    flat = flatten(rings)
    idxs = triangulate(flat.vertices, flat.holes, flat.dimensions, config=config)
    pts = np.asarray(flat.vertices, dtype=float).reshape(-1, flat.dimensions)[:, :2]
    tris = []
    for k in range(0, len(idxs), 3):
        a, b, c = idxs[k], idxs[k + 1], idxs[k + 2]
        tris.append((tuple(pts[a]), tuple(pts[b]), tuple(pts[c])))
    return tris
