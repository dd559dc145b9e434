"""Format adaptation and lightweight file I/O.

Provides conversions between nested ring input and the flat buffers used by
:func:`eartri.core.triangulation.triangulate`, plus small readers/writers
without heavy dependencies:

- flatten / unflatten: nested rings <-> flat coordinates and (M, 3) triangles
- read_geojson_polygon: rings of a GeoJSON Polygon (or Feature, ...)
- write_vtk: export a triangulation as legacy ASCII VTK for ParaView/VisIt
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from .logging_utils import get_logger

logger = get_logger('eartri.io')

__all__ = ['FlatPolygon', 'flatten', 'unflatten', 'read_geojson_polygon', 'write_vtk']


@dataclass
class FlatPolygon:
    """Flat polygon buffers as consumed by ``triangulate``."""
    vertices: List[float] = field(default_factory=list)
    holes: List[int] = field(default_factory=list)
    dimensions: int = 2


def flatten(rings: Sequence[Sequence[Sequence[float]]]) -> FlatPolygon:
    """Turn nested rings (outer ring first, then holes) into flat buffers.

    Every point must have the same number of components as the first point
    of the outer ring. ``holes`` receives the vertex index at which each
    hole ring starts. Empty hole rings are skipped.
    """
    if len(rings) == 0 or len(rings[0]) == 0:
        raise ValueError("flatten() needs a non-empty outer ring")
    dim = len(rings[0][0])
    if dim < 2:
        raise ValueError(f"points need at least 2 components, got {dim}")

    flat = FlatPolygon(dimensions=dim)
    for k, ring in enumerate(rings):
        if k > 0:
            if len(ring) == 0:
                logger.debug("skipping empty hole ring %d", k)
                continue
            flat.holes.append(len(flat.vertices) // dim)
        for point in ring:
            if len(point) != dim:
                raise ValueError(f"ring {k} mixes point sizes ({len(point)} != {dim})")
            flat.vertices.extend(float(c) for c in point)
    return flat


def unflatten(triangles) -> np.ndarray:
    """Reshape a flat triangle index list into an (M, 3) int32 array."""
    tris = np.asarray(triangles, dtype=np.int32).ravel()
    if tris.size % 3 != 0:
        raise ValueError(f"triangle list length {tris.size} is not a multiple of 3")
    return tris.reshape(-1, 3)


def _drop_closing_point(ring: List[List[float]]) -> List[List[float]]:
    # GeoJSON rings repeat the first position at the end
    if len(ring) > 1 and list(ring[0]) == list(ring[-1]):
        return ring[:-1]
    return ring


def read_geojson_polygon(source: Union[str, os.PathLike, Dict[str, Any]]) -> List[List[List[float]]]:
    """Read the rings of a GeoJSON polygon.

    ``source`` is a file path or an already parsed mapping. Accepts a
    Polygon geometry, a Feature wrapping one, a MultiPolygon (first polygon)
    or a FeatureCollection (first feature). The closing position of each
    ring is dropped.

    Raises
    ------
    ValueError
        If no polygon can be found in the document.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, 'r', encoding='utf-8') as fh:
            obj = json.load(fh)
    else:
        obj = source

    kind = obj.get('type') if isinstance(obj, dict) else None
    if kind == 'FeatureCollection':
        features = obj.get('features') or []
        if not features:
            raise ValueError("FeatureCollection has no features")
        if len(features) > 1:
            logger.info("FeatureCollection has %d features; using the first", len(features))
        return read_geojson_polygon(features[0])
    if kind == 'Feature':
        geometry = obj.get('geometry')
        if geometry is None:
            raise ValueError("Feature has no geometry")
        return read_geojson_polygon(geometry)
    if kind == 'MultiPolygon':
        polygons = obj.get('coordinates') or []
        if not polygons:
            raise ValueError("MultiPolygon has no polygons")
        if len(polygons) > 1:
            logger.info("MultiPolygon has %d polygons; using the first", len(polygons))
        rings = polygons[0]
    elif kind == 'Polygon':
        rings = obj.get('coordinates') or []
    else:
        raise ValueError(f"unsupported GeoJSON type: {kind!r}")

    if not rings:
        raise ValueError("Polygon has no rings")
    return [_drop_closing_point(list(r)) for r in rings]


def write_vtk(filepath: str,
              coords,
              triangles,
              dim: int = 2,
              cell_data: Optional[Dict[str, np.ndarray]] = None,
              title: str = "eartri triangulation") -> None:
    """Write a triangulation to legacy VTK format (ASCII).

    Parameters
    ----------
    filepath : str
        Output .vtk file path
    coords : flat sequence or (N, dim) ndarray
        Vertex coordinates; z is taken from the third component when
        ``dim >= 3`` and set to 0 otherwise.
    triangles : flat index list or (M, 3) ndarray
        Triangle connectivity (vertex indices)
    dim : int, default=2
        Components per vertex in ``coords``
    cell_data : dict, optional
        Scalar data per triangle, keyed by field name, (M,) arrays.
    title : str
        Dataset title/description

    Examples
    --------
    >>> tris = triangulate(coords)
    >>> write_vtk('polygon.vtk', coords, tris)
    """
    pts = np.asarray(coords, dtype=np.float64).reshape(-1, dim)
    tris = unflatten(triangles)

    if dim >= 3:
        points_3d = pts[:, :3]
    else:
        points_3d = np.column_stack([pts[:, :2], np.zeros(len(pts))])

    num_points = len(points_3d)
    num_triangles = len(tris)

    with open(filepath, 'w') as f:
        f.write("# vtk DataFile Version 2.0\n")
        f.write(f"{title}\n")
        f.write("ASCII\n")
        f.write("DATASET UNSTRUCTURED_GRID\n")

        f.write(f"POINTS {num_points} double\n")
        for pt in points_3d:
            f.write(f"{pt[0]:.16e} {pt[1]:.16e} {pt[2]:.16e}\n")

        # Format: numIndices v0 v1 v2
        f.write(f"\nCELLS {num_triangles} {num_triangles * 4}\n")
        for tri in tris:
            f.write(f"3 {tri[0]} {tri[1]} {tri[2]}\n")

        # 5 = VTK_TRIANGLE
        f.write(f"\nCELL_TYPES {num_triangles}\n")
        for _ in range(num_triangles):
            f.write("5\n")

        if cell_data:
            f.write(f"\nCELL_DATA {num_triangles}\n")
            for name, data in cell_data.items():
                data = np.asarray(data)
                if data.ndim != 1 or len(data) != num_triangles:
                    logger.warning("Skipping cell_data[%r] with unsupported shape %s", name, data.shape)
                    continue
                f.write(f"SCALARS {name} double 1\n")
                f.write("LOOKUP_TABLE default\n")
                for val in data:
                    f.write(f"{val:.16e}\n")
    logger.debug("wrote %d points / %d triangles to %s", num_points, num_triangles, filepath)
