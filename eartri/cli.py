"""Command line front end: triangulate a GeoJSON polygon.

Usage examples:
    eartri tests/data/square_with_hole.geojson
    eartri building.geojson --vtk building.vtk --png building.png --log-level DEBUG
"""
from __future__ import annotations

import argparse
import os
import sys
import time

from .core.config import TriangulationConfig
from .core.constants import EPS_DEVIATION
from .core.diagnostics import check_triangles, deviation
from .core.io import flatten, read_geojson_polygon, write_vtk
from .core.logging_utils import configure_logging, get_logger
from .core.triangulation import triangulate

log = get_logger('eartri.cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='eartri', description='Ear-clipping triangulation of a GeoJSON polygon')
    parser.add_argument('path', help='GeoJSON file (Polygon, MultiPolygon, Feature or FeatureCollection)')
    parser.add_argument('--vtk', type=str, default=None, help='Write the triangulation as legacy VTK to this path')
    parser.add_argument('--png', type=str, default=None, help='Plot the triangulation to this image path')
    parser.add_argument('--log-level', type=str, default='INFO', help='Logging level for the eartri loggers')
    parser.add_argument('--threshold', type=int, default=None,
                        help='Vertex count above which the z-order index is used')
    zgroup = parser.add_mutually_exclusive_group()
    zgroup.add_argument('--force-zorder', action='store_true', help='Always use the z-order index')
    zgroup.add_argument('--no-zorder', action='store_true', help='Never use the z-order index')
    return parser


def _config_from_args(args) -> TriangulationConfig:
    kwargs = {}
    if args.threshold is not None:
        kwargs['z_order_threshold'] = args.threshold
    if args.force_zorder:
        kwargs['use_z_order'] = True
    elif args.no_zorder:
        kwargs['use_z_order'] = False
    return TriangulationConfig(**kwargs)


def _ensure_parent_dir(path: str) -> None:
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        cfg = _config_from_args(args)
        rings = read_geojson_polygon(args.path)
        flat = flatten(rings)
        n_vertices = len(flat.vertices) // flat.dimensions
        t0 = time.perf_counter()
        tris = triangulate(flat.vertices, flat.holes, flat.dimensions, config=cfg)
        elapsed = time.perf_counter() - t0
    except (OSError, ValueError) as e:
        log.error('cannot triangulate %s: %s', args.path, e)
        return 1

    ok, msg = check_triangles(tris, n_vertices)
    if not ok:
        log.error('invalid triangulation: %s', msg)
        return 1
    dev = deviation(flat.vertices, flat.holes, flat.dimensions, tris)
    log.info('%d vertices, %d holes -> %d triangles in %.3f ms (deviation %.3e)',
             n_vertices, len(flat.holes), len(tris) // 3, elapsed * 1e3, dev)
    if dev > EPS_DEVIATION:
        log.warning('triangulation area deviates from polygon area by %.3e', dev)

    try:
        if args.vtk:
            _ensure_parent_dir(args.vtk)
            write_vtk(args.vtk, flat.vertices, tris, dim=flat.dimensions)
            log.info('wrote %s', args.vtk)
        if args.png:
            from .core.visualization import plot_triangulation
            _ensure_parent_dir(args.png)
            plot_triangulation(flat.vertices, tris, dim=flat.dimensions, hole_starts=flat.holes,
                               outname=args.png)
            log.info('wrote %s', args.png)
    except OSError as e:
        log.error('cannot write output: %s', e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
