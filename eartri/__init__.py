"""Public package API for the eartri polygon triangulator.

This facade provides a stable, flat import surface on top of the internal
implementation package ``eartri.core`` while deferring the matplotlib-based
plotting module until first use to keep ``import eartri`` fast.

Example
-------
    from eartri import triangulate, deviation

    tris = triangulate([0, 0, 10, 0, 10, 10, 0, 10, 3, 3, 6, 3, 3, 6], [4])
    assert deviation([0, 0, 10, 0, 10, 10, 0, 10, 3, 3, 6, 3, 3, 6], [4], 2, tris) < 1e-12

The deeper modules (``eartri.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound

try:
    __version__ = _pkg_version("eartri")
except _NotFound:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_arena = _imp('eartri.core.arena')
_geom = _imp('eartri.core.geometry')
_const = _imp('eartri.core.constants')
_config = _imp('eartri.core.config')
_tri = _imp('eartri.core.triangulation')
_diag = _imp('eartri.core.diagnostics')
_io = _imp('eartri.core.io')
_log = _imp('eartri.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)

        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m

        def __getattr__(self, item):
            if item == '_m':
                raise AttributeError(item)
            return getattr(self._load(), item)

        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# matplotlib is only imported when plotting is actually used
visualization = _lazy_module('eartri.core.visualization')


def plot_triangulation(*args, **kwargs):
    return visualization.plot_triangulation(*args, **kwargs)


# Triangulation entry points
triangulate = _tri.triangulate
Triangulator = _tri.Triangulator
triangulate_polygon_with_holes = _tri.triangulate_polygon_with_holes
NodeArena = _arena.NodeArena
TriangulationConfig = _config.TriangulationConfig

# Diagnostics
deviation = _diag.deviation
polygon_area = _diag.polygon_area
triangulation_area = _diag.triangulation_area
check_triangles = _diag.check_triangles

# Format adaptation / I/O
flatten = _io.flatten
unflatten = _io.unflatten
FlatPolygon = _io.FlatPolygon
read_geojson_polygon = _io.read_geojson_polygon
write_vtk = _io.write_vtk

# Logging
configure_logging = _log.configure_logging
get_logger = _log.get_logger

# Namespace submodules for exploratory users
geometry = _geom
constants = _const
diagnostics = _diag
io = _io

__all__ = [
    '__version__',
    # triangulation
    'triangulate', 'Triangulator', 'triangulate_polygon_with_holes', 'NodeArena',
    'TriangulationConfig',
    # diagnostics
    'deviation', 'polygon_area', 'triangulation_area', 'check_triangles',
    # format adaptation / I/O
    'flatten', 'unflatten', 'FlatPolygon', 'read_geojson_polygon', 'write_vtk',
    'plot_triangulation',
    # logging
    'configure_logging', 'get_logger',
    # submodules / namespaces
    'geometry', 'constants', 'diagnostics', 'io', 'visualization',
]
