"""Central constants for the ear-clipping triangulator.

Keeps the size heuristic, z-order quantisation and diagnostic tolerances in
one place so they can be referenced without scattering literals.
"""
from __future__ import annotations

# Z-order (Morton) indexing
Z_ORDER_THRESHOLD: int = 80        # engage the curve index above this many vertices (per dim)
Z_ORDER_SCALE: int = 32767         # coordinates are quantised to 15-bit non-negative ints
MORTON_MASKS = (0x00FF00FF, 0x0F0F0F0F, 0x33333333, 0x55555555)
MORTON_SHIFTS = (8, 4, 2, 1)

# Diagnostics
EPS_DEVIATION: float = 1e-9        # relative area deviation accepted as "exact"

__all__ = [
    'Z_ORDER_THRESHOLD',
    'Z_ORDER_SCALE',
    'MORTON_MASKS',
    'MORTON_SHIFTS',
    'EPS_DEVIATION',
]
