"""Configuration objects for the triangulation entry points."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import Z_ORDER_THRESHOLD


@dataclass
class TriangulationConfig:
    """Tunables for :func:`eartri.core.triangulation.triangulate`.

    Attributes
    ----------
    z_order_threshold : int
        The z-order index is built when the coordinate buffer holds more than
        ``z_order_threshold * dim`` values.
    use_z_order : bool or None
        ``None`` applies the size heuristic; ``True``/``False`` force the
        indexed or plain ear test regardless of input size.
    log_phases : bool
        Emit DEBUG records when the ear loop escalates to a fallback phase.
    """
    z_order_threshold: int = Z_ORDER_THRESHOLD
    use_z_order: Optional[bool] = None
    log_phases: bool = True

    def __post_init__(self):
        if self.z_order_threshold < 0:
            raise ValueError(f"z_order_threshold must be >= 0, got {self.z_order_threshold}")

    def wants_z_order(self, n_values: int, dim: int) -> bool:
        if self.use_z_order is not None:
            return bool(self.use_z_order)
        return n_values > self.z_order_threshold * dim


__all__ = ['TriangulationConfig']
