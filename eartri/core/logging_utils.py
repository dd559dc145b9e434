"""Logging utilities for eartri.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All eartri code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_eartri_root() -> logging.Logger:
    """Ensure the 'eartri' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'eartri' logger.
    """
    root = logging.getLogger('eartri')
    has_non_null = any(not isinstance(h, logging.NullHandler) for h in root.handlers)
    if not has_non_null:
        # Drop the NullHandler installed by the package __init__
        for h in list(root.handlers):
            root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Configure the 'eartri' logger family level and optional external noise suppression.

    This does NOT modify the process root logger.
    """
    root = _ensure_eartri_root()
    lvl = _to_level(level)
    root.setLevel(lvl)
    # matplotlib is chatty at DEBUG (font cache scans)
    if mute_external and lvl <= logging.DEBUG:
        for noisy in ('matplotlib', 'matplotlib.font_manager'):
            logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'eartri' namespace.

    Library modules call this at import time, so it only touches the named
    logger: handlers are attached by configure_logging(). Without a level the
    logger is NOTSET and inherits from the 'eartri' parent.
    """
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
