"""Logging utilities for trirefine.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All trirefine code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')
_ROOT_NAME = 'trirefine'


def _ensure_package_root() -> logging.Logger:
    """Give the 'trirefine' logger one stdout handler and stop propagation."""
    pkg_root = logging.getLogger(_ROOT_NAME)
    if all(isinstance(h, logging.NullHandler) for h in pkg_root.handlers):
        pkg_root.handlers.clear()
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        pkg_root.addHandler(handler)
    pkg_root.propagate = False
    return pkg_root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Configure the 'trirefine' logger family level and optional external noise suppression.

    This does NOT modify the process root logger.
    """
    pkg_root = _ensure_package_root()
    lvl = _to_level(level)
    pkg_root.setLevel(lvl)
    # matplotlib is chatty at DEBUG when the demo renders previews
    if mute_external and lvl <= logging.DEBUG:
        for noisy in ('matplotlib', 'matplotlib.font_manager'):
            logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'trirefine' namespace.

    Without an explicit level the logger is left at NOTSET so it inherits
    whatever configure_logging() set on the 'trirefine' parent. Handlers are
    only attached by configure_logging(); a library import stays silent.
    """
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
