"""Central numerical tolerances and small geometry constants.

Keeps the handful of thresholds used by the refinement and relaxation
passes in one place so they are not scattered as literals.
"""
from __future__ import annotations

import math

# Geometry tolerances
EPS_NORMAL: float = 1e-15         # below this a face normal is treated as degenerate

# Defaults carried over from the interactive tool
DEFAULT_MAX_FLIPS: int = 10
DEFAULT_MAX_ANGLE_DEG: float = 5.0
DEFAULT_MAX_ANGLE: float = math.radians(DEFAULT_MAX_ANGLE_DEG)

# Handle 0 is never a vertex or triangle
RESERVED_HANDLE: int = 0

__all__ = [
    'EPS_NORMAL',
    'DEFAULT_MAX_FLIPS',
    'DEFAULT_MAX_ANGLE_DEG',
    'DEFAULT_MAX_ANGLE',
    'RESERVED_HANDLE',
]
