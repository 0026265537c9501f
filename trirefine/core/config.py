"""Configuration objects for selective subdivision and relaxation."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import DEFAULT_MAX_FLIPS, DEFAULT_MAX_ANGLE_DEG


@dataclass
class SubdivideConfig:
    # Recompute face adjacency and vertex normals at the end of the pass
    recompute_derived: bool = True


@dataclass
class RelaxConfig:
    """Parameters of one relaxation call.

    Attributes
    ----------
    max_flips : int
        Upper bound on the number of edge flips performed per call.
    max_angle_deg : float
        Largest angle (degrees) between the two face normals of a candidate
        edge for which the flip is accepted.
    recompute_derived : bool
        Recompute face adjacency, face normals and vertex normals after the pass.
    """
    max_flips: int = DEFAULT_MAX_FLIPS
    max_angle_deg: float = DEFAULT_MAX_ANGLE_DEG
    recompute_derived: bool = True

    def __post_init__(self):
        if int(self.max_flips) < 0:
            raise ValueError(f"max_flips must be >= 0, got {self.max_flips}")
        self.max_flips = int(self.max_flips)
        ang = float(self.max_angle_deg)
        if not math.isfinite(ang) or ang < 0.0:
            raise ValueError(f"max_angle_deg must be a finite non-negative angle, got {self.max_angle_deg}")
        self.max_angle_deg = ang

    @property
    def max_angle(self) -> float:
        """Threshold in radians."""
        return math.radians(self.max_angle_deg)

    @classmethod
    def from_radians(cls, max_flips: int, max_angle: float, **kwargs) -> 'RelaxConfig':
        return cls(max_flips=max_flips, max_angle_deg=math.degrees(float(max_angle)), **kwargs)


@dataclass
class RefineConfig:
    """Unified configuration.

    Attributes
    ----------
    subdivide : SubdivideConfig
    relax : RelaxConfig
    relax_passes : int
        Number of relax calls issued by `refine_selection` after subdividing.
    """
    subdivide: SubdivideConfig = field(default_factory=SubdivideConfig)
    relax: RelaxConfig = field(default_factory=RelaxConfig)
    relax_passes: int = 1

    @classmethod
    def from_overrides(cls, *, relax_overrides: Optional[Dict[str, Any]] = None,
                       subdivide_overrides: Optional[Dict[str, Any]] = None,
                       relax_passes: int = 1) -> 'RefineConfig':
        r = RelaxConfig(**(relax_overrides or {}))
        s = SubdivideConfig(**(subdivide_overrides or {}))
        return cls(subdivide=s, relax=r, relax_passes=int(relax_passes))


__all__ = ['SubdivideConfig', 'RelaxConfig', 'RefineConfig']
