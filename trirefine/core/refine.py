"""Subdivide-then-relax driver for a triangle selection.

Runs the usual interactive workflow in one call: one selective subdivision
followed by a configurable number of relaxation calls over the (grown)
selection. The mesh is mutated in-place.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .config import RefineConfig
from .mesh import TriMesh
from .relax import relax
from .subdivide import subdivide, SubdivisionResult
from .logging_utils import get_logger

log = get_logger('trirefine.refine')


@dataclass
class RefineReport:
    subdivision: SubdivisionResult
    flips: List[int] = field(default_factory=list)

    @property
    def total_flips(self) -> int:
        return sum(self.flips)


def refine_selection(mesh: TriMesh, config: Optional[RefineConfig] = None) -> RefineReport:
    """Subdivide the selected triangles, then relax the refined region.

    Relaxation stops early once a call performs no flip, since later calls
    would see the same candidates.
    """
    cfg = config or RefineConfig()
    if not mesh.selected_handles():
        log.info('refine: empty selection; nothing to do')
        return RefineReport(subdivision=SubdivisionResult())
    sub = subdivide(mesh, cfg.subdivide)
    report = RefineReport(subdivision=sub)
    for it in range(max(0, int(cfg.relax_passes))):
        n = relax(mesh, cfg.relax)
        report.flips.append(n)
        log.info('refine: relax pass %d flips=%d', it, n)
        if n == 0:
            break
    log.info('refine: refined=%d new_vertices=%d stitched=%d total_flips=%d',
             sub.refined, sub.vertices_created, sub.stitched, report.total_flips)
    return report


__all__ = ['refine_selection', 'RefineReport']
