"""Priority-ordered edge flips over the selected region."""
from __future__ import annotations

import heapq
import itertools
import math
import time
from typing import List, Optional, Tuple

from .config import RelaxConfig
from .conformity import check_incidence
from .geometry import normal_angle
from .navigation import OrTri, make_ortri
from .logging_utils import get_logger

logger = get_logger('trirefine.relax')


def edge_priority(mesh, ot: OrTri) -> int:
    """Combined valence of the edge endpoints; lower is processed first."""
    a, b = ot.endpoints(mesh)
    return mesh.valence(a) + mesh.valence(b)


def collect_candidates(mesh) -> List[Tuple[int, int, OrTri]]:
    """Heap of interior edges of the selection keyed by `edge_priority`.

    Edges on the mesh boundary or on the boundary of the selection are left
    out. Each undirected edge is queued once, from its lower triangle handle.
    """
    heap = []
    counter = itertools.count()
    for t in mesh.selected_handles():
        for i in range(3):
            ot = make_ortri(t, i)
            nb = mesh.across_edge(ot)
            if nb.tri == t or not mesh.is_selected(nb.tri):
                continue
            if nb.tri < t:
                continue
            heapq.heappush(heap, (edge_priority(mesh, ot), next(counter), ot))
    return heap


def flip_edge(mesh, ot: OrTri, nb: OrTri) -> None:
    """Swap the diagonal of the quad formed by triangles ``ot.tri`` and ``nb.tri``.

    With shared edge (a, b) and apexes c (first triangle) and d (second),
    the first triangle's ``a`` becomes ``d`` and the second triangle's ``b``
    becomes ``c``; both slots keep their handles.
    """
    t1, t2 = ot.tri, nb.tri
    b = ot.destination(mesh)
    c = ot.apex(mesh)
    d = nb.apex(mesh)
    slot_b = [int(v) for v in mesh.triangles[t2]].index(b)
    mesh.replace_vertex(t1, ot.edge, d)
    mesh.replace_vertex(t2, slot_b, c)


def relax(mesh, config: Optional[RelaxConfig] = None, *,
          max_flips: Optional[int] = None, max_angle: Optional[float] = None) -> int:
    """Flip up to ``max_flips`` near-planar interior edges of the selection.

    Parameters
    ----------
    mesh : TriMesh
    config : RelaxConfig, optional
    max_flips : int, optional
        Overrides ``config.max_flips``.
    max_angle : float, optional
        Overrides the configured threshold; radians.

    Returns
    -------
    int
        Number of flips performed. May be lower than requested when the
        candidates run out or fail the angle test.

    Notes
    -----
    Candidates are processed by ascending combined endpoint valence (as
    counted when the pass starts). A flip is accepted when the angle between
    the two face normals is at most the threshold. A triangle changed by a
    flip is not touched again in the same call; candidates that refer to it
    are dropped as stale.
    """
    cfg = config or RelaxConfig()
    limit = cfg.max_flips if max_flips is None else int(max_flips)
    if limit < 0:
        raise ValueError(f"max_flips must be >= 0, got {limit}")
    threshold = cfg.max_angle if max_angle is None else float(max_angle)
    if math.isnan(threshold) or threshold < 0.0:
        raise ValueError(f"max_angle must be a non-negative angle in radians, got {max_angle}")

    stats = mesh._get_op_stats('relax')
    stats.calls += 1
    t_start = time.perf_counter()

    heap = collect_candidates(mesh)
    n_candidates = len(heap)
    modified = set()
    flips = 0
    while heap and flips < limit:
        _, _, ot = heapq.heappop(heap)
        t1 = ot.tri
        if t1 in modified:
            stats.stale_skips += 1
            continue
        nb = mesh.across_edge(ot)
        t2 = nb.tri
        if t2 == t1 or t2 in modified or not mesh.is_selected(t2):
            stats.stale_skips += 1
            continue

        angle = normal_angle(mesh.triangle_normal(t1), mesh.triangle_normal(t2))
        if math.isnan(angle):
            stats.degenerate_rejects += 1
            logger.debug("relax: edge %s skipped, degenerate normal", ot.endpoints(mesh))
            continue
        if angle > threshold:
            stats.angle_rejects += 1
            logger.debug("relax: edge %s rejected, angle=%.6f > %.6f", ot.endpoints(mesh), angle, threshold)
            continue
        c, d = ot.apex(mesh), nb.apex(mesh)
        if c == d or mesh.incident_triangles(c) & mesh.incident_triangles(d):
            # new diagonal already exists; flipping would duplicate an edge
            stats.degenerate_rejects += 1
            logger.debug("relax: edge %s skipped, diagonal (%d,%d) already present", ot.endpoints(mesh), c, d)
            continue

        flip_edge(mesh, ot, nb)
        modified.update((t1, t2))
        flips += 1

    if cfg.recompute_derived:
        mesh.compute_face_adjacency()
        mesh.compute_face_normals()
        mesh.compute_vertex_normals()
    if mesh.debug:
        ok, msgs = check_incidence(mesh)
        if not ok:
            logger.error("relax: incidence out of sync after pass: %s", msgs[:5])

    stats.candidates += n_candidates
    stats.flips += flips
    stats.record_time(time.perf_counter() - t_start)
    logger.info("relax: candidates=%d flips=%d (max %d)", n_candidates, flips, limit)
    if flips < limit:
        logger.info("relax: no or not enough edges satisfied the flatness criterion (max_angle=%.3fdeg)",
                    math.degrees(threshold))
    return flips


__all__ = ['relax', 'collect_candidates', 'edge_priority', 'flip_edge']
