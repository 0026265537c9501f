"""Selective 1-to-4 subdivision with partial stitching of unselected neighbours."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .config import SubdivideConfig
from .conformity import check_incidence
from .geometry import midpoint, normalize_edge
from .navigation import OrTri
from .logging_utils import get_logger

logger = get_logger('trirefine.subdivide')


@dataclass
class SubdivisionResult:
    refined: int = 0
    vertices_created: int = 0
    triangles_created: int = 0
    stitched: int = 0


def _edge_midpoint(mesh, cache: Dict[Tuple[int, int], int], a: int, b: int) -> int:
    """Return the midpoint vertex of edge {a, b}, creating it on first use."""
    key = normalize_edge(a, b)
    v = cache.get(key)
    if v is None:
        v = mesh.add_vertex(midpoint(mesh.points[a], mesh.points[b]))
        cache[key] = v
    return v


def _stitch_neighbour(mesh, nb: OrTri, mid: int) -> int:
    """Split the unselected triangle ``nb`` in two at ``mid`` on its edge ``nb.edge``.

    The slot keeps (n_j, mid, n_{j+2}); the appended triangle is
    (n_{j+1}, n_{j+2}, mid). Both keep the neighbour's winding and normal.
    """
    j = nb.edge
    verts = [int(v) for v in mesh.triangles[nb.tri]]
    normal = mesh.normals[nb.tri].copy()
    new_t = mesh.add_triangle((verts[(j + 1) % 3], verts[(j + 2) % 3], mid), normal=normal)
    mesh.replace_vertex(nb.tri, (j + 1) % 3, mid)
    return new_t


def subdivide(mesh, config: Optional[SubdivideConfig] = None) -> SubdivisionResult:
    """Split every selected triangle into four.

    Only triangles that exist when the call starts are visited; the corner
    triangles created here are marked selected for the next call. Midpoint
    vertices are shared between selected triangles through a per-call edge
    cache. An unselected triangle across a refined edge is split in two at
    the midpoint so the selection boundary stays crack-free (it ends up with
    a hanging vertex instead of being refined itself). Edges on the mesh
    boundary have no neighbour and are left alone.

    Face normals are copied from the parent triangles, not recomputed; face
    adjacency and vertex normals are rebuilt at the end unless
    ``config.recompute_derived`` is False.
    """
    cfg = config or SubdivideConfig()
    stats = mesh._get_op_stats('subdivide')
    stats.calls += 1
    t_start = time.perf_counter()

    n_vertices0 = mesh.n_vertices
    snapshot = mesh.n_triangles
    midpoints: Dict[Tuple[int, int], int] = {}
    result = SubdivisionResult()

    for t in range(1, snapshot + 1):
        if not mesh.is_selected(t):
            continue
        corners = [int(v) for v in mesh.triangles[t]]
        edges = [(corners[i], corners[(i + 1) % 3]) for i in range(3)]
        mids = [_edge_midpoint(mesh, midpoints, a, b) for a, b in edges]

        normal = mesh.normals[t].copy()
        for i in range(3):
            mesh.add_triangle((corners[i], mids[i], mids[(i + 2) % 3]), normal=normal, selected=True)

        # the slot now denotes the central triangle
        mesh.set_triangle(t, mids)

        for i, (a, b) in enumerate(edges):
            nb = mesh.triangle_across(t, a, b)
            if nb is None or mesh.is_selected(nb.tri):
                continue
            _stitch_neighbour(mesh, nb, mids[i])
            result.stitched += 1
            if mesh.debug:
                logger.debug("subdivide: stitched triangle %d across edge (%d,%d) at vertex %d",
                             nb.tri, a, b, mids[i])
        result.refined += 1

    result.vertices_created = mesh.n_vertices - n_vertices0
    result.triangles_created = mesh.n_triangles - snapshot

    if cfg.recompute_derived:
        mesh.compute_face_adjacency()
        mesh.compute_vertex_normals()
    if mesh.debug:
        ok, msgs = check_incidence(mesh)
        if not ok:
            logger.error("subdivide: incidence out of sync after pass: %s", msgs[:5])

    stats.refined += result.refined
    stats.vertices_created += result.vertices_created
    stats.triangles_created += result.triangles_created
    stats.stitched += result.stitched
    stats.record_time(time.perf_counter() - t_start)
    logger.info("subdivide: refined=%d new_vertices=%d new_triangles=%d stitched=%d",
                result.refined, result.vertices_created, result.triangles_created, result.stitched)
    return result


__all__ = ['subdivide', 'SubdivisionResult']
