"""Growing indexed triangle mesh shared by the subdivider and the relaxer."""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional, Set

import numpy as np

from .constants import RESERVED_HANDLE
from .geometry import face_normal, face_normals, unit_rows
from .navigation import OrTri, local_edge_of
from .stats import OpStats, print_stats as _print_stats
from .logging_utils import get_logger

_MIN_CAPACITY = 8


class TriMesh:
    """Indexed triangle mesh with 1-based handles and vertex incidence.

    Vertex and triangle handles start at 1; row 0 of every array is reserved
    and never denotes a real element. Vertices are append-only. Triangle
    slots are append-only too but a slot's vertex triple may be rewritten in
    place, and every such write goes through `set_triangle` so that `v_map`
    (vertex -> set of incident triangle handles) stays exact.
    """

    def __init__(self, points, triangles, normals=None, selected=None, debug: bool = False):
        """Build a mesh from 0-based numpy-style arrays.

        Parameters
        ----------
        points : (N,3) float array-like
        triangles : (M,3) int array-like
            0-based vertex indices; vertex ``i`` becomes handle ``i + 1`` and
            row ``k`` becomes triangle handle ``k + 1``.
        normals : (M,3) float array-like, optional
            Per-triangle normals. Computed from positions when omitted.
        selected : iterable of int, optional
            1-based triangle handles to mark selected.
        debug : bool
            Log every incidence mutation at DEBUG.
        """
        self.logger = get_logger(f'trirefine.mesh.{self.__class__.__name__}')
        self.debug = debug
        pts = np.asarray(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError("points must have shape (N,3)")
        tris = np.asarray(triangles)
        if tris.size == 0:
            tris = np.empty((0, 3), dtype=np.int64)
        if tris.ndim != 2 or tris.shape[1] != 3:
            raise ValueError("triangles must have shape (M,3)")
        if not np.issubdtype(tris.dtype, np.integer):
            raise ValueError("triangles must hold integer vertex indices")
        if tris.size and (tris.min() < 0 or tris.max() >= len(pts)):
            raise ValueError(f"triangle vertex index out of range [0, {len(pts) - 1}]")

        self.n_vertices = 0
        self.n_triangles = 0
        self._points = np.zeros((_MIN_CAPACITY, 3), dtype=np.float64)
        self._triangles = np.zeros((_MIN_CAPACITY, 3), dtype=np.int64)
        self._normals = np.zeros((_MIN_CAPACITY, 3), dtype=np.float64)
        self._selected = np.zeros(_MIN_CAPACITY, dtype=bool)
        self._reserve_vertices(len(pts))
        self._reserve_triangles(len(tris))
        self.n_vertices = len(pts)
        self.n_triangles = len(tris)
        self._points[1:len(pts) + 1] = pts
        self._triangles[1:len(tris) + 1] = tris.astype(np.int64) + 1

        if normals is None:
            self.compute_face_normals()
        else:
            nrm = np.asarray(normals, dtype=np.float64)
            if nrm.shape != (len(tris), 3):
                raise ValueError(f"normals must have shape ({len(tris)},3)")
            self._normals[1:len(tris) + 1] = nrm

        self.v_map = {}
        self._build_incidence()
        self.face_adjacency = np.zeros((1, 3, 2), dtype=np.int64)
        self.vertex_normals = np.zeros((1, 3), dtype=np.float64)
        self._op_stats = defaultdict(OpStats)
        if selected is not None:
            self.select(selected)
        self.compute_face_adjacency()
        self.compute_vertex_normals()

    @classmethod
    def from_one_based(cls, points, triangles, normals=None, selected=None, debug: bool = False) -> 'TriMesh':
        """Build from arrays that already carry the reserved row 0."""
        pts = np.asarray(points, dtype=np.float64)[1:]
        tris = np.asarray(triangles)[1:] - 1
        nrm = None if normals is None else np.asarray(normals, dtype=np.float64)[1:]
        return cls(pts, tris, normals=nrm, selected=selected, debug=debug)

    # --- Views (row 0 reserved) ---
    @property
    def points(self):
        return self._points[:self.n_vertices + 1]

    @property
    def triangles(self):
        return self._triangles[:self.n_triangles + 1]

    @property
    def normals(self):
        return self._normals[:self.n_triangles + 1]

    @property
    def selected(self):
        return self._selected[:self.n_triangles + 1]

    def vertex_handles(self):
        return range(1, self.n_vertices + 1)

    def triangle_handles(self):
        return range(1, self.n_triangles + 1)

    def to_zero_based(self):
        """Return copies of (points, triangles) without the reserved row and 0-based."""
        return self.points[1:].copy(), self.triangles[1:] - 1

    # --- Capacity ---
    def _reserve_vertices(self, count: int):
        need = count + 1
        cap = len(self._points)
        if need <= cap:
            return
        while cap < need:
            cap *= 2
        out = np.zeros((cap, 3), dtype=np.float64)
        out[:len(self._points)] = self._points
        self._points = out

    def _reserve_triangles(self, count: int):
        need = count + 1
        cap = len(self._triangles)
        if need <= cap:
            return
        while cap < need:
            cap *= 2
        tri_out = np.zeros((cap, 3), dtype=np.int64)
        tri_out[:len(self._triangles)] = self._triangles
        nrm_out = np.zeros((cap, 3), dtype=np.float64)
        nrm_out[:len(self._normals)] = self._normals
        sel_out = np.zeros(cap, dtype=bool)
        sel_out[:len(self._selected)] = self._selected
        self._triangles, self._normals, self._selected = tri_out, nrm_out, sel_out

    # --- Incidence bookkeeping ---
    def _build_incidence(self):
        self.v_map = {v: set() for v in self.vertex_handles()}
        for t in self.triangle_handles():
            for v in self._triangles[t]:
                self.v_map[int(v)].add(t)

    def add_vertex(self, position) -> int:
        """Append a vertex and give it an empty incidence entry."""
        self._reserve_vertices(self.n_vertices + 1)
        self.n_vertices += 1
        v = self.n_vertices
        self._points[v] = np.asarray(position, dtype=np.float64)
        self.v_map[v] = set()
        return v

    def add_triangle(self, verts, normal=None, selected: bool = False) -> int:
        """Append a triangle slot and register it in the incidence map."""
        self._reserve_triangles(self.n_triangles + 1)
        self.n_triangles += 1
        t = self.n_triangles
        self._triangles[t] = RESERVED_HANDLE
        self.set_triangle(t, verts)
        if normal is not None:
            self._normals[t] = np.asarray(normal, dtype=np.float64)
        self._selected[t] = bool(selected)
        return t

    def set_triangle(self, t: int, verts) -> None:
        """Rewrite slot ``t`` with ``verts``, pairing the incidence update.

        This is the only place a triangle's vertex triple changes.
        """
        old = [int(v) for v in self._triangles[t]]
        new = [int(v) for v in verts]
        for v in set(old) - set(new):
            if v != RESERVED_HANDLE:
                self.v_map[v].discard(t)
        for v in set(new):
            self.v_map[v].add(t)
        self._triangles[t] = new
        if self.debug:
            self.logger.debug("triangle %d: %s -> %s", t, old, new)

    def replace_vertex(self, t: int, slot: int, v: int) -> None:
        verts = [int(x) for x in self._triangles[t]]
        verts[slot] = int(v)
        self.set_triangle(t, verts)

    def incident_triangles(self, v: int) -> Set[int]:
        return self.v_map.get(int(v), set())

    def valence(self, v: int) -> int:
        return len(self.v_map.get(int(v), ()))

    # --- Selection ---
    def _check_tri_handle(self, t: int) -> int:
        t = int(t)
        if not 1 <= t <= self.n_triangles:
            raise IndexError(f"triangle handle {t} out of range [1, {self.n_triangles}]")
        return t

    def is_selected(self, t: int) -> bool:
        return bool(self._selected[int(t)])

    def select(self, handles: Iterable[int], value: bool = True) -> None:
        for t in handles:
            self._selected[self._check_tri_handle(t)] = value

    def deselect(self, handles: Iterable[int]) -> None:
        self.select(handles, value=False)

    def clear_selection(self) -> None:
        self._selected[:] = False

    def select_all(self) -> None:
        self._selected[1:self.n_triangles + 1] = True

    def selected_handles(self):
        return [int(t) for t in np.flatnonzero(self.selected) if t != RESERVED_HANDLE]

    # --- Navigation ---
    def across_edge(self, ot: OrTri) -> OrTri:
        """Return the same undirected edge as seen from the neighbouring triangle.

        Resolved against the live incidence map, so it is valid in the middle
        of a pass. On a mesh boundary the handle itself is returned. When an
        edge is shared by more than two triangles the lowest other handle wins.
        """
        a, b = ot.endpoints(self)
        nb = self.triangle_across(ot.tri, a, b)
        return ot if nb is None else nb

    def triangle_across(self, t: int, a: int, b: int) -> Optional[OrTri]:
        """Neighbour of ``t`` across the undirected vertex pair {a, b}, or None."""
        others = (self.incident_triangles(a) & self.incident_triangles(b)) - {int(t)}
        for nbr in sorted(others):
            j = local_edge_of(self._triangles[nbr], a, b)
            if j >= 0:
                return OrTri(nbr, j)
        return None

    # --- Derived attributes ---
    def triangle_normal(self, t: int):
        """Unnormalised normal of triangle ``t`` from current positions."""
        a, b, c = (int(v) for v in self._triangles[int(t)])
        return face_normal(self._points[a], self._points[b], self._points[c])

    def compute_face_normals(self) -> None:
        n = self.n_triangles
        self._normals[1:n + 1] = face_normals(self._points, self._triangles[1:n + 1])

    def compute_vertex_normals(self) -> None:
        """Vertex normals as the normalised sum of incident face normals."""
        acc = np.zeros((self.n_vertices + 1, 3), dtype=np.float64)
        tris = self._triangles[1:self.n_triangles + 1]
        nrm = self._normals[1:self.n_triangles + 1]
        for k in range(3):
            np.add.at(acc, tris[:, k], nrm)
        acc[RESERVED_HANDLE] = 0.0
        self.vertex_normals = unit_rows(acc)

    def compute_face_adjacency(self) -> None:
        """Rebuild the across-edge table.

        ``face_adjacency[t, i]`` holds ``(neighbour, neighbour_edge)`` for local
        edge ``i`` of triangle ``t``, or ``(t, i)`` on a mesh boundary.
        """
        adj = np.zeros((self.n_triangles + 1, 3, 2), dtype=np.int64)
        for t in self.triangle_handles():
            for i in range(3):
                nb = self.across_edge(OrTri(t, i))
                adj[t, i] = (nb.tri, nb.edge)
        self.face_adjacency = adj

    # --- Stats helpers ---
    def _get_op_stats(self, name: str) -> OpStats:
        return self._op_stats[name]

    def stats_summary(self):
        return {k: v.to_dict() for k, v in self._op_stats.items()}

    def print_stats(self, pretty: bool = True, file=None):
        """Delegate to `stats.print_stats` for presentation."""
        _print_stats(self.stats_summary(), file=file, pretty=pretty)

    def reset_stats(self, drop_ops: bool = False):
        """Zero the per-operation counters, or drop them entirely."""
        if drop_ops:
            self._op_stats.clear()
        else:
            for s in self._op_stats.values():
                s.reset()

    def __repr__(self):
        return (f"{self.__class__.__name__}(n_vertices={self.n_vertices}, "
                f"n_triangles={self.n_triangles}, selected={int(self.selected.sum())})")


__all__ = ['TriMesh']
