"""Consistency checks for the incidence map and across-edge table.

These are debugging aids. Tests call them directly, and subdivide/relax run
``check_incidence`` after each pass when the mesh was built with ``debug=True``.
They report problems as messages and never repair the mesh.
"""
from __future__ import annotations

import numpy as np

from .geometry import normalize_edge
from .navigation import OrTri

__all__ = [
	'build_vertex_to_tri_map', 'build_edge_to_tri_map',
	'check_incidence', 'check_adjacency', 'non_manifold_edges',
]


def build_vertex_to_tri_map(triangles, start: int = 1):
	"""Rebuild vertex -> triangle handles from scratch (rows before ``start`` skipped)."""
	v_map = {}
	for t_idx in range(start, len(triangles)):
		for v in np.asarray(triangles[t_idx]):
			v_map.setdefault(int(v), set()).add(t_idx)
	return v_map


def build_edge_to_tri_map(triangles, start: int = 1):
	edge_map = {}
	for t_idx in range(start, len(triangles)):
		arr = np.asarray(triangles[t_idx])
		for i in range(3):
			key = normalize_edge(arr[i], arr[(i+1) % 3])
			edge_map.setdefault(key, set()).add(t_idx)
	return edge_map


def non_manifold_edges(triangles, start: int = 1):
	return {e for e, s in build_edge_to_tri_map(triangles, start).items() if len(s) > 2}


def check_incidence(mesh, verbose=False):
	"""Compare ``mesh.v_map`` with a fresh rebuild from the triangle array.

	Returns (ok, msgs).
	"""
	msgs = []
	expected = build_vertex_to_tri_map(mesh.triangles)
	for v in mesh.vertex_handles():
		have = mesh.v_map.get(v)
		want = expected.get(v, set())
		if have is None:
			msgs.append(f"vertex {v} has no incidence entry")
		elif have != want:
			msgs.append(f"vertex {v}: incidence {sorted(have)} != triangles containing it {sorted(want)}")
	stray = set(mesh.v_map) - set(mesh.vertex_handles())
	if stray:
		msgs.append(f"incidence entries for unknown vertices: {sorted(stray)}")
	if verbose:
		for m in msgs:
			print(m)
	return (not msgs), msgs


def check_adjacency(mesh, verbose=False):
	"""Check that ``mesh.face_adjacency`` agrees with the triangles and is an involution."""
	msgs = []
	adj = mesh.face_adjacency
	if len(adj) != mesh.n_triangles + 1:
		msgs.append(f"adjacency covers {len(adj) - 1} triangles, mesh has {mesh.n_triangles}")
		return False, msgs
	for t in mesh.triangle_handles():
		for i in range(3):
			nb_t, nb_e = (int(x) for x in adj[t, i])
			here = OrTri(t, i)
			if (nb_t, nb_e) == (t, i):
				continue
			there = OrTri(nb_t, nb_e)
			if set(here.endpoints(mesh)) != set(there.endpoints(mesh)):
				msgs.append(f"({t},{i}) -> ({nb_t},{nb_e}) do not share an edge")
			back = tuple(int(x) for x in adj[nb_t, nb_e])
			if back != (t, i) and _edge_degree(mesh, here) == 2:
				msgs.append(f"across-edge not an involution at ({t},{i}): back={back}")
	if verbose:
		for m in msgs:
			print(m)
	return (not msgs), msgs


def _edge_degree(mesh, ot):
	a, b = ot.endpoints(mesh)
	return len(mesh.incident_triangles(a) & mesh.incident_triangles(b))
