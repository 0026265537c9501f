"""Geometry primitives for 3D triangle meshes."""
from __future__ import annotations
import math
import numpy as np
from .constants import EPS_NORMAL

__all__ = [
	'midpoint', 'face_normal', 'face_normals', 'normal_angle',
	'unit_rows', 'normalize_edge',
]


def midpoint(p0, p1):
	p0 = np.asarray(p0, dtype=np.float64); p1 = np.asarray(p1, dtype=np.float64)
	return 0.5 * (p0 + p1)


def face_normal(p0, p1, p2):
	"""Unnormalised normal of triangle (p0, p1, p2); its length is twice the area."""
	p0 = np.asarray(p0); p1 = np.asarray(p1); p2 = np.asarray(p2)
	return np.cross(p1 - p0, p2 - p0)


def face_normals(points, tris):
	"""Vectorized unit normals for an (M,3) triangle index array.

	Degenerate triangles get a zero normal instead of NaNs.
	"""
	tris = np.asarray(tris, dtype=np.int64)
	if tris.size == 0:
		return np.zeros((0, 3), dtype=np.float64)
	p0 = points[tris[:, 0]]; p1 = points[tris[:, 1]]; p2 = points[tris[:, 2]]
	return unit_rows(np.cross(p1 - p0, p2 - p0))


def unit_rows(vecs):
	vecs = np.asarray(vecs, dtype=np.float64)
	norms = np.linalg.norm(vecs, axis=1)
	out = np.zeros_like(vecs)
	ok = norms > EPS_NORMAL
	out[ok] = vecs[ok] / norms[ok, None]
	return out


def normal_angle(n1, n2):
	"""Angle in radians between two (not necessarily unit) normals.

	Returns NaN when either normal is degenerate.
	"""
	n1 = np.asarray(n1, dtype=np.float64); n2 = np.asarray(n2, dtype=np.float64)
	denom = float(np.linalg.norm(n1) * np.linalg.norm(n2))
	if denom <= EPS_NORMAL:
		return math.nan
	cosang = float(np.dot(n1, n2)) / denom
	return math.acos(float(np.clip(cosang, -1.0, 1.0)))


def normalize_edge(u, v):
	"""
	Return a normalized edge representation as (min, max).

	Edges (u, v) and (v, u) map to the same key, which is what the
	midpoint cache and the edge maps index by.
	"""
	u = int(u); v = int(v)
	return (u, v) if u <= v else (v, u)
