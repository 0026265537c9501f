"""Oriented-triangle handles.

An ``OrTri`` addresses one directed edge of a triangle: local edge ``i`` runs
from the triangle's ``i``-th vertex to its ``(i+1) % 3``-th vertex under the
triangle's stored winding. Neighbour lookup lives on the mesh
(``TriMesh.across_edge``) because it needs the incidence map.
"""
from __future__ import annotations

from typing import NamedTuple, Tuple


class OrTri(NamedTuple):
    tri: int
    edge: int

    def index(self) -> int:
        return self.tri

    def edge_index(self) -> int:
        return self.edge

    def origin(self, mesh) -> int:
        return int(mesh.triangles[self.tri, self.edge])

    def destination(self, mesh) -> int:
        return int(mesh.triangles[self.tri, (self.edge + 1) % 3])

    def apex(self, mesh) -> int:
        """Vertex of the triangle not on this edge."""
        return int(mesh.triangles[self.tri, (self.edge + 2) % 3])

    def endpoints(self, mesh) -> Tuple[int, int]:
        return self.origin(mesh), self.destination(mesh)

    def enext(self) -> 'OrTri':
        return OrTri(self.tri, (self.edge + 1) % 3)


def make_ortri(tri: int, local_edge: int) -> OrTri:
    local_edge = int(local_edge)
    if not 0 <= local_edge <= 2:
        raise ValueError(f"local edge index must be 0, 1 or 2, got {local_edge}")
    return OrTri(int(tri), local_edge)


def local_edge_of(tri_verts, a: int, b: int) -> int:
    """Local index of undirected edge {a, b} in a vertex triple, or -1."""
    for i in range(3):
        u = int(tri_verts[i]); v = int(tri_verts[(i + 1) % 3])
        if (u == a and v == b) or (u == b and v == a):
            return i
    return -1


__all__ = ['OrTri', 'make_ortri', 'local_edge_of']
