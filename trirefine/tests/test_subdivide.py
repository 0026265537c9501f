import numpy as np
from scipy.spatial import Delaunay

from trirefine.core.mesh import TriMesh
from trirefine.core.subdivide import subdivide
from trirefine.core.config import SubdivideConfig
from trirefine.core.conformity import check_incidence, check_adjacency, non_manifold_edges


def unit_square(selected=(1, 2)):
    pts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    tris = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
    return TriMesh(pts, tris, selected=list(selected))


def signed_areas_z(mesh):
    """Signed xy-areas of all live triangles (meshes here lie in z=0)."""
    p = mesh.points
    t = mesh.triangles[1:]
    e1 = p[t[:, 1]] - p[t[:, 0]]
    e2 = p[t[:, 2]] - p[t[:, 0]]
    return 0.5 * (e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])


def assert_mesh_consistent(mesh):
    ok, msgs = check_incidence(mesh)
    assert ok, f"incidence out of sync: {msgs}"
    ok, msgs = check_adjacency(mesh)
    assert ok, f"adjacency out of sync: {msgs}"


def test_square_counts_no_stitch():
    mesh = unit_square()
    res = subdivide(mesh)
    assert mesh.n_vertices == 4 + 5
    assert mesh.n_triangles == 2 + 6
    assert res.vertices_created == 5 and res.triangles_created == 6
    assert res.refined == 2
    assert res.stitched == 0
    assert mesh.selected_handles() == list(range(1, 9))
    assert_mesh_consistent(mesh)


def test_shared_edge_gets_single_midpoint():
    mesh = unit_square()
    subdivide(mesh)
    centre = np.all(np.isclose(mesh.points[1:], [0.5, 0.5, 0.0]), axis=1)
    assert int(centre.sum()) == 1
    v = int(np.flatnonzero(centre)[0]) + 1
    # both central triangles and the two corners at vertices 1 and 3 of each parent
    assert mesh.valence(v) == 6


def test_parent_slot_becomes_central_triangle():
    mesh = unit_square(selected=(1,))
    subdivide(mesh)
    central = mesh.points[mesh.triangles[1]]
    assert np.allclose(sorted(map(tuple, central)),
                       sorted([(0.5, 0, 0), (1, 0.5, 0), (0.5, 0.5, 0)]))
    assert all(v > 4 for v in mesh.triangles[1])


def test_corner_triangles_copy_parent_normal():
    mesh = unit_square()
    mesh.normals[1] = [0.0, 0.0, 2.0]
    subdivide(mesh)
    # corners of triangle 1 are handles 3, 4, 5
    for t in (3, 4, 5):
        assert np.allclose(mesh.normals[t], [0, 0, 2])


def test_area_preserved_and_orientation_kept():
    mesh = unit_square(selected=(1,))
    before = signed_areas_z(mesh).sum()
    subdivide(mesh)
    areas = signed_areas_z(mesh)
    assert np.isclose(areas.sum(), before)
    assert np.all(areas > 0)


def test_unselected_neighbour_is_stitched():
    mesh = unit_square(selected=(1,))
    res = subdivide(mesh)
    assert res.stitched == 1
    assert mesh.n_vertices == 7
    assert mesh.n_triangles == 2 + 3 + 1
    # neighbour keeps its handle and stays unselected, as does the stitch triangle
    assert not mesh.is_selected(2)
    assert not mesh.is_selected(6)
    mid = int(np.flatnonzero(np.all(np.isclose(mesh.points, [0.5, 0.5, 0.0]), axis=1))[0])
    assert mid in mesh.triangles[2]
    assert mid in mesh.triangles[6]
    assert np.allclose(mesh.normals[6], mesh.normals[2])
    assert not non_manifold_edges(mesh.triangles)
    assert_mesh_consistent(mesh)


def test_boundary_edges_never_stitch():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
    for selected in ([1], []):
        mesh = TriMesh(pts, np.array([[0, 1, 2]]), selected=selected)
        res = subdivide(mesh)
        assert res.stitched == 0
    mesh = TriMesh(pts, np.array([[0, 1, 2]]), selected=[1])
    subdivide(mesh)
    assert mesh.n_triangles == 4


def test_empty_selection_is_noop():
    mesh = unit_square(selected=())
    before = mesh.triangles.copy()
    res = subdivide(mesh)
    assert res.refined == 0 and res.vertices_created == 0
    assert np.array_equal(mesh.triangles, before)


def test_only_call_entry_triangles_are_refined():
    mesh = unit_square()
    subdivide(mesh)
    assert mesh.n_triangles == 8
    # the next call refines all eight, sharing interior midpoints
    res = subdivide(mesh)
    assert res.refined == 8
    assert mesh.n_triangles == 32
    # 16 edges in the once-refined square
    assert res.vertices_created == 16
    assert_mesh_consistent(mesh)


def test_triangle_between_two_selected_neighbours():
    # N = (a, b, c) with A across (a, b) and B across (b, c); only A and B selected
    pts = np.array([[0, 0, 0], [2, 0, 0], [1, 2, 0], [1, -2, 0], [3, 2, 0]], dtype=float)
    tris = np.array([[0, 1, 2], [1, 0, 3], [2, 1, 4]], dtype=int)
    mesh = TriMesh(pts, tris, selected=[2, 3])
    total = signed_areas_z(mesh).sum()
    res = subdivide(mesh)
    assert res.stitched == 2
    assert mesh.n_vertices == 5 + 6
    assert mesh.n_triangles == 3 + 6 + 2
    areas = signed_areas_z(mesh)
    assert np.all(areas > 0), areas
    assert np.isclose(areas.sum(), total)
    assert not non_manifold_edges(mesh.triangles)
    assert_mesh_consistent(mesh)


def test_skip_derived_recompute():
    mesh = unit_square()
    subdivide(mesh, SubdivideConfig(recompute_derived=False))
    # table still describes the two original triangles
    assert mesh.face_adjacency.shape[0] == 3
    ok, _ = check_incidence(mesh)
    assert ok


def test_random_selection_keeps_invariants():
    rng = np.random.RandomState(3)
    xy = rng.rand(60, 2)
    tri = Delaunay(xy)
    pts = np.column_stack([xy, np.zeros(len(xy))])
    mesh = TriMesh(pts, tri.simplices.copy())
    area0 = np.abs(signed_areas_z(mesh)).sum()
    chosen = rng.choice(np.arange(1, mesh.n_triangles + 1), size=mesh.n_triangles // 3, replace=False)
    mesh.select(chosen.tolist())
    res = subdivide(mesh)
    assert res.refined == len(chosen)
    assert mesh.n_triangles == len(tri.simplices) + 3 * len(chosen) + res.stitched
    assert np.isclose(np.abs(signed_areas_z(mesh)).sum(), area0)
    assert not non_manifold_edges(mesh.triangles)
    assert_mesh_consistent(mesh)
    stats = mesh.stats_summary()['subdivide']
    assert stats['calls'] == 1 and stats['stitched'] == res.stitched
