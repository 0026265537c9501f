"""Smoke test to ensure top-level package import works and the flat API
layer (`trirefine/__init__.py`) exposes the main entry points.
"""

def test_import_trirefine_smoke():
    import trirefine  # noqa: F401
    assert hasattr(trirefine, 'TriMesh')
    assert callable(trirefine.subdivide)
    assert callable(trirefine.relax)
    assert callable(trirefine.refine_selection)
