"""Public package API for trirefine.

Selective refinement and relaxation of indexed triangle meshes. This facade
gives a flat import surface over ``trirefine.core``.

Example
-------
    from trirefine import TriMesh, subdivide, relax

    mesh = TriMesh(points, triangles, selected=[1, 2])
    subdivide(mesh)
    flips = relax(mesh, max_flips=20, max_angle=0.1)

The deeper modules (``trirefine.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:  # Python 3.8+ runtime version export
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("trirefine")  # populated when installed
except Exception:  # pragma: no cover - editable / unknown state
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

_geom = _imp('trirefine.core.geometry')
_const = _imp('trirefine.core.constants')
_conf = _imp('trirefine.core.conformity')
_nav = _imp('trirefine.core.navigation')
_mesh = _imp('trirefine.core.mesh')
_sub = _imp('trirefine.core.subdivide')
_relax = _imp('trirefine.core.relax')
_refine = _imp('trirefine.core.refine')
_config = _imp('trirefine.core.config')
_stats = _imp('trirefine.core.stats')
_logu = _imp('trirefine.core.logging_utils')

# Data model
TriMesh = _mesh.TriMesh
OrTri = _nav.OrTri
make_ortri = _nav.make_ortri

# Algorithms
subdivide = _sub.subdivide
SubdivisionResult = _sub.SubdivisionResult
relax = _relax.relax
refine_selection = _refine.refine_selection
RefineReport = _refine.RefineReport

# Configuration
SubdivideConfig = _config.SubdivideConfig
RelaxConfig = _config.RelaxConfig
RefineConfig = _config.RefineConfig
DEFAULT_MAX_ANGLE = _const.DEFAULT_MAX_ANGLE
DEFAULT_MAX_FLIPS = _const.DEFAULT_MAX_FLIPS

# Diagnostics / logging
check_incidence = _conf.check_incidence
check_adjacency = _conf.check_adjacency
configure_logging = _logu.configure_logging
get_logger = _logu.get_logger

# Namespace submodules for exploratory users
geometry = _geom
conformity = _conf
navigation = _nav
stats = _stats
constants = _const

__all__ = [
    '__version__',
    'TriMesh', 'OrTri', 'make_ortri',
    'subdivide', 'SubdivisionResult', 'relax', 'refine_selection', 'RefineReport',
    'SubdivideConfig', 'RelaxConfig', 'RefineConfig', 'DEFAULT_MAX_ANGLE', 'DEFAULT_MAX_FLIPS',
    'check_incidence', 'check_adjacency', 'configure_logging', 'get_logger',
    'geometry', 'conformity', 'navigation', 'stats', 'constants',
]
