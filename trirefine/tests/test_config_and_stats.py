import dataclasses
import math

import numpy as np
import pytest

from trirefine.core.config import RelaxConfig, SubdivideConfig, RefineConfig
from trirefine.core.constants import DEFAULT_MAX_ANGLE, DEFAULT_MAX_FLIPS
from trirefine.core.mesh import TriMesh
from trirefine.core.relax import relax
from trirefine.core.subdivide import subdivide
from trirefine.core.stats import OpStats, format_stats_table


def square():
    pts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    return TriMesh(pts, np.array([[0, 1, 2], [0, 2, 3]]), selected=[1, 2])


def test_relax_config_defaults_and_units():
    cfg = RelaxConfig()
    assert cfg.max_flips == DEFAULT_MAX_FLIPS
    assert math.isclose(cfg.max_angle, DEFAULT_MAX_ANGLE)
    assert math.isclose(RelaxConfig(max_angle_deg=90.0).max_angle, math.pi / 2)
    r = RelaxConfig.from_radians(3, math.pi / 4)
    assert r.max_flips == 3 and math.isclose(r.max_angle_deg, 45.0)


@pytest.mark.parametrize('kwargs', [
    {'max_flips': -1},
    {'max_angle_deg': -1.0},
    {'max_angle_deg': float('nan')},
    {'max_angle_deg': float('inf')},
])
def test_relax_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        RelaxConfig(**kwargs)


def test_refine_config_overrides():
    cfg = RefineConfig.from_overrides(relax_overrides={'max_flips': 4},
                                      subdivide_overrides={'recompute_derived': False},
                                      relax_passes=3)
    assert cfg.relax.max_flips == 4
    assert cfg.subdivide.recompute_derived is False
    assert cfg.relax_passes == 3
    assert isinstance(RefineConfig().subdivide, SubdivideConfig)
    assert [f.name for f in dataclasses.fields(RefineConfig)] == ['subdivide', 'relax', 'relax_passes']


def test_explicit_arguments_override_config():
    mesh = square()
    cfg = RelaxConfig(max_flips=5, max_angle_deg=0.0)
    # coplanar: zero angle passes a zero threshold
    assert relax(mesh, cfg) == 1
    mesh = square()
    assert relax(mesh, cfg, max_flips=0) == 0


def test_stats_accumulate_and_reset():
    mesh = square()
    subdivide(mesh)
    relax(mesh, max_flips=3, max_angle=0.1)
    summary = mesh.stats_summary()
    assert summary['subdivide']['calls'] == 1
    assert summary['subdivide']['vertices_created'] == 5
    assert summary['relax']['calls'] == 1
    assert summary['relax']['flips'] <= 3
    table = format_stats_table(summary)
    assert 'subdivide' in table and 'relax' in table
    mesh.reset_stats()
    assert mesh.stats_summary()['subdivide']['calls'] == 0
    mesh.reset_stats(drop_ops=True)
    assert mesh.stats_summary() == {}


def test_opstats_timing():
    s = OpStats()
    s.calls = 2
    s.record_time(0.5)
    s.record_time(0.25)
    d = s.to_dict()
    assert d['time_max'] == 0.5 and d['time_min'] == 0.25
    assert d['time_avg'] == pytest.approx(0.375)
    assert format_stats_table({}) == "<no stats>"
