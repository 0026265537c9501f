"""Operation statistics data structures and presentation utilities.

Each mesh keeps one OpStats per operation name ('subdivide', 'relax') so a
session of interactive edits can be summarised at the end.
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict, Any


@dataclass
class OpStats:
    calls: int = 0
    # Subdivision
    refined: int = 0
    vertices_created: int = 0
    triangles_created: int = 0
    stitched: int = 0
    # Relaxation
    candidates: int = 0
    flips: int = 0
    stale_skips: int = 0
    angle_rejects: int = 0
    degenerate_rejects: int = 0
    # Timing (seconds)
    time_total: float = 0.0
    time_max: float = 0.0
    time_min: float = 0.0  # 0 means uninitialized

    def record_time(self, duration: float) -> None:
        self.time_total += duration
        if duration > self.time_max:
            self.time_max = duration
        if self.time_min == 0.0 or duration < self.time_min:
            self.time_min = duration

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, f.default)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out['flip_rate'] = (self.flips / self.candidates) if self.candidates else 0.0
        out['time_avg'] = (self.time_total / self.calls) if self.calls else 0.0
        return out


def format_stats_table(stats_dict) -> str:
    """Return a human readable multi-line table summarizing op stats."""
    if not stats_dict:
        return "<no stats>"
    header = ["op", "calls", "refined", "newV", "newT", "stitch", "cand", "flips",
              "stale", "angRej", "avg_ms", "max_ms"]
    rows = []
    for op in sorted(stats_dict.keys()):
        s = stats_dict[op]
        rows.append([
            op, str(s['calls']), str(s['refined']), str(s['vertices_created']),
            str(s['triangles_created']), str(s['stitched']), str(s['candidates']),
            str(s['flips']), str(s['stale_skips']), str(s['angle_rejects']),
            f"{s['time_avg'] * 1000.0:8.3f}", f"{s['time_max'] * 1000.0:8.3f}",
        ])
    col_w = [len(h) for h in header]
    for r in rows:
        for i, v in enumerate(r):
            if len(v) > col_w[i]: col_w[i] = len(v)
    def fmt(r):
        return " ".join(r[i].rjust(col_w[i]) for i in range(len(r)))
    lines = [fmt(header), "-" * (sum(col_w) + len(col_w) - 1)] + [fmt(r) for r in rows]
    return "\n".join(lines)


def print_stats(stats_dict, file=None, pretty=True):  # pragma: no cover - formatting wrapper
    import sys
    out = file or sys.stdout
    if not pretty:
        print(stats_dict, file=out)
        return
    print(format_stats_table(stats_dict), file=out)


__all__ = ["OpStats", "print_stats", "format_stats_table"]
