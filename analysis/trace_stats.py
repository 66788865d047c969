"""Summary statistics over traced rays and mirror-image path sets."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

import numpy as np

from mirror_core.geometry import WallPlane
from mirror_core.images import ReflectionPath
from mirror_core.tracer import DISPLAY_OFFSET, TracedRay


def bounce_distribution(traces: Sequence[TracedRay]) -> Dict[int, int]:
    return dict(sorted(Counter(t.bounce_count for t in traces).items()))


def polyline_lengths(traces: Sequence[TracedRay]) -> np.ndarray:
    out = np.zeros(len(traces), dtype=float)
    for i, t in enumerate(traces):
        pts = np.asarray(t.points, dtype=float)
        out[i] = float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1))) if len(pts) > 1 else 0.0
    return out


def terminal_walls(traces: Sequence[TracedRay], walls: Sequence[WallPlane], tol: float = 1e-6) -> List[str]:
    """Wall id on which each trace ends ("" when no wall matches)."""

    labels: List[str] = []
    for t in traces:
        end = np.asarray(t.points[-1], dtype=float) - DISPLAY_OFFSET
        label = ""
        for w in walls:
            if abs(float(np.dot(end - w.position, w.unit_normal()))) < tol:
                label = w.wall_id
                break
        labels.append(label)
    return labels


def level_counts(paths: Sequence[ReflectionPath]) -> Dict[int, int]:
    return dict(sorted(Counter(p.bounce_count for p in paths).items()))


def has_consecutive_repeat(path: ReflectionPath) -> bool:
    seq = path.wall_sequence
    return any(a == b for a, b in zip(seq, seq[1:]))
