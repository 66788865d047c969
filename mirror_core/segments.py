"""Fading line segments for drawing traced ray paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from mirror_core.geometry import Vector

ALPHA_FADE = 0.333


@dataclass(frozen=True)
class RaySegment:
    start: Vector
    end: Vector
    alpha: float


def segment_alpha(index: int, total: int) -> float:
    t = index / max(1, total - 1)
    return 1.0 - ALPHA_FADE * t


def create_ray_segments(points: Sequence[Vector]) -> List[RaySegment]:
    if len(points) < 2:
        return []
    n = len(points) - 1
    return [
        RaySegment(
            start=np.array(points[i], dtype=float),
            end=np.array(points[i + 1], dtype=float),
            alpha=segment_alpha(i, n),
        )
        for i in range(n)
    ]
