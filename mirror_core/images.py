"""Mirror-image (virtual source) enumeration for multi-bounce reflections.

A path reflected off walls ``w1, ..., wk`` places a copy of the source at
the point obtained by mirroring the source across ``w1``, then ``w2``, and so
on. Consecutive repeats of a wall are skipped because mirroring twice across
the same plane returns to the previous image.

Example:
    >>> import numpy as np
    >>> from mirror_core.images import generate_paths
    >>> paths = generate_paths(np.array([0.0, 5.0, 5.0]), max_bounces=1)
    >>> [p.id for p in paths]
    ['north', 'east', 'west']
    >>> paths[0].position.tolist()
    [0.0, 5.0, 15.0]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from mirror_core.config import MAX_IMAGE_LEVELS, clamp_int
from mirror_core.geometry import Vector, WallPlane, axis_flip, mirror_point_across_plane
from mirror_core.walls import build_wall_planes, mirror_planes

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "_"


@dataclass(frozen=True)
class ReflectionPath:
    id: str
    bounce_count: int
    wall_sequence: Tuple[str, ...]
    position: Vector
    scaling: Vector


def path_id(wall_sequence: Sequence[str]) -> str:
    return PATH_SEPARATOR.join(wall_sequence)


def image_position(source_position: Vector, sequence: Sequence[WallPlane]) -> Vector:
    p = np.asarray(source_position, dtype=float).copy()
    for wall in sequence:
        p = mirror_point_across_plane(p, wall)
    return p


def expected_path_count(max_bounces: int, n_mirrors: int = 3) -> int:
    """Cumulative number of paths for levels 1..max_bounces."""

    levels = clamp_int(max_bounces, 0, MAX_IMAGE_LEVELS)
    return sum(n_mirrors * (n_mirrors - 1) ** (k - 1) for k in range(1, levels + 1))


def generate_paths(
    source_position: Vector,
    max_bounces: int,
    walls: Optional[Sequence[WallPlane]] = None,
) -> List[ReflectionPath]:
    """Enumerate every mirror-image of the source up to ``max_bounces`` levels.

    Paths are ordered by level; within a level they follow the mirror wall
    order of ``walls``. ``max_bounces`` is clamped to ``[0, MAX_IMAGE_LEVELS]``.
    """

    mirrors = mirror_planes(walls if walls is not None else build_wall_planes())
    levels = clamp_int(max_bounces, 0, MAX_IMAGE_LEVELS)
    src = np.asarray(source_position, dtype=float)

    paths: List[ReflectionPath] = []
    frontier: List[Tuple[Tuple[WallPlane, ...], Vector]] = [((), np.ones(3))]
    for level in range(1, levels + 1):
        next_frontier = []
        for sequence, scaling in frontier:
            last = sequence[-1].wall_id if sequence else None
            for wall in mirrors:
                if wall.wall_id == last:
                    continue
                seq = sequence + (wall,)
                ids = tuple(w.wall_id for w in seq)
                scl = scaling * axis_flip(wall.normal)
                paths.append(
                    ReflectionPath(
                        id=path_id(ids),
                        bounce_count=level,
                        wall_sequence=ids,
                        position=image_position(src, seq),
                        scaling=scl,
                    )
                )
                next_frontier.append((seq, scl))
        frontier = next_frontier

    logger.debug("Generated %d reflection paths for %d levels", len(paths), levels)
    return paths
