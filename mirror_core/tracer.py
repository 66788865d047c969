"""Bounded multi-bounce ray tracing inside the mirrored room.

Example:
    >>> import numpy as np
    >>> from mirror_core.rays import Ray
    >>> from mirror_core.tracer import trace_ray
    >>> from mirror_core.walls import build_wall_planes
    >>> ray = Ray(np.zeros(3), np.array([1.0, 0.0, 0.0]))
    >>> len(trace_ray(ray, build_wall_planes(), max_bounces=1))
    3
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from mirror_core.config import MAX_BOUNCES, MIN_BOUNCES, clamp_int
from mirror_core.geometry import MISS, IntersectionResult, Vector, WallPlane, calculate_intersection, reflect
from mirror_core.rays import Ray
from mirror_core.segments import RaySegment, create_ray_segments

logger = logging.getLogger(__name__)

# lifts drawn hit points off the floor plane of the visualization
DISPLAY_OFFSET = np.array([0.0, 0.01, 0.0])
RESTART_NUDGE = 1e-3


class ClosedRoomError(RuntimeError):
    """A traced ray escaped the room without hitting any wall."""


@dataclass
class TracedRay:
    ray: Ray
    points: List[Vector]

    @property
    def bounce_count(self) -> int:
        return len(self.points) - 2

    def segments(self) -> List[RaySegment]:
        return create_ray_segments(self.points)


def find_nearest_intersection(origin: Vector, direction: Vector, walls: Sequence[WallPlane]) -> IntersectionResult:
    nearest = MISS
    for wall in walls:
        result = calculate_intersection(origin, direction, wall)
        if result.hit and result.distance < nearest.distance:
            nearest = result
    return nearest


def trace_ray(ray: Ray, walls: Sequence[WallPlane], max_bounces: int) -> List[Vector]:
    """Trace a ray until it hits a plain wall or spends its bounce budget.

    Returns the path points, starting with the ray origin. The final hit is
    counted, so the result holds between 2 and ``max_bounces + 2`` points.
    """

    bounces = clamp_int(max_bounces, MIN_BOUNCES, MAX_BOUNCES)
    origin = np.array(ray.origin, dtype=float)
    direction = np.array(ray.direction, dtype=float)
    points: List[Vector] = [origin.copy()]

    bounce_count = 0
    while bounce_count <= bounces:
        hit = find_nearest_intersection(origin, direction, walls)
        if not hit.hit:
            logger.error(
                "Ray escaped the room: origin=%s direction=%s after %d bounces",
                origin.tolist(),
                direction.tolist(),
                bounce_count,
            )
            raise ClosedRoomError(f"No wall intersection from {origin.tolist()} along {direction.tolist()}")

        points.append(hit.point + DISPLAY_OFFSET)
        if not hit.is_mirror or bounce_count >= bounces:
            break

        direction = reflect(direction, hit.normal)
        origin = hit.point + RESTART_NUDGE * direction
        bounce_count += 1

    return points


def trace_rays(rays: Sequence[Ray], walls: Sequence[WallPlane], max_bounces: int) -> List[TracedRay]:
    traced = [TracedRay(ray=r, points=trace_ray(r, walls, max_bounces)) for r in rays]
    logger.debug("Traced %d rays with max_bounces=%d", len(traced), max_bounces)
    return traced
