"""Geometry primitives and intersection helpers.

Example:
    >>> import numpy as np
    >>> from mirror_core.geometry import WallPlane, calculate_intersection
    >>> wall = WallPlane("north", np.array([0.0, 0.0, 10.0]), np.array([0.0, 0.0, -1.0]), True)
    >>> hit = calculate_intersection(np.zeros(3), np.array([0.0, 0.0, 1.0]), wall)
    >>> hit.hit, round(hit.distance, 6)
    (True, 10.0)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

Vector = NDArray[np.float64]

MIN_HIT_DISTANCE = 1e-3


@dataclass(frozen=True)
class WallPlane:
    """Infinite wall plane with an inward-facing unit normal."""

    wall_id: str
    position: Vector
    normal: Vector
    is_mirror: bool = False

    def unit_normal(self) -> Vector:
        n = np.asarray(self.normal, dtype=float)
        return n / np.linalg.norm(n)


@dataclass(frozen=True)
class IntersectionResult:
    hit: bool
    distance: float = float("inf")
    point: Optional[Vector] = None
    normal: Optional[Vector] = None
    is_mirror: bool = False
    wall_id: Optional[str] = None


MISS = IntersectionResult(hit=False)


def normalize(v: Vector) -> Vector:
    vv = np.asarray(v, dtype=float)
    n = np.linalg.norm(vv)
    if n == 0:
        raise ValueError("Cannot normalize zero vector")
    return vv / n


def intersect_ray_plane(
    origin: Vector,
    direction: Vector,
    plane_position: Vector,
    plane_normal: Vector,
    eps: float = 1e-9,
) -> Optional[float]:
    """Return the distance along the ray to the plane or None.

    Ray equation: x = origin + t direction, t >= MIN_HIT_DISTANCE.
    """

    o = np.asarray(origin, dtype=float)
    d = np.asarray(direction, dtype=float)
    length = float(np.linalg.norm(d))
    if length < eps:
        return None
    d = d / length
    n = np.asarray(plane_normal, dtype=float)
    denom = float(np.dot(n, d))
    if abs(denom) < eps:
        return None
    t = float(np.dot(n, np.asarray(plane_position, dtype=float) - o) / denom)
    if t < MIN_HIT_DISTANCE:
        return None
    return t


def calculate_intersection(origin: Vector, direction: Vector, wall: WallPlane) -> IntersectionResult:
    t = intersect_ray_plane(origin, direction, wall.position, wall.unit_normal())
    if t is None:
        return MISS
    o = np.asarray(origin, dtype=float)
    d = normalize(direction)
    return IntersectionResult(
        hit=True,
        distance=t,
        point=o + t * d,
        normal=wall.unit_normal().copy(),
        is_mirror=wall.is_mirror,
        wall_id=wall.wall_id,
    )


def reflect(incoming: Vector, normal: Vector) -> Vector:
    """Specular reflection direction, re-normalized to absorb rounding."""

    d = np.asarray(incoming, dtype=float)
    n = normalize(normal)
    r = d - 2.0 * np.dot(d, n) * n
    return normalize(r)


def mirror_point_across_plane(point: Vector, wall: WallPlane) -> Vector:
    """Reflect a point across an infinite wall plane."""

    p = np.asarray(point, dtype=float)
    n = wall.unit_normal()
    signed_dist = np.dot(p - np.asarray(wall.position, dtype=float), n)
    return p - 2.0 * signed_dist * n


def axis_flip(normal: Vector) -> Vector:
    """Per-axis scale (+1/-1) mirroring across a plane with an axis-aligned normal."""

    n = np.abs(normalize(normal))
    return np.where(n > 0.5, -1.0, 1.0)


def rotation_y(angle: float) -> NDArray[np.float64]:
    """Rotation about +Y; rotation_y(pi/2) maps +X onto -Z."""

    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])
