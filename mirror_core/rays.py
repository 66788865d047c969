"""Ray container and fan-shaped ray generation around a source object.

Example:
    >>> import numpy as np
    >>> from mirror_core.rays import generate_rays
    >>> rays = generate_rays(np.zeros(3), np.eye(3), ray_count=4)
    >>> np.allclose(rays[1].direction, [0.0, 0.0, 1.0])
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
from numpy.typing import NDArray

from mirror_core.config import DEFAULT_FAN_ANGLE, MAX_FAN_RAYS, MAX_RAY_COUNT, MIN_FAN_RAYS, SOURCE_RADIUS, clamp_int
from mirror_core.geometry import Vector, normalize, rotation_y

Color = Tuple[float, float, float]

SURFACE_OFFSET = 0.01

# Exit-face colors of the cube source
FACE_COLORS: Dict[str, Color] = {
    "front": (0.48, 1.0, 0.0),  # +Z
    "back": (0.0, 0.72, 1.0),  # -Z
    "right": (1.0, 0.0, 0.92),  # +X
    "left": (1.0, 0.85, 0.0),  # -X
}


@dataclass(frozen=True)
class Ray:
    origin: Vector
    direction: Vector
    color: Color = (1.0, 1.0, 1.0)


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def gradient_color(index: int, total: int) -> Color:
    """Cyan -> magenta -> yellow -> cyan gradient by ray index."""

    t = index / total
    if t < 0.33:
        k = _clamp01(t * 3)
        return (k, 1.0 - k, 1.0)
    if t < 0.67:
        k = _clamp01((t - 0.33) * 3)
        return (1.0, k, 1.0 - k)
    k = _clamp01((t - 0.67) * 3)
    return (1.0 - k, 1.0, k)


def face_color(local_dir: Vector) -> Color:
    x, z = float(local_dir[0]), float(local_dir[2])
    if abs(x) >= abs(z):
        return FACE_COLORS["right"] if x >= 0 else FACE_COLORS["left"]
    return FACE_COLORS["front"] if z >= 0 else FACE_COLORS["back"]


def local_direction(index: int, count: int) -> Vector:
    angle = index / count * 2.0 * np.pi
    return np.array([np.cos(angle), 0.0, np.sin(angle)])


def fan_directions(primary: Vector, fan_count: int, fan_angle: float = DEFAULT_FAN_ANGLE) -> List[Vector]:
    if fan_count == 1:
        return [primary.copy()]
    step = fan_angle / (fan_count - 1)
    start = -fan_angle / 2.0
    return [normalize(rotation_y(start + i * step) @ primary) for i in range(fan_count)]


def _rotation_block(orientation: NDArray[np.float64]) -> NDArray[np.float64]:
    m = np.asarray(orientation, dtype=float)
    if m.shape == (4, 4):
        return m[:3, :3]
    if m.shape != (3, 3):
        raise ValueError(f"orientation must be 3x3 or 4x4, got {m.shape}")
    return m


def generate_rays(
    origin: Vector,
    orientation: NDArray[np.float64],
    ray_count: int,
    fan_count: int = 1,
    fan_angle: float = DEFAULT_FAN_ANGLE,
    source_radius: float = SOURCE_RADIUS,
    color_mode: str = "gradient",
) -> List[Ray]:
    """Rays leaving the source surface, evenly spaced in its local horizontal plane.

    ``orientation`` rotates local directions into world space (``R @ d``).
    Each primary direction is spread into ``fan_count`` rays over
    ``fan_angle`` about the vertical axis. ``color_mode`` is ``"gradient"``
    (sphere source) or ``"face"`` (cube source, colored by exit face).
    """

    if color_mode not in ("gradient", "face"):
        raise ValueError(f"Unknown color_mode '{color_mode}'")
    n_rays = clamp_int(ray_count, 0, MAX_RAY_COUNT)
    n_fan = clamp_int(fan_count, MIN_FAN_RAYS, MAX_FAN_RAYS)
    rot = _rotation_block(orientation)
    center = np.asarray(origin, dtype=float)

    rays: List[Ray] = []
    for i in range(n_rays):
        local = local_direction(i, n_rays)
        primary = normalize(rot @ local)
        color = face_color(local) if color_mode == "face" else gradient_color(i, n_rays)
        for d in fan_directions(primary, n_fan, fan_angle):
            rays.append(
                Ray(
                    origin=center + d * (source_radius + SURFACE_OFFSET),
                    direction=d.copy(),
                    color=color,
                )
            )
    return rays
