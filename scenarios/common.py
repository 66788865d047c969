"""Common scenario helpers."""

from __future__ import annotations

import numpy as np

from mirror_core.geometry import rotation_y
from mirror_core.walls import build_wall_planes


def default_source() -> np.ndarray:
    return np.array([0.0, 5.0, 5.0])


def default_orientation(yaw_deg: float = 0.0) -> np.ndarray:
    return rotation_y(np.deg2rad(yaw_deg))


def make_room(half_extent: float = 10.0):
    return build_wall_planes(half_extent)
