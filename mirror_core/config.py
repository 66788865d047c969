"""Room constants and clamped ray/bounce configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

ROOM_HALF = 10.0

MAX_RAY_COUNT = 8
MIN_FAN_RAYS = 1
MAX_FAN_RAYS = 6
MIN_BOUNCES = 1
MAX_BOUNCES = 5
MAX_IMAGE_LEVELS = 4

DEFAULT_FAN_ANGLE = np.pi / 2
SOURCE_RADIUS = 1.0


def clamp_int(value: float, lo: int, hi: int) -> int:
    return int(max(lo, min(hi, int(value))))


@dataclass(frozen=True)
class RayConfig:
    count: int = 4
    fan_rays: int = 1
    max_bounces: int = 2

    def with_count(self, count: int) -> "RayConfig":
        return replace(self, count=clamp_int(count, 0, MAX_RAY_COUNT))

    def with_fan_rays(self, fan_rays: int) -> "RayConfig":
        return replace(self, fan_rays=clamp_int(fan_rays, MIN_FAN_RAYS, MAX_FAN_RAYS))

    def with_max_bounces(self, max_bounces: int) -> "RayConfig":
        return replace(self, max_bounces=clamp_int(max_bounces, MIN_BOUNCES, MAX_BOUNCES))
