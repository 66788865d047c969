"""Face-colored rays from a rotated cube source."""

from __future__ import annotations

import numpy as np

from mirror_core.rays import generate_rays
from mirror_core.tracer import trace_rays
from mirror_io.hdf5_io import CaseData
from scenarios.common import default_orientation, make_room


def build_sweep_params():
    return [{"case_id": f"s2_yaw{yaw}", "yaw_deg": yaw, "count": 4, "fan_rays": 3, "max_bounces": 3} for yaw in (0, 30, 90)]


def run_case(params):
    origin = np.array([2.0, 1.0, 3.0])
    rays = generate_rays(origin, default_orientation(params["yaw_deg"]), params["count"], params["fan_rays"], color_mode="face")
    traces = trace_rays(rays, make_room(), params["max_bounces"])
    return CaseData(params=params, traces=traces)
