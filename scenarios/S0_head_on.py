"""Single rays aimed straight at the plain and mirrored walls."""

from __future__ import annotations

import numpy as np

from mirror_core.rays import Ray
from mirror_core.tracer import trace_rays
from mirror_io.hdf5_io import CaseData
from scenarios.common import make_room

DIRECTIONS = {
    "east": [1.0, 0.0, 0.0],
    "south": [0.0, 0.0, -1.0],
    "north": [0.0, 0.0, 1.0],
    "diagonal": [1.0, 0.0, 0.5],
}


def build_sweep_params():
    return [{"case_id": f"s0_{name}_b{b}", "direction": name, "max_bounces": b} for name in DIRECTIONS for b in (1, 5)]


def run_case(params):
    d = np.asarray(DIRECTIONS[params["direction"]], dtype=float)
    ray = Ray(np.zeros(3), d / np.linalg.norm(d), (1.0, 1.0, 0.0))
    traces = trace_rays([ray], make_room(), params["max_bounces"])
    return CaseData(params=params, traces=traces)
