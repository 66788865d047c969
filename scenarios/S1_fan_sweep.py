"""Gradient-colored ray fans from the sphere source."""

from __future__ import annotations

from mirror_core.config import RayConfig
from mirror_core.rays import generate_rays
from mirror_core.tracer import trace_rays
from mirror_io.hdf5_io import CaseData
from scenarios.common import default_orientation, default_source, make_room


def build_sweep_params():
    return [
        {"case_id": "s1_default", "count": 4, "fan_rays": 1, "max_bounces": 2},
        {"case_id": "s1_full_fan", "count": 8, "fan_rays": 6, "max_bounces": 5},
        {"case_id": "s1_clamped", "count": 20, "fan_rays": 0, "max_bounces": 9},
    ]


def run_case(params):
    cfg = RayConfig().with_count(params["count"]).with_fan_rays(params["fan_rays"]).with_max_bounces(params["max_bounces"])
    rays = generate_rays(default_source(), default_orientation(), cfg.count, cfg.fan_rays)
    traces = trace_rays(rays, make_room(), cfg.max_bounces)
    return CaseData(params=dict(params, effective=[cfg.count, cfg.fan_rays, cfg.max_bounces]), traces=traces)
