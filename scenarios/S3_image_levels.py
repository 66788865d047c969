"""Mirror-image enumeration for every bounce level."""

from __future__ import annotations

from mirror_core.images import generate_paths
from mirror_io.hdf5_io import CaseData
from scenarios.common import default_source, make_room


def build_sweep_params():
    return [{"case_id": f"s3_levels{k}", "max_bounces": k} for k in (1, 2, 3, 4)]


def run_case(params):
    paths = generate_paths(default_source(), params["max_bounces"], make_room())
    return CaseData(params=params, paths=paths)
