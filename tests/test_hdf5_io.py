import os
import tempfile

import numpy as np

from mirror_core.images import generate_paths
from mirror_core.rays import generate_rays
from mirror_core.tracer import trace_rays
from mirror_core.walls import build_wall_planes
from mirror_io.hdf5_io import CaseData, load_mirror_hdf5, save_mirror_hdf5, self_test_roundtrip


def _case() -> CaseData:
    walls = build_wall_planes()
    rays = generate_rays(np.array([0.0, 0.0, 2.0]), np.eye(3), 4, 2)
    return CaseData(
        params={"max_bounces": np.int64(3), "label": "fan"},
        traces=trace_rays(rays, walls, 3),
        paths=generate_paths(np.array([0.0, 5.0, 5.0]), 2, walls),
    )


def test_hdf5_schema_roundtrip():
    case = _case()
    with tempfile.TemporaryDirectory() as td:
        fp = os.path.join(td, "mirror.h5")
        save_mirror_hdf5(fp, {"S1": {"case_0": case}})
        loaded, meta = load_mirror_hdf5(fp)

    assert meta.room_half_extent == 10.0
    assert meta.mirror_walls == ["north", "east", "west"]
    out = loaded["S1"]["case_0"]
    assert out.params == {"max_bounces": 3, "label": "fan"}
    assert [len(t.points) for t in out.traces] == [len(t.points) for t in case.traces]
    assert np.allclose(out.traces[2].points[-1], case.traces[2].points[-1])
    assert out.traces[0].ray.color == case.traces[0].ray.color
    assert [p.id for p in out.paths] == [p.id for p in case.paths]
    assert out.paths[-1].wall_sequence == case.paths[-1].wall_sequence
    assert np.array_equal(out.paths[4].scaling, case.paths[4].scaling)


def test_empty_case_roundtrip(tmp_path):
    fp = str(tmp_path / "empty.h5")
    save_mirror_hdf5(fp, {"S0": {"c": CaseData(params={})}})
    loaded, _ = load_mirror_hdf5(fp)
    assert loaded["S0"]["c"].traces == []
    assert loaded["S0"]["c"].paths == []


def test_self_test_roundtrip_function():
    with tempfile.TemporaryDirectory() as td:
        fp = os.path.join(td, "selftest.h5")
        assert self_test_roundtrip(fp)
