"""HDF5 schema for traced rays and mirror-image paths.

The schema stores multiple scenarios and multiple sweep cases per scenario.

Structure:
    /
      meta                       (attrs: created_at, room_half_extent, mirror_walls)
      scenarios/{scenario_id}/cases/{case_id}/
          params_json            (scalar utf-8 JSON)
          rays/
              origin             (R,3)
              direction          (R,3)
              color              (R,3)
              n_points           (R,)
              points             (R,Pmax,3) float64, nan padded
          images/
              path_id            (L,) variable-length UTF-8
              wall_sequence      (L,) variable-length UTF-8 ("|"-joined)
              bounce_count       (L,)
              position           (L,3)
              scaling            (L,3)

Example:
    >>> import numpy as np
    >>> from mirror_core.images import generate_paths
    >>> payload = {"S0": {"case0": CaseData(params={"max_bounces": 1}, traces=[], paths=generate_paths(np.zeros(3), 1))}}
    >>> save_mirror_hdf5("/tmp/mirror_example.h5", payload)
    >>> loaded, meta = load_mirror_hdf5("/tmp/mirror_example.h5")
    >>> len(loaded["S0"]["case0"].paths)
    3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import h5py
import numpy as np

from mirror_core.config import ROOM_HALF
from mirror_core.images import ReflectionPath, generate_paths
from mirror_core.rays import Ray
from mirror_core.tracer import TracedRay, trace_rays
from mirror_core.walls import DEFAULT_MIRROR_WALLS, build_wall_planes


@dataclass
class CaseData:
    params: Dict[str, Any]
    traces: List[TracedRay] = field(default_factory=list)
    paths: List[ReflectionPath] = field(default_factory=list)


@dataclass
class Hdf5Meta:
    created_at: str
    room_half_extent: float
    mirror_walls: List[str]


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Unsupported JSON type: {type(obj)}")


def _pad_points(rows: Sequence[Sequence[np.ndarray]]) -> np.ndarray:
    width = max((len(r) for r in rows), default=0)
    out = np.full((len(rows), width, 3), np.nan, dtype=np.float64)
    for i, row in enumerate(rows):
        if len(row):
            out[i, : len(row)] = np.asarray(row, dtype=np.float64)
    return out


def _vec_rows(rows: Sequence[Any]) -> np.ndarray:
    return np.asarray(rows, dtype=np.float64).reshape(len(rows), 3)


def _as_str(s: Any) -> str:
    return s.decode() if isinstance(s, bytes) else str(s)


def save_mirror_hdf5(
    filepath: str,
    scenarios: Mapping[str, Mapping[str, CaseData]],
    room_half_extent: float = ROOM_HALF,
    mirror_walls: Sequence[str] = DEFAULT_MIRROR_WALLS,
) -> None:
    """Save traces and reflection paths using a fixed schema contract."""

    dt = h5py.string_dtype(encoding="utf-8")
    with h5py.File(filepath, "w") as h5:
        meta = h5.create_group("meta")
        meta.attrs["created_at"] = datetime.now(timezone.utc).isoformat()
        meta.attrs["room_half_extent"] = float(room_half_extent)
        meta.attrs["mirror_walls"] = "|".join(mirror_walls)

        g_scenarios = h5.create_group("scenarios")
        for scenario_id, cases in scenarios.items():
            g_cases = g_scenarios.create_group(str(scenario_id)).create_group("cases")
            for case_id, case in cases.items():
                g_case = g_cases.create_group(str(case_id))
                g_case.create_dataset("params_json", data=json.dumps(case.params, default=_json_default))

                traces = case.traces
                g_rays = g_case.create_group("rays")
                g_rays.create_dataset("origin", data=_vec_rows([t.ray.origin for t in traces]))
                g_rays.create_dataset("direction", data=_vec_rows([t.ray.direction for t in traces]))
                g_rays.create_dataset("color", data=_vec_rows([t.ray.color for t in traces]))
                g_rays.create_dataset("n_points", data=np.asarray([len(t.points) for t in traces], dtype=np.int32))
                g_rays.create_dataset("points", data=_pad_points([t.points for t in traces]))

                paths = case.paths
                g_images = g_case.create_group("images")
                g_images.create_dataset("path_id", data=np.asarray([p.id for p in paths], dtype=dt), dtype=dt)
                g_images.create_dataset("wall_sequence", data=np.asarray(["|".join(p.wall_sequence) for p in paths], dtype=dt), dtype=dt)
                g_images.create_dataset("bounce_count", data=np.asarray([p.bounce_count for p in paths], dtype=np.int32))
                g_images.create_dataset("position", data=_vec_rows([p.position for p in paths]))
                g_images.create_dataset("scaling", data=_vec_rows([p.scaling for p in paths]))


def load_mirror_hdf5(filepath: str) -> Tuple[Dict[str, Dict[str, CaseData]], Hdf5Meta]:
    """Load the HDF5 file and reconstruct traces and paths."""

    scenarios: Dict[str, Dict[str, CaseData]] = {}
    with h5py.File(filepath, "r") as h5:
        walls_attr = _as_str(h5["meta"].attrs.get("mirror_walls", ""))
        meta = Hdf5Meta(
            created_at=_as_str(h5["meta"].attrs.get("created_at", "")),
            room_half_extent=float(h5["meta"].attrs.get("room_half_extent", ROOM_HALF)),
            mirror_walls=walls_attr.split("|") if walls_attr else [],
        )

        for scenario_id, g_scenario in h5["scenarios"].items():
            scenarios[scenario_id] = {}
            for case_id, g_case in g_scenario["cases"].items():
                params = json.loads(_as_str(g_case["params_json"][()]))

                g_rays = g_case["rays"]
                origin = np.asarray(g_rays["origin"][()], dtype=np.float64)
                direction = np.asarray(g_rays["direction"][()], dtype=np.float64)
                color = np.asarray(g_rays["color"][()], dtype=np.float64)
                n_points = np.asarray(g_rays["n_points"][()], dtype=np.int32)
                points = np.asarray(g_rays["points"][()], dtype=np.float64)
                traces = [
                    TracedRay(
                        ray=Ray(origin[i], direction[i], tuple(float(c) for c in color[i])),
                        points=[points[i, j].copy() for j in range(int(n_points[i]))],
                    )
                    for i in range(len(origin))
                ]

                g_images = g_case["images"]
                ids = [_as_str(s) for s in g_images["path_id"][()]]
                seqs = [_as_str(s) for s in g_images["wall_sequence"][()]]
                bounce = np.asarray(g_images["bounce_count"][()], dtype=np.int32)
                position = np.asarray(g_images["position"][()], dtype=np.float64)
                scaling = np.asarray(g_images["scaling"][()], dtype=np.float64)
                paths = [
                    ReflectionPath(
                        id=ids[i],
                        bounce_count=int(bounce[i]),
                        wall_sequence=tuple(seqs[i].split("|")) if seqs[i] else (),
                        position=position[i].copy(),
                        scaling=scaling[i].copy(),
                    )
                    for i in range(len(ids))
                ]

                scenarios[scenario_id][case_id] = CaseData(params=params, traces=traces, paths=paths)

    return scenarios, meta


def self_test_roundtrip(filepath: str, atol: float = 1e-12) -> bool:
    """Write->read equivalence self-test on a small traced case."""

    walls = build_wall_planes()
    rays = [
        Ray(np.zeros(3), np.array([1.0, 0.0, 0.0]), (1.0, 0.0, 0.0)),
        Ray(np.zeros(3), np.array([0.0, 0.0, -1.0]), (0.0, 1.0, 0.0)),
    ]
    traces = trace_rays(rays, walls, max_bounces=3)
    paths = generate_paths(np.array([1.0, 5.0, 2.0]), 3, walls)
    save_mirror_hdf5(filepath, {"selftest": {"case0": CaseData(params={"max_bounces": 3}, traces=traces, paths=paths)}})
    loaded, _ = load_mirror_hdf5(filepath)
    case = loaded["selftest"]["case0"]

    same_points = len(case.traces) == len(traces) and all(
        len(a.points) == len(b.points) and np.allclose(np.array(a.points), np.array(b.points), atol=atol)
        for a, b in zip(case.traces, traces)
    )
    same_paths = [p.id for p in case.paths] == [p.id for p in paths] and np.allclose(
        np.array([p.position for p in case.paths]), np.array([p.position for p in paths]), atol=atol
    )
    return bool(same_points and same_paths)
