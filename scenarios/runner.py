"""Scenario sweep runner + auto plot + validation report."""

from __future__ import annotations

from importlib import import_module
import logging
from pathlib import Path
from typing import Dict, List

import numpy as np

from analysis.trace_stats import bounce_distribution, has_consecutive_repeat, level_counts, polyline_lengths, terminal_walls
from mirror_core.config import MAX_BOUNCES, MIN_BOUNCES, clamp_int
from mirror_core.images import expected_path_count
from mirror_core.walls import DEFAULT_MIRROR_WALLS, WALL_MESH_NAMES, mirror_planes
from mirror_io.hdf5_io import CaseData, save_mirror_hdf5
from mirror_render.instances import ReflectionInstanceManager
from mirror_render.memory import MemoryInstancer, MemoryMirrorScene, MemoryObject
from mirror_render.passes import RenderPassOrchestrator
from plots import topdown
from scenarios.common import default_source, make_room

logger = logging.getLogger(__name__)

SCENARIO_MODULES = {
    "S0": "scenarios.S0_head_on",
    "S1": "scenarios.S1_fan_sweep",
    "S2": "scenarios.S2_rotated_cube",
    "S3": "scenarios.S3_image_levels",
}


def _check_traces(sid: str, case_id: str, case: CaseData, walls, failures: List[str]) -> None:
    b = clamp_int(case.params.get("max_bounces", MIN_BOUNCES), MIN_BOUNCES, MAX_BOUNCES)
    for i, t in enumerate(case.traces):
        if not 2 <= len(t.points) <= b + 2:
            failures.append(f"{sid}:{case_id} ray {i} has {len(t.points)} points (max_bounces={b})")
    ends = terminal_walls(case.traces, walls)
    if any(e == "" for e in ends):
        failures.append(f"{sid}:{case_id} trace ended off every wall")


def _check_paths(sid: str, case_id: str, case: CaseData, failures: List[str]) -> None:
    k = int(case.params.get("max_bounces", 0))
    expected = expected_path_count(k)
    if len(case.paths) != expected:
        failures.append(f"{sid}:{case_id} expected {expected} paths, got {len(case.paths)}")
    if any(has_consecutive_repeat(p) for p in case.paths):
        failures.append(f"{sid}:{case_id} path repeats a wall consecutively")


def _exercise_renderer(sid: str, case_id: str, case: CaseData, failures: List[str]) -> List[str]:
    """Drive the instance manager and pass orchestrator with the in-memory renderer."""

    k = int(case.params.get("max_bounces", 0))
    source = MemoryObject("sphere", position=default_source())
    mirrors = [WALL_MESH_NAMES[w] for w in DEFAULT_MIRROR_WALLS]
    objects = [source] + [MemoryObject(WALL_MESH_NAMES[w]) for w in WALL_MESH_NAMES]
    scene = MemoryMirrorScene(objects, mirrors)
    instancer = MemoryInstancer()
    manager = ReflectionInstanceManager(instancer)
    manager.update_instances(source, source.position, source.rotation, k)
    enabled = [h for h in manager.instances.values() if h.enabled]
    if len(enabled) != len(case.paths):
        failures.append(f"{sid}:{case_id} {len(enabled)} enabled instances for {len(case.paths)} paths")

    orchestrator = RenderPassOrchestrator(scene, max_bounces=k, mirror_walls=mirrors)
    passes = orchestrator.execute_render_passes()
    if any(orchestrator.pass_state(m) != k for m in mirrors):
        failures.append(f"{sid}:{case_id} mirrors not configured for pass {k}")
    manager.dispose()
    return [f"  - render passes: {len(passes)}, renders per mirror: {scene.targets[mirrors[0]].render_count}"]


def run_all(out_h5: str = "artifacts/mirror_sweep.h5", out_plot_dir: str = "artifacts/plots") -> str:
    payload: Dict[str, Dict[str, CaseData]] = {}
    report_lines: List[str] = [
        "# Validation Report",
        "",
        "- trace bound: `2 <= len(points) <= max_bounces + 2`",
        "- image count: `3 * (2^k - 1)` cumulative for k levels",
        "",
    ]
    failures: List[str] = []
    walls = make_room()

    for sid, mod_name in SCENARIO_MODULES.items():
        mod = import_module(mod_name)
        payload[sid] = {}
        report_lines.append(f"## {sid}")
        for p in mod.build_sweep_params():
            case = mod.run_case(p)
            case_id = p["case_id"]
            payload[sid][case_id] = case
            logger.info("Scenario %s case %s: %d traces, %d paths", sid, case_id, len(case.traces), len(case.paths))
            case_dir = str(Path(out_plot_dir) / sid / case_id)

            if case.traces:
                _check_traces(sid, case_id, case, walls, failures)
                lengths = polyline_lengths(case.traces)
                report_lines.append(f"- case `{case_id}`: rays={len(case.traces)}, bounce_dist={bounce_distribution(case.traces)}")
                report_lines.append(f"  - path length: min={float(np.min(lengths)):.3f}, max={float(np.max(lengths)):.3f}")
                report_lines.append(f"  - terminal walls: {sorted(set(terminal_walls(case.traces, walls)))}")
                topdown.p0_room_topdown(case.traces, walls, case_dir)
                report_lines.append(f"  - plots: [P0]({case_dir}/P0.png)")

            if case.paths:
                _check_paths(sid, case_id, case, failures)
                counts = level_counts(case.paths)
                report_lines.append(f"- case `{case_id}`: images={len(case.paths)}, per level={counts}")
                report_lines.extend(_exercise_renderer(sid, case_id, case, failures))
                topdown.p1_image_positions(case.paths, default_source(), walls, case_dir)
                topdown.p2_level_histogram(list(counts.keys()), list(counts.values()), case_dir)
                report_lines.append(f"  - plots: [P1]({case_dir}/P1.png), [P2]({case_dir}/P2.png)")

            if not case.traces and not case.paths:
                report_lines.append(f"- case `{case_id}`: empty")

        report_lines.append("")

    Path(out_h5).parent.mkdir(parents=True, exist_ok=True)
    save_mirror_hdf5(out_h5, payload, mirror_walls=[w.wall_id for w in mirror_planes(walls)])

    report_lines.append("## Failure Checks")
    if failures:
        for msg in failures:
            logger.error("Validation failure: %s", msg)
            report_lines.append(f"- FAIL: {msg}")
    else:
        report_lines.append("- PASS: No automatic failure checks triggered.")

    report_path = Path(out_plot_dir).parent / "report.md"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text("\n".join(report_lines), encoding="utf-8")
    return str(report_path)


if __name__ == "__main__":
    print(run_all())
