"""Top-down (x/z) plotting helpers for the mirrored room."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence
import warnings

import matplotlib.pyplot as plt
import numpy as np

from mirror_core.geometry import Vector, WallPlane
from mirror_core.images import ReflectionPath
from mirror_core.tracer import TracedRay


def _save(fig: plt.Figure, outdir: str, name: str) -> str:
    Path(outdir).mkdir(parents=True, exist_ok=True)
    png = Path(outdir) / f"{name}.png"
    pdf = Path(outdir) / f"{name}.pdf"
    fig.savefig(png, dpi=150, bbox_inches="tight")
    try:
        fig.savefig(pdf, bbox_inches="tight")
    except PermissionError:
        warnings.warn(
            f"Could not write '{pdf}' (permission denied). Saved PNG only.",
            RuntimeWarning,
            stacklevel=2,
        )
    plt.close(fig)
    return str(png)


def _draw_room(ax, walls: Sequence[WallPlane]) -> None:
    h = max(float(np.max(np.abs(w.position))) for w in walls)
    for w in walls:
        n = w.unit_normal()
        if abs(n[2]) > 0.5:
            xs, zs = [-h, h], [w.position[2], w.position[2]]
        else:
            xs, zs = [w.position[0], w.position[0]], [-h, h]
        ax.plot(xs, zs, color="tab:blue" if w.is_mirror else "0.4", lw=3 if w.is_mirror else 1.5)
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("z")


def p0_room_topdown(traces: Sequence[TracedRay], walls: Sequence[WallPlane], outdir: str) -> str:
    fig, ax = plt.subplots(figsize=(6, 6))
    _draw_room(ax, walls)
    for t in traces:
        for seg in t.segments():
            ax.plot([seg.start[0], seg.end[0]], [seg.start[2], seg.end[2]], color=t.ray.color, alpha=seg.alpha, lw=1.2)
    ax.set_title("P0 top-down ray trace")
    return _save(fig, outdir, "P0")


def p1_image_positions(paths: Sequence[ReflectionPath], source: Vector, walls: Sequence[WallPlane], outdir: str) -> str:
    fig, ax = plt.subplots(figsize=(6, 6))
    _draw_room(ax, walls)
    if paths:
        pos = np.array([p.position for p in paths])
        lvl = np.array([p.bounce_count for p in paths])
        sc = ax.scatter(pos[:, 0], pos[:, 2], c=lvl, cmap="viridis", s=18)
        fig.colorbar(sc, ax=ax, label="bounce")
    ax.scatter([source[0]], [source[2]], color="red", marker="*", s=80, label="source")
    ax.legend(loc="upper right")
    ax.set_title("P1 mirror-image positions")
    return _save(fig, outdir, "P1")


def p2_level_histogram(levels: Sequence[int], counts: Sequence[int], outdir: str) -> str:
    fig, ax = plt.subplots()
    ax.bar(list(levels), list(counts), color="tab:purple")
    ax.set_xlabel("bounce level")
    ax.set_ylabel("paths")
    ax.set_title("P2 images per level")
    return _save(fig, outdir, "P2")
