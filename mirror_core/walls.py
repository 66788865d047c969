"""Wall topology of the mirrored room."""

from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from mirror_core.config import ROOM_HALF
from mirror_core.geometry import WallPlane

WALL_IDS = ("north", "south", "east", "west")
DEFAULT_MIRROR_WALLS = ("north", "east", "west")

# scene object names of the wall meshes
WALL_MESH_NAMES: Dict[str, str] = {w: f"{w}Wall" for w in WALL_IDS}


def build_wall_planes(
    room_half_extent: float = ROOM_HALF,
    mirror_walls: Sequence[str] = DEFAULT_MIRROR_WALLS,
) -> List[WallPlane]:
    """Return north/south/east/west planes with inward normals.

    Every call builds new arrays, so callers never share wall state.
    """

    unknown = set(mirror_walls) - set(WALL_IDS)
    if unknown:
        raise ValueError(f"Unknown wall ids: {sorted(unknown)}")
    h = float(room_half_extent)
    layout = {
        "north": ([0.0, 0.0, h], [0.0, 0.0, -1.0]),
        "south": ([0.0, 0.0, -h], [0.0, 0.0, 1.0]),
        "east": ([h, 0.0, 0.0], [-1.0, 0.0, 0.0]),
        "west": ([-h, 0.0, 0.0], [1.0, 0.0, 0.0]),
    }
    return [
        WallPlane(wall_id, np.array(pos, dtype=float), np.array(normal, dtype=float), wall_id in mirror_walls)
        for wall_id, (pos, normal) in layout.items()
    ]


def mirror_planes(walls: Sequence[WallPlane]) -> List[WallPlane]:
    return [w for w in walls if w.is_mirror]


def wall_by_id(walls: Sequence[WallPlane], wall_id: str) -> WallPlane:
    for w in walls:
        if w.wall_id == wall_id:
            return w
    raise ValueError(f"No wall with id '{wall_id}'")
