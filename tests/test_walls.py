import numpy as np
import pytest

from mirror_core.walls import build_wall_planes, mirror_planes, wall_by_id


def test_default_topology():
    walls = build_wall_planes()
    assert [w.wall_id for w in walls] == ["north", "south", "east", "west"]
    assert [w.wall_id for w in mirror_planes(walls)] == ["north", "east", "west"]
    assert not wall_by_id(walls, "south").is_mirror
    for w in walls:
        # inward normals point at the room center
        assert np.dot(np.zeros(3) - w.position, w.normal) > 0
        assert np.isclose(np.linalg.norm(w.normal), 1.0)
    assert np.allclose(wall_by_id(walls, "west").position, [-10.0, 0.0, 0.0])


def test_calls_return_independent_copies():
    a = build_wall_planes()
    b = build_wall_planes()
    a[0].position[2] = 99.0
    assert b[0].position[2] == 10.0


def test_custom_mirror_assignment_and_extent():
    walls = build_wall_planes(5.0, mirror_walls=("south",))
    assert [w.wall_id for w in mirror_planes(walls)] == ["south"]
    assert np.allclose(wall_by_id(walls, "north").position, [0.0, 0.0, 5.0])


def test_unknown_wall_ids_rejected():
    with pytest.raises(ValueError):
        build_wall_planes(mirror_walls=("ceiling",))
    with pytest.raises(ValueError):
        wall_by_id(build_wall_planes(), "floor")
