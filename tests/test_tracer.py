import logging

import numpy as np
import pytest

from mirror_core.rays import Ray, generate_rays
from mirror_core.tracer import ClosedRoomError, find_nearest_intersection, trace_ray, trace_rays
from mirror_core.walls import build_wall_planes, wall_by_id


def _ray(direction, origin=(0.0, 0.0, 0.0)):
    d = np.asarray(direction, dtype=float)
    return Ray(np.asarray(origin, dtype=float), d / np.linalg.norm(d))


def test_nearest_intersection_picks_closest_wall():
    walls = build_wall_planes()
    hit = find_nearest_intersection(np.array([8.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0]), walls)
    assert hit.hit and hit.wall_id == "east"
    assert np.isclose(hit.distance, 2.0)


def test_plain_wall_stops_the_trace():
    walls = build_wall_planes()
    for b in (1, 3, 5):
        pts = trace_ray(_ray([0.0, 0.0, -1.0]), walls, b)
        assert len(pts) == 2
        assert np.isclose(pts[1][2], -10.0)


def test_head_on_mirror_bounce_with_one_bounce():
    pts = trace_ray(_ray([1.0, 0.0, 0.0]), build_wall_planes(), 1)
    assert len(pts) == 3
    assert np.allclose(pts[0], [0.0, 0.0, 0.0])
    assert np.isclose(pts[1][0], 10.0)
    assert np.isclose(pts[2][0], -10.0)


def test_hit_points_are_lifted_for_display():
    pts = trace_ray(_ray([1.0, 0.0, 0.0]), build_wall_planes(), 1)
    assert np.isclose(pts[1][1], 0.01)


def test_point_count_bounds():
    walls = build_wall_planes()
    rays = generate_rays(np.array([1.0, 0.0, 2.0]), np.eye(3), 8, 6)
    for b in range(1, 6):
        for r in rays:
            n = len(trace_ray(r, walls, b))
            assert 2 <= n <= b + 2


def test_bounce_count_is_clamped():
    walls = build_wall_planes()
    # bouncing between east and west never reaches the plain wall
    assert len(trace_ray(_ray([1.0, 0.0, 0.0]), walls, 0)) == 3
    assert len(trace_ray(_ray([1.0, 0.0, 0.0]), walls, 50)) == 7


def test_reflection_law_at_each_bounce():
    walls = build_wall_planes()
    pts = trace_ray(_ray([1.0, 0.0, 0.35]), walls, 5)
    dirs = [(pts[i + 1] - pts[i]) / np.linalg.norm(pts[i + 1] - pts[i]) for i in range(len(pts) - 1)]
    for i in range(len(dirs) - 1):
        before, after = dirs[i], dirs[i + 1]
        # horizontal rays flip exactly one horizontal component per bounce
        flipped = np.isclose(before, -after, atol=1e-3) & ~np.isclose(before, 0.0, atol=1e-3)
        assert flipped.sum() == 1


def test_escape_raises_closed_room_error(caplog):
    walls = [wall_by_id(build_wall_planes(), "north")]
    with caplog.at_level(logging.ERROR, logger="mirror_core.tracer"):
        with pytest.raises(ClosedRoomError):
            trace_ray(_ray([0.0, 0.0, -1.0]), walls, 2)
    assert any("escaped" in r.message for r in caplog.records)


def test_trace_rays_pairs_rays_and_points():
    rays = [_ray([0.0, 0.0, -1.0]), _ray([1.0, 0.0, 0.0])]
    traced = trace_rays(rays, build_wall_planes(), 2)
    assert [t.bounce_count for t in traced] == [0, 2]
    assert traced[0].ray is rays[0]
    assert len(traced[1].segments()) == 3
