import numpy as np

from mirror_core.segments import create_ray_segments


def test_too_few_points_give_no_segments():
    assert create_ray_segments([]) == []
    assert create_ray_segments([np.zeros(3)]) == []


def test_alpha_fades_linearly():
    pts = [np.array([float(i), 0.0, 0.0]) for i in range(4)]
    segs = create_ray_segments(pts)
    assert len(segs) == 3
    assert np.allclose([s.alpha for s in segs], [1.0, 1.0 - 0.333 / 2, 0.667])
    assert np.allclose(segs[1].start, pts[1]) and np.allclose(segs[1].end, pts[2])


def test_single_segment_is_opaque():
    segs = create_ray_segments([np.zeros(3), np.ones(3)])
    assert segs[0].alpha == 1.0


def test_segments_copy_points():
    pts = [np.zeros(3), np.ones(3)]
    segs = create_ray_segments(pts)
    pts[0][0] = 5.0
    assert segs[0].start[0] == 0.0
