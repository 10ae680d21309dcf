import pytest

from voxelcraft.aabb import AABB
from voxelcraft.collision import swept_aabb_vs_aabb
from voxelcraft.vector import Vec3

OBSTACLE = AABB(Vec3.ZERO, Vec3.ONE)


def test_overlapping_boxes_are_ignored():
    body = AABB(Vec3(0.5, 0.5, 0.5), Vec3(1.5, 1.5, 1.5))
    assert swept_aabb_vs_aabb(body, Vec3(0.0, -1.0, 0.0), OBSTACLE) is None


def test_falling_onto_block_hits_top_face():
    body = AABB(Vec3(0.0, 2.0, 0.0), Vec3(1.0, 4.0, 1.0))
    velocity = Vec3(0.0, -4.0, 0.0)
    hit = swept_aabb_vs_aabb(body, velocity, OBSTACLE)
    assert hit is not None
    time, normal = hit
    assert 0.0 <= time < 1.0
    assert normal == Vec3(0.0, 1.0, 0.0)
    moved = body.translate(velocity * time)
    assert moved.min.y == pytest.approx(OBSTACLE.max.y)


def test_moving_positive_x_gets_negative_normal():
    body = AABB(Vec3(-3.0, 0.0, 0.0), Vec3(-2.0, 1.0, 1.0))
    velocity = Vec3(4.0, 0.0, 0.0)
    hit = swept_aabb_vs_aabb(body, velocity, OBSTACLE)
    assert hit is not None
    time, normal = hit
    assert normal == Vec3(-1.0, 0.0, 0.0)
    assert body.translate(velocity * time).max.x == pytest.approx(OBSTACLE.min.x)


def test_moving_away_misses():
    body = AABB(Vec3(0.0, 2.0, 0.0), Vec3(1.0, 4.0, 1.0))
    assert swept_aabb_vs_aabb(body, Vec3(0.0, 3.0, 0.0), OBSTACLE) is None


def test_too_short_sweep_misses():
    body = AABB(Vec3(0.0, 2.0, 0.0), Vec3(1.0, 4.0, 1.0))
    assert swept_aabb_vs_aabb(body, Vec3(0.0, -0.5, 0.0), OBSTACLE) is None


def test_separated_on_static_axis_misses():
    body = AABB(Vec3(2.0, 2.0, 0.0), Vec3(3.0, 4.0, 1.0))
    assert swept_aabb_vs_aabb(body, Vec3(0.0, -10.0, 0.0), OBSTACLE) is None


def test_touching_on_static_axis_misses():
    body = AABB(Vec3(1.0, 2.0, 0.0), Vec3(2.0, 4.0, 1.0))
    assert swept_aabb_vs_aabb(body, Vec3(0.0, -10.0, 0.0), OBSTACLE) is None