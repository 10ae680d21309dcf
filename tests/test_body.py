from voxelcraft.body import PhysicsBody
from voxelcraft.vector import Vec3

DIMS = Vec3(0.5, 2.0, 0.5)
POS = Vec3(4.0, 10.0, -3.0)


def test_new_body_is_at_rest_and_airborne():
    body = PhysicsBody(POS, DIMS)
    assert body.velocity == Vec3.ZERO
    assert body.is_grounded is False


def test_world_aabb_is_centered_on_position():
    body = PhysicsBody(POS, DIMS)
    box = body.world_aabb()
    assert box.center() == POS
    assert box.size() == DIMS


def test_world_aabb_at_uses_given_position():
    body = PhysicsBody(POS, DIMS)
    other = Vec3(1.0, 2.0, 3.0)
    box = body.world_aabb_at(other)
    assert box.center() == other
    assert box.size() == DIMS
    assert body.world_aabb_at(POS) == body.world_aabb()