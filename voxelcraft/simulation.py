"""Per-axis swept movement of a physics body through a world."""

from __future__ import annotations

from voxelcraft.body import PhysicsBody
from voxelcraft.collision import swept_aabb_vs_aabb
from voxelcraft.physics_world import PhysicsWorldProvider
from voxelcraft.vector import EPSILON, Vec3

_EPSILON_PUSH = 1e-5


def _move_along_axis(
    body: PhysicsBody, axis: int, distance: float, world: PhysicsWorldProvider
) -> float:
    if abs(distance) < EPSILON:
        return 0.0

    move_vec = Vec3.ZERO.with_axis(axis, distance)
    start = body.world_aabb()
    swept = start.union(start.translate(move_vec))

    min_time = 1.0
    normal_along_axis = 0.0
    for obstacle in world.query_potential_colliders(swept):
        hit = swept_aabb_vs_aabb(start, move_vec, obstacle)
        if hit is None:
            continue
        time, normal = hit
        if 0.0 <= time < min_time and abs(normal[axis]) > 0.1:
            min_time = time
            normal_along_axis = normal[axis]

    moved = distance * max(min_time - _EPSILON_PUSH, 0.0)
    body.position = body.position.with_axis(axis, body.position[axis] + moved)

    if min_time < 1.0:
        moving_positive = distance > 0.0
        opposes = (moving_positive and normal_along_axis < -0.1) or (
            not moving_positive and normal_along_axis > 0.1
        )
        if opposes:
            body.velocity = body.velocity.with_axis(axis, 0.0)
            if axis == 1 and normal_along_axis > 0.5:
                body.is_grounded = True

    return moved


def step_simulation(
    body: PhysicsBody, dt: float, world: PhysicsWorldProvider
) -> None:
    """Advance ``body`` by ``dt`` seconds, resolving collisions X, then Z, then Y."""
    if dt <= 0.0:
        return
    body.is_grounded = False
    displacement = body.velocity * dt
    _move_along_axis(body, 0, displacement.x, world)
    _move_along_axis(body, 2, displacement.z, world)
    _move_along_axis(body, 1, displacement.y, world)