"""Swept box-versus-box collision test."""

from __future__ import annotations

import math

from voxelcraft.aabb import AABB
from voxelcraft.vector import EPSILON, Vec3


def swept_aabb_vs_aabb(
    body_aabb: AABB, velocity: Vec3, obstacle_aabb: AABB
) -> tuple[float, Vec3] | None:
    """Sweep ``body_aabb`` along ``velocity`` against a static obstacle.

    Returns ``(time, normal)`` with ``time`` in ``[0, 1)`` for the first
    contact, or ``None`` when there is no hit within the sweep. Boxes that
    already overlap are ignored.
    """
    if body_aabb.intersects(obstacle_aabb):
        return None

    entries: list[float] = []
    exits: list[float] = []
    for axis in range(3):
        v = velocity[axis]
        if abs(v) < EPSILON:
            if (
                body_aabb.max[axis] <= obstacle_aabb.min[axis]
                or body_aabb.min[axis] >= obstacle_aabb.max[axis]
            ):
                return None
            entries.append(-math.inf)
            exits.append(math.inf)
        else:
            entry = (obstacle_aabb.min[axis] - body_aabb.max[axis]) / v
            exit_ = (obstacle_aabb.max[axis] - body_aabb.min[axis]) / v
            entries.append(min(entry, exit_))
            exits.append(max(entry, exit_))

    latest_entry = max(entries)
    earliest_exit = min(exits)

    if latest_entry > earliest_exit or latest_entry >= 1.0 or latest_entry < 0.0:
        return None

    hit_axis = next(
        (axis for axis in (0, 1) if entries[axis] >= latest_entry - EPSILON), 2
    )
    direction = 1.0 if velocity[hit_axis] <= 0.0 else -1.0
    return latest_entry, Vec3.ZERO.with_axis(hit_axis, direction)