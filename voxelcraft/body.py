"""Rigid axis-aligned body moved by the physics step."""

from __future__ import annotations

from dataclasses import dataclass, field

from voxelcraft.aabb import AABB
from voxelcraft.vector import Vec3


@dataclass
class PhysicsBody:
    """A box-shaped body; ``position`` is the centre of its box."""

    position: Vec3
    dimensions: Vec3
    velocity: Vec3 = field(default_factory=lambda: Vec3.ZERO)
    is_grounded: bool = False

    def world_aabb(self) -> AABB:
        """World-space box at the current position."""
        return AABB.from_center_dims(self.position, self.dimensions)

    def world_aabb_at(self, position: Vec3) -> AABB:
        """World-space box if the body were at ``position``."""
        return AABB.from_center_dims(position, self.dimensions)