"""Axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass

from voxelcraft.vector import Vec3


@dataclass(frozen=True)
class AABB:
    """An axis-aligned bounding box given by its min and max corners."""

    min: Vec3
    max: Vec3

    @classmethod
    def from_points(cls, a: Vec3, b: Vec3) -> AABB:
        """Box spanned by two opposite corners, in any order."""
        return cls(a.minimum(b), a.maximum(b))

    @classmethod
    def from_center_dims(cls, center: Vec3, dimensions: Vec3) -> AABB:
        half = dimensions * 0.5
        return cls(center - half, center + half)

    def size(self) -> Vec3:
        return self.max - self.min

    def center(self) -> Vec3:
        return self.min + self.size() * 0.5

    def translate(self, translation: Vec3) -> AABB:
        return AABB(self.min + translation, self.max + translation)

    def intersects(self, other: AABB) -> bool:
        """True if the boxes overlap; touching faces do not count."""
        return all(
            self.min[i] < other.max[i] and self.max[i] > other.min[i] for i in range(3)
        )

    def union(self, other: AABB) -> AABB:
        """Smallest box containing both."""
        return AABB(self.min.minimum(other.min), self.max.maximum(other.max))

    def expanded(self, amount: Vec3) -> AABB:
        return AABB(self.min - amount, self.max + amount)