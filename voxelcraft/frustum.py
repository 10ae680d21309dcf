"""View-frustum planes and box culling."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from voxelcraft.aabb import AABB
from voxelcraft.vector import Vec3


@dataclass(frozen=True)
class Plane:
    """A plane ``normal . p + distance = 0`` with a unit (or zero) normal."""

    normal: Vec3
    distance: float

    @classmethod
    def from_coefficients(cls, coeffs: Sequence[float]) -> Plane:
        """Normalised plane from coefficients ``(a, b, c, d)``."""
        a, b, c, d = (float(v) for v in coeffs)
        length = math.sqrt(a * a + b * b + c * c)
        if length == 0.0:
            return cls(Vec3.ZERO, 0.0)
        return cls(Vec3(a / length, b / length, c / length), d / length)

    def distance_to_point(self, point: Vec3) -> float:
        return self.normal.dot(point) + self.distance


def is_behind_or_intersecting_plane(aabb: AABB, plane: Plane) -> bool:
    """True unless the whole box lies on the negative side of ``plane``."""
    corner = Vec3(
        *(aabb.max[i] if plane.normal[i] > 0.0 else aabb.min[i] for i in range(3))
    )
    return plane.distance_to_point(corner) >= 0.0


@dataclass(frozen=True)
class Frustum:
    """The six clip planes of a view-projection matrix."""

    planes: tuple[Plane, ...]

    @classmethod
    def from_view_proj(cls, matrix: Sequence[Sequence[float]]) -> Frustum:
        """Extract planes from a 4x4 matrix indexed ``matrix[row][column]``."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError("view-projection matrix must be 4x4")
        row0, row1, row2, row3 = m
        planes = tuple(
            Plane.from_coefficients(c)
            for c in (
                row3 + row0,
                row3 - row0,
                row3 + row1,
                row3 - row1,
                row2,
                row3 - row2,
            )
        )
        return cls(planes)

    def intersects_aabb(self, aabb: AABB) -> bool:
        return all(is_behind_or_intersecting_plane(aabb, plane) for plane in self.planes)