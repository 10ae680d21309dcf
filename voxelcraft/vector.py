"""Immutable three-component float vector used by the physics code."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import ClassVar, Iterator

# Machine epsilon of a 32-bit float; the physics tolerances are tuned to it.
EPSILON = 1.1920929e-07

_AXES = ("x", "y", "z")


def _axis_name(axis: int) -> str:
    if axis not in (0, 1, 2):
        raise IndexError(f"axis must be 0, 1 or 2, got {axis!r}")
    return _AXES[axis]


@dataclass(frozen=True)
class Vec3:
    """A 3D vector with component-wise arithmetic."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    ZERO: ClassVar["Vec3"]
    ONE: ClassVar["Vec3"]

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, axis: int) -> float:
        return getattr(self, _axis_name(axis))

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float | Vec3) -> Vec3:
        if isinstance(scalar, Vec3):
            return Vec3(self.x * scalar.x, self.y * scalar.y, self.z * scalar.z)
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def minimum(self, other: Vec3) -> Vec3:
        """Component-wise minimum."""
        return Vec3(min(self.x, other.x), min(self.y, other.y), min(self.z, other.z))

    def maximum(self, other: Vec3) -> Vec3:
        """Component-wise maximum."""
        return Vec3(max(self.x, other.x), max(self.y, other.y), max(self.z, other.z))

    def floor(self) -> Vec3:
        return Vec3(*(float(math.floor(c)) for c in self))

    def ceil(self) -> Vec3:
        return Vec3(*(float(math.ceil(c)) for c in self))

    def with_axis(self, axis: int, value: float) -> Vec3:
        """Return a copy with one component replaced."""
        return replace(self, **{_axis_name(axis): value})


Vec3.ZERO = Vec3(0.0, 0.0, 0.0)
Vec3.ONE = Vec3(1.0, 1.0, 1.0)