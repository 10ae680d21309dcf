"""Collision geometry providers for the physics step."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from voxelcraft.aabb import AABB
from voxelcraft.vector import Vec3

Coord = tuple[int, int, int]


class PhysicsWorldProvider(ABC):
    """Source of static collider boxes for the physics simulation."""

    @abstractmethod
    def query_potential_colliders(self, query_aabb: AABB) -> list[AABB]:
        """Return static collider boxes that intersect ``query_aabb``."""


class HasAABB:
    """Mixin for block types that may have a collision box.

    Blocks are non-collidable by default; solid blocks override
    :meth:`relative_aabb` to return a box relative to their min corner.
    """

    def relative_aabb(self) -> AABB | None:
        return None

    def world_aabb(self, block_pos: Sequence[int]) -> AABB | None:
        """Collision box translated to a block's world position."""
        relative = self.relative_aabb()
        if relative is None:
            return None
        return relative.translate(Vec3(*(float(c) for c in block_pos)))


class ChunkedWorld(PhysicsWorldProvider):
    """Blocks stored in cubic chunks, indexed ``data[x][y][z]``."""

    def __init__(self, chunk_size: int) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self._chunks: dict[Coord, Any] = {}

    def _split(self, world_pos: Sequence[int]) -> tuple[Coord, Coord]:
        size = self.chunk_size
        x, y, z = (int(c) for c in world_pos)
        return (x // size, y // size, z // size), (x % size, y % size, z % size)

    def load_chunk(self, chunk_coord: Sequence[int], block_data: Any) -> None:
        size = self.chunk_size
        if len(block_data) != size or any(
            len(plane) != size or any(len(column) != size for column in plane)
            for plane in block_data
        ):
            raise ValueError(f"chunk data must be {size}x{size}x{size}")
        self._chunks[tuple(int(c) for c in chunk_coord)] = block_data

    def unload_chunk(self, chunk_coord: Sequence[int]) -> None:
        self._chunks.pop(tuple(int(c) for c in chunk_coord), None)

    def get_block(self, world_pos: Sequence[int]) -> HasAABB | None:
        """Block at a world position, or ``None`` if its chunk is not loaded."""
        chunk_coord, (lx, ly, lz) = self._split(world_pos)
        chunk = self._chunks.get(chunk_coord)
        if chunk is None:
            return None
        return chunk[lx][ly][lz]

    def query_potential_colliders(self, query_aabb: AABB) -> list[AABB]:
        low = query_aabb.min.floor()
        high = query_aabb.max.floor()
        ranges = (range(int(low[i]), int(high[i]) + 1) for i in range(3))
        colliders: list[AABB] = []
        for pos in itertools.product(*ranges):
            block = self.get_block(pos)
            if block is None:
                continue
            box = block.world_aabb(pos)
            if box is not None and query_aabb.intersects(box):
                colliders.append(box)
        return colliders