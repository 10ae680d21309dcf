"""Block types, chunk storage, terrain generation and the block world."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from voxelcraft.aabb import AABB
from voxelcraft.noise import Fbm, Perlin
from voxelcraft.physics_world import HasAABB, PhysicsWorldProvider
from voxelcraft.vector import Vec3

CHUNK_SIZE = 64

Coord = tuple[int, int, int]


def _coord(coords: Sequence[int]) -> Coord:
    x, y, z = (int(c) for c in coords)
    return x, y, z


def _split(global_coords: Sequence[int]) -> tuple[Coord, Coord]:
    x, y, z = _coord(global_coords)
    s = CHUNK_SIZE
    return (x // s, y // s, z // s), (x % s, y % s, z % s)


class BlockType(HasAABB, IntEnum):
    """Kinds of block; the integer values are stable identifiers."""

    AIR = 0
    DIRT = 1
    GRASS = 2
    STONE = 3

    def is_opaque(self) -> bool:
        return self is not BlockType.AIR

    def relative_aabb(self) -> AABB | None:
        if self is BlockType.AIR:
            return None
        return AABB(Vec3.ZERO, Vec3.ONE)

    def world_aabb(self, block_pos: Sequence[int]) -> AABB | None:
        return super().world_aabb(block_pos)


class ChunkBlocks:
    """A cube of ``CHUNK_SIZE``³ blocks, stored as ``blocks[x, y, z]``."""

    def __init__(self, blocks: np.ndarray | None = None) -> None:
        shape = (CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE)
        if blocks is None:
            blocks = np.zeros(shape, dtype=np.uint8)
        elif blocks.shape != shape:
            raise ValueError(f"chunk blocks must have shape {shape}")
        self.blocks = blocks

    @classmethod
    def empty(cls) -> ChunkBlocks:
        """A chunk filled with air."""
        return cls()

    @classmethod
    def generate(cls, coords: Sequence[int]) -> ChunkBlocks:
        """Generate the terrain of the chunk at chunk coordinates ``coords``."""
        seed = 1
        sea_level = 512.0
        base_horizontal_scale = 0.01
        region_noise_scale = 0.02
        min_vertical_scale, max_vertical_scale = 5.0, 45.0
        min_vert_effect, max_vert_effect = 0.05, 0.8
        density_h_scale = density_v_scale = 0.02
        min_density_weight, max_density_weight = 3.0, 120.0
        density_threshold = 0.0
        cave_floor_depth = 5.0
        cave_h_scale, cave_v_scale = 0.012, 0.028
        cave_threshold = 0.2
        cave_min_y, cave_max_y = 5.0, sea_level - 5.0
        cave_surface_buffer = 8.0
        dirt_depth = 3

        heightmap = Fbm(seed, octaves=2, frequency=1.0, lacunarity=2.0, persistence=0.5)
        weirdness_noise = Perlin(seed + 2)
        verticality = Perlin(seed + 1)
        region_noise = Perlin(seed + 3)
        density_noise = Fbm(seed + 4, octaves=4, frequency=1.0, lacunarity=2.0, persistence=0.5)
        cave_noise = Fbm(seed + 6, octaves=4, frequency=1.0, lacunarity=2.0, persistence=0.5)

        cx, cy, cz = _coord(coords)
        local = np.arange(CHUNK_SIZE, dtype=float)
        wx = cx * float(CHUNK_SIZE) + local
        wy = cy * float(CHUNK_SIZE) + local
        wz = cz * float(CHUNK_SIZE) + local

        # Per-column (x, z) terrain parameters.
        col_x, col_z = np.meshgrid(wx, wz, indexing="ij")
        rx, rz = col_x * region_noise_scale, col_z * region_noise_scale
        region_value = region_noise.get((rx, rz))
        weirdness = weirdness_noise.get((rx / 4.0, rz / 4.0))
        region_factor = np.clip((region_value + 1.0) / 2.0, 0.0, 1.0)
        smoothed = region_factor * region_factor * (3.0 - 2.0 * region_factor)

        density_weight = weirdness * (
            min_density_weight + smoothed * (max_density_weight - min_density_weight)
        )
        vertical_scale = min_vertical_scale + smoothed * (max_vertical_scale - min_vertical_scale)
        vert_effect = min_vert_effect + smoothed * (max_vert_effect - min_vert_effect)

        nx, nz = col_x * base_horizontal_scale, col_z * base_horizontal_scale
        h_base = heightmap.get((nx, nz))
        v = verticality.get((nx + 0.1, nz + 0.1))
        h_modified = h_base * (1.0 + v * vert_effect)
        approx_height = (sea_level + h_modified * vertical_scale)[:, None, :]

        # Per-voxel density and caves.
        X, Y, Z = np.meshgrid(wx, wy, wz, indexing="ij")
        density_val = density_noise.get(
            (X * density_h_scale, Y * density_v_scale + 0.1, Z * density_h_scale - 0.1)
        )
        final_density = approx_height - Y + density_val * density_weight[:, None, :]
        floor_factor = np.clip(Y / cave_floor_depth, 0.0, 1.0)
        final_density = final_density + (1.0 - floor_factor) * 10.0

        cave_zone = (Y > cave_min_y) & (Y < cave_max_y) & (Y < approx_height - cave_surface_buffer)
        if cave_zone.any():
            cave_val = cave_noise.get(
                (X * cave_h_scale - 5.0, Y * cave_v_scale - 10.0, Z * cave_h_scale - 15.0)
            )
            is_cave_air = cave_zone & (cave_val > cave_threshold)
        else:
            is_cave_air = cave_zone

        solid = ~is_cave_air & (final_density > density_threshold)
        solid |= Y < 1.0
        blocks = np.where(solid, BlockType.STONE, BlockType.AIR).astype(np.uint8)

        # Surface pass: the highest stone with a non-opaque block above turns
        # to grass, with up to ``dirt_depth`` stone blocks below becoming dirt.
        above_solid = np.zeros_like(solid)
        above_solid[:, :-1, :] = solid[:, 1:, :]
        candidate = solid & ~above_solid
        has_surface = candidate.any(axis=1)
        top = CHUNK_SIZE - 1 - np.argmax(candidate[:, ::-1, :], axis=1)

        xs, zs = np.nonzero(has_surface)
        ys = top[xs, zs]
        blocks[xs, ys, zs] = BlockType.GRASS
        alive = np.ones(len(xs), dtype=bool)
        for depth in range(1, dirt_depth + 1):
            below = ys - depth
            in_range = alive & (below >= 0)
            stone = np.zeros(len(xs), dtype=bool)
            stone[in_range] = (
                blocks[xs[in_range], below[in_range], zs[in_range]] == BlockType.STONE
            )
            alive = stone
            blocks[xs[alive], below[alive], zs[alive]] = BlockType.DIRT

        return cls(blocks)

    def get_local_block(self, coords: Sequence[int]) -> BlockType:
        x, y, z = _coord(coords)
        return BlockType(int(self.blocks[x, y, z]))

    def __getitem__(self, coords: Sequence[int]) -> BlockType:
        return self.get_local_block(coords)

    def __setitem__(self, coords: Sequence[int], block: BlockType) -> None:
        x, y, z = _coord(coords)
        self.blocks[x, y, z] = int(BlockType(block))


_NEIGHBOR_NAMES = {
    (0, 0, 0): "center",
    (0, 0, 1): "north",
    (0, 0, -1): "south",
    (1, 0, 0): "east",
    (-1, 0, 0): "west",
    (0, 1, 0): "up",
    (0, -1, 0): "down",
}


@dataclass(frozen=True)
class ChunkNeighborhood:
    """A chunk together with its six face-adjacent neighbours."""

    center_coords: Coord
    center: ChunkBlocks
    north: ChunkBlocks
    south: ChunkBlocks
    east: ChunkBlocks
    west: ChunkBlocks
    up: ChunkBlocks
    down: ChunkBlocks

    def block_at(self, coord: Sequence[int]) -> BlockType | None:
        """Block at global coordinates, or ``None`` outside the neighbourhood."""
        chunk_coord, local = _split(coord)
        offset = tuple(c - o for c, o in zip(chunk_coord, self.center_coords))
        name = _NEIGHBOR_NAMES.get(offset)
        if name is None:
            return None
        chunk: ChunkBlocks = getattr(self, name)
        return chunk.get_local_block(local)


class World(PhysicsWorldProvider):
    """The loaded chunks of block data, keyed by chunk coordinates."""

    def __init__(self) -> None:
        self._chunks: dict[Coord, ChunkBlocks] = {}

    def insert_chunk_blocks(self, coords: Sequence[int], blocks: ChunkBlocks) -> None:
        self._chunks[_coord(coords)] = blocks

    def remove_chunk_blocks(self, coords: Sequence[int]) -> ChunkBlocks | None:
        return self._chunks.pop(_coord(coords), None)

    def chunk_exists(self, coords: Sequence[int]) -> bool:
        return _coord(coords) in self._chunks

    def get_chunk_blocks(self, coords: Sequence[int]) -> ChunkBlocks | None:
        return self._chunks.get(_coord(coords))

    def get_chunk_neighborhood(self, center_coords: Sequence[int]) -> ChunkNeighborhood | None:
        """The chunk and its six neighbours, or ``None`` if any is missing."""
        cx, cy, cz = _coord(center_coords)
        parts: dict[str, ChunkBlocks] = {}
        for (dx, dy, dz), name in _NEIGHBOR_NAMES.items():
            chunk = self._chunks.get((cx + dx, cy + dy, cz + dz))
            if chunk is None:
                return None
            parts[name] = chunk
        return ChunkNeighborhood(center_coords=(cx, cy, cz), **parts)

    def get_block(self, global_coords: Sequence[int]) -> BlockType | None:
        chunk_coord, local = _split(global_coords)
        chunk = self._chunks.get(chunk_coord)
        if chunk is None:
            return None
        return chunk.get_local_block(local)

    def query_potential_colliders(self, query_aabb: AABB) -> list[AABB]:
        low = query_aabb.min.floor()
        high = query_aabb.max.ceil()
        colliders: list[AABB] = []
        for x in range(int(low.x), int(high.x)):
            for y in range(int(low.y), int(high.y)):
                for z in range(int(low.z), int(high.z)):
                    block = self.get_block((x, y, z))
                    if block is None:
                        continue
                    box = block.world_aabb((x, y, z))
                    if box is not None and query_aabb.intersects(box):
                        colliders.append(box)
        return colliders