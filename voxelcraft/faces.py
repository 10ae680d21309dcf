"""Per-face instance data and the shared quad templates for block faces."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from voxelcraft.world import BlockType

TEXTURE_SIZE_PIXELS = 18.0
TEXTURE_PADDING_PIXELS = 1.0
ATLAS_W = 1024.0
ATLAS_H = 1024.0

STONE_FACE_QUADS_START = 0
DIRT_FACE_QUADS_START = 6
GRASS_FACE_QUADS_START = 12

_FACE_QUADS_START = {
    BlockType.STONE: STONE_FACE_QUADS_START,
    BlockType.DIRT: DIRT_FACE_QUADS_START,
    BlockType.GRASS: GRASS_FACE_QUADS_START,
}

_H = 0.5
# Four corners per face, in face order: +Z, -Z, -X, +X, +Y, -Y.
_REL_VERTICES = (
    (-_H, -_H, _H), (_H, -_H, _H), (_H, _H, _H), (-_H, _H, _H),
    (_H, -_H, -_H), (-_H, -_H, -_H), (-_H, _H, -_H), (_H, _H, -_H),
    (-_H, -_H, -_H), (-_H, -_H, _H), (-_H, _H, _H), (-_H, _H, -_H),
    (_H, -_H, _H), (_H, -_H, -_H), (_H, _H, -_H), (_H, _H, _H),
    (-_H, _H, _H), (_H, _H, _H), (_H, _H, -_H), (-_H, _H, -_H),
    (-_H, -_H, -_H), (_H, -_H, -_H), (_H, -_H, _H), (-_H, -_H, _H),
)

_BASE_UVS = ((0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0))

UVRegion = tuple[float, float, float, float]


@dataclass(frozen=True)
class QuadTemplate:
    """Corner positions, texture coordinates and normal index of one face."""

    model_positions: tuple[tuple[float, float, float, float], ...]
    uvs: tuple[tuple[float, float], ...]
    normal_index: int


@dataclass(frozen=True)
class FaceData:
    """Packed per-instance data for one greedy quad.

    ``packed_origin`` holds local x, y and z in bits 0-7, 8-15 and 16-23.
    ``packed_scale_quad_index`` holds U scale - 1 in bits 0-5, V scale - 1
    in bits 6-11 and the quad template index in bits 12-31.
    """

    packed_origin: int
    packed_scale_quad_index: int

    def pack(self) -> bytes:
        """Eight little-endian bytes: two unsigned 32-bit words."""
        return struct.pack("<II", self.packed_origin, self.packed_scale_quad_index)


def get_block_face_quad_index(block_type: BlockType, face_index: int) -> int:
    """Index of the quad template for a block type and face."""
    block_type = BlockType(block_type)
    if block_type not in _FACE_QUADS_START:
        raise ValueError(f"{block_type.name} does not generate quads")
    return _FACE_QUADS_START[block_type] + face_index


def uv_region(tex_x: float, tex_y: float) -> UVRegion:
    """Atlas UV rectangle ``(min_u, min_v, max_u, max_v)`` of a padded tile."""
    inner = TEXTURE_SIZE_PIXELS - 2.0 * TEXTURE_PADDING_PIXELS
    return (
        tex_x / ATLAS_W,
        tex_y / ATLAS_H,
        (tex_x + inner) / ATLAS_W,
        (tex_y + inner) / ATLAS_H,
    )


def _tile_region(column: int) -> UVRegion:
    return uv_region(TEXTURE_SIZE_PIXELS * column + 1.0, TEXTURE_SIZE_PIXELS * 0.0 + 1.0)


def _make_template(face_idx: int, region: UVRegion) -> QuadTemplate:
    min_u, min_v, max_u, max_v = region
    width, height = max_u - min_u, max_v - min_v
    corners = _REL_VERTICES[face_idx * 4 : face_idx * 4 + 4]
    positions = tuple((x, y, z, 0.0) for x, y, z in corners)
    uvs = tuple((min_u + bu * width, min_v + bv * height) for bu, bv in _BASE_UVS)
    return QuadTemplate(model_positions=positions, uvs=uvs, normal_index=face_idx)


def create_quad_templates() -> list[QuadTemplate]:
    """Six face templates each for stone, dirt and grass, in that order."""
    stone = _tile_region(3)
    dirt = _tile_region(2)
    grass_top = _tile_region(1)
    grass_side = _tile_region(0)

    block_regions = (
        (stone,) * 6,
        (dirt,) * 6,
        (grass_side, grass_side, grass_side, grass_side, dirt, grass_top),
    )
    return [
        _make_template(face_idx, region)
        for regions in block_regions
        for face_idx, region in enumerate(regions)
    ]