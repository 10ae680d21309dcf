"""Binary greedy meshing of a chunk into packed face instances."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from voxelcraft.faces import FaceData, get_block_face_quad_index
from voxelcraft.world import CHUNK_SIZE, BlockType, ChunkNeighborhood

_U64_MASK = (1 << 64) - 1


class FaceDir(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    FORWARD = "forward"
    BACK = "back"

    def worldgen_face_index(self) -> int:
        """Index of this face in the quad template order."""
        return _WORLDGEN_FACE_INDEX[self]


_WORLDGEN_FACE_INDEX = {
    FaceDir.BACK: 0,
    FaceDir.FORWARD: 1,
    FaceDir.LEFT: 2,
    FaceDir.RIGHT: 3,
    FaceDir.UP: 4,
    FaceDir.DOWN: 5,
}


@dataclass(frozen=True)
class GreedyQuad:
    """A rectangle of set bits in a binary plane: origin ``(x, y)``, size ``w`` x ``h``."""

    x: int
    y: int
    w: int
    h: int


def _trailing_zeros(bits: int) -> int:
    if bits == 0:
        return 64
    return (bits & -bits).bit_length() - 1


def _trailing_ones(bits: int) -> int:
    return _trailing_zeros(~bits & _U64_MASK)


def greedy_mesh_binary_plane(data: Sequence[int], plane_size: int) -> list[GreedyQuad]:
    """Cover the set bits of a plane with rectangles.

    ``data[x]`` holds the column at ``x`` as a 64-bit mask over ``y``.
    The input is not modified.
    """
    if len(data) < plane_size:
        raise ValueError(f"plane needs {plane_size} columns, got {len(data)}")
    columns = [int(c) & _U64_MASK for c in data]
    quads: list[GreedyQuad] = []

    for x in range(plane_size):
        bits = columns[x]
        y = 0
        while y < plane_size:
            skip = _trailing_zeros(bits)
            if skip >= plane_size:
                break
            y += skip
            bits >>= skip
            h = _trailing_ones(bits)
            if y + h > plane_size:
                break
            h_mask = (1 << h) - 1
            w = 1
            while x + w < plane_size and (columns[x + w] >> y) & h_mask == h_mask:
                w += 1
            clear_mask = ~(h_mask << y) & _U64_MASK
            for i in range(w):
                columns[x + i] &= clear_mask
            quads.append(GreedyQuad(x=x, y=y, w=w, h=h))
            bits >>= h
            y += h

    return quads


def calculate_face_origin(
    face_dir: FaceDir, slice_coord: int, quad: GreedyQuad
) -> tuple[int, int, int]:
    """Local origin of a quad's face within the chunk."""
    qx, qy, sc = quad.x, quad.y, slice_coord
    if face_dir is FaceDir.UP:
        return qx, sc, qy
    if face_dir is FaceDir.DOWN:
        return qx, sc + 1, qy
    if face_dir is FaceDir.RIGHT:
        return sc, qx, qy
    if face_dir is FaceDir.LEFT:
        return sc + 1, qx, qy
    if face_dir is FaceDir.BACK:
        return qx, qy, sc
    return qx, qy, sc + 1


def _padded_opacity(neighborhood: ChunkNeighborhood) -> np.ndarray:
    """Opacity of the chunk plus a one-voxel border from its face neighbours."""
    n = CHUNK_SIZE
    air = BlockType.AIR
    padded = np.zeros((n + 2, n + 2, n + 2), dtype=bool)
    inner = slice(1, n + 1)
    padded[inner, inner, inner] = neighborhood.center.blocks != air
    padded[0, inner, inner] = neighborhood.west.blocks[n - 1, :, :] != air
    padded[n + 1, inner, inner] = neighborhood.east.blocks[0, :, :] != air
    padded[inner, 0, inner] = neighborhood.down.blocks[:, n - 1, :] != air
    padded[inner, n + 1, inner] = neighborhood.up.blocks[:, 0, :] != air
    padded[inner, inner, 0] = neighborhood.south.blocks[:, :, n - 1] != air
    padded[inner, inner, n + 1] = neighborhood.north.blocks[:, :, 0] != air
    return padded


def _face_masks(padded: np.ndarray) -> dict[FaceDir, np.ndarray]:
    n = CHUNK_SIZE
    i = slice(1, n + 1)
    lo = slice(0, n)
    hi = slice(2, n + 2)
    solid = padded[i, i, i]
    return {
        FaceDir.DOWN: solid & ~padded[i, hi, i],
        FaceDir.UP: solid & ~padded[i, lo, i],
        FaceDir.LEFT: solid & ~padded[hi, i, i],
        FaceDir.RIGHT: solid & ~padded[lo, i, i],
        FaceDir.FORWARD: solid & ~padded[i, i, hi],
        FaceDir.BACK: solid & ~padded[i, i, lo],
    }


# Axis order (slice, plane_u, plane_v) for each face direction, from [x, y, z].
_PLANE_AXES = {
    FaceDir.UP: (1, 0, 2),
    FaceDir.DOWN: (1, 0, 2),
    FaceDir.LEFT: (0, 1, 2),
    FaceDir.RIGHT: (0, 1, 2),
    FaceDir.FORWARD: (2, 0, 1),
    FaceDir.BACK: (2, 0, 1),
}


def _plane_rows(plane: np.ndarray) -> list[int]:
    packed = np.packbits(plane, axis=1, bitorder="little")
    return [int(v) for v in packed.view("<u8")[:, 0]]


def build_chunk_mesh(neighborhood: ChunkNeighborhood) -> list[FaceData]:
    """Greedy-mesh the centre chunk of ``neighborhood`` into face instances."""
    masks = _face_masks(_padded_opacity(neighborhood))
    center_blocks = neighborhood.center.blocks
    faces: list[FaceData] = []

    for face_dir, mask in masks.items():
        axes = _PLANE_AXES[face_dir]
        oriented_mask = mask.transpose(axes)
        oriented_blocks = center_blocks.transpose(axes)
        face_index = face_dir.worldgen_face_index()

        for block_value in np.unique(oriented_blocks[oriented_mask]):
            block_type = BlockType(int(block_value))
            quad_index = get_block_face_quad_index(block_type, face_index)
            selected = oriented_mask & (oriented_blocks == block_value)
            (slices,) = np.nonzero(selected.any(axis=(1, 2)))

            for slice_coord in slices.tolist():
                rows = _plane_rows(selected[slice_coord])
                for quad in greedy_mesh_binary_plane(rows, CHUNK_SIZE):
                    ox, oy, oz = calculate_face_origin(face_dir, slice_coord, quad)
                    if face_dir in (FaceDir.LEFT, FaceDir.RIGHT):
                        u_scale, v_scale = quad.h, quad.w
                    else:
                        u_scale, v_scale = quad.w, quad.h
                    u_m1 = min(max(u_scale - 1, 0), 63)
                    v_m1 = min(max(v_scale - 1, 0), 63)
                    faces.append(
                        FaceData(
                            packed_origin=ox | (oy << 8) | (oz << 16),
                            packed_scale_quad_index=u_m1 | (v_m1 << 6) | (quad_index << 12),
                        )
                    )

    return faces