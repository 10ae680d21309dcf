"""Level-of-detail settings for chunk meshing."""

from __future__ import annotations

from enum import Enum

_FULL_SIZE = 64


class Lod(Enum):
    """Mesh resolution of a chunk; the value is the voxel count per side."""

    L64 = 64
    L32 = 32
    L16 = 16
    L8 = 8
    L4 = 4
    L2 = 2

    def size(self) -> int:
        return self.value

    def jump_index(self) -> int:
        """Stride, in full-resolution voxels, between sampled voxels."""
        return _FULL_SIZE // self.value