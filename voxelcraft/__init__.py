"""Voxel world toolkit: AABB physics, procedural terrain, greedy meshing and chunk streaming."""

__version__ = "0.1.0"