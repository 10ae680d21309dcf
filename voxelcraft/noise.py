"""Seeded gradient noise: Perlin noise and fractal Brownian motion."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from typing import Union

import numpy as np

NoiseValue = Union[float, np.ndarray]

_GRAD2 = np.array(
    [(1, 1), (-1, 1), (1, -1), (-1, -1), (1, 0), (-1, 0), (0, 1), (0, -1)],
    dtype=float,
)
_GRAD3 = np.array(
    [
        (1, 1, 0), (-1, 1, 0), (1, -1, 0), (-1, -1, 0),
        (1, 0, 1), (-1, 0, 1), (1, 0, -1), (-1, 0, -1),
        (0, 1, 1), (0, -1, 1), (0, 1, -1), (0, -1, -1),
    ],
    dtype=float,
)


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(t: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def _as_coords(point: Sequence[NoiseValue]) -> list[np.ndarray]:
    coords = [np.asarray(c, dtype=float) for c in point]
    if len(coords) not in (2, 3):
        raise ValueError(f"noise points must have 2 or 3 coordinates, got {len(coords)}")
    return list(np.broadcast_arrays(*coords))


def _finish(value: np.ndarray) -> NoiseValue:
    value = np.clip(value, -1.0, 1.0)
    return float(value) if value.ndim == 0 else value


class Perlin:
    """Classic gradient noise in two or three dimensions.

    Values lie in ``[-1, 1]`` and are exactly zero at integer lattice points.
    Coordinates may be scalars or numpy arrays of matching shape.
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed & 0xFFFFFFFF
        table = list(range(256))
        random.Random(self.seed).shuffle(table)
        self._perm = np.array(table * 2, dtype=np.intp)

    def get(self, point: Sequence[NoiseValue]) -> NoiseValue:
        coords = _as_coords(point)
        if len(coords) == 2:
            return _finish(self._noise2(*coords))
        return _finish(self._noise3(*coords))

    def _cell(self, c: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        base = np.floor(c)
        return base.astype(np.int64) & 255, c - base

    def _noise2(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        p = self._perm
        xi, fx = self._cell(x)
        yi, fy = self._cell(y)
        u, v = _fade(fx), _fade(fy)

        def corner(dx: int, dy: int) -> np.ndarray:
            g = p[p[xi + dx] + yi + dy] & 7
            return _GRAD2[g, 0] * (fx - dx) + _GRAD2[g, 1] * (fy - dy)

        bottom = _lerp(u, corner(0, 0), corner(1, 0))
        top = _lerp(u, corner(0, 1), corner(1, 1))
        return _lerp(v, bottom, top)

    def _noise3(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        p = self._perm
        xi, fx = self._cell(x)
        yi, fy = self._cell(y)
        zi, fz = self._cell(z)
        u, v, w = _fade(fx), _fade(fy), _fade(fz)

        def corner(dx: int, dy: int, dz: int) -> np.ndarray:
            g = p[p[p[xi + dx] + yi + dy] + zi + dz] % 12
            return (
                _GRAD3[g, 0] * (fx - dx)
                + _GRAD3[g, 1] * (fy - dy)
                + _GRAD3[g, 2] * (fz - dz)
            )

        def plane(dz: int) -> np.ndarray:
            near = _lerp(u, corner(0, 0, dz), corner(1, 0, dz))
            far = _lerp(u, corner(0, 1, dz), corner(1, 1, dz))
            return _lerp(v, near, far)

        return _lerp(w, plane(0), plane(1))


class Fbm:
    """Fractal Brownian motion: a weighted sum of Perlin octaves.

    Octave ``i`` uses a Perlin source seeded ``seed + i``; its input is
    scaled by ``frequency * lacunarity**i`` and its output weighted by
    ``persistence**i``. The sum is normalised by the total weight.
    """

    def __init__(
        self,
        seed: int = 0,
        octaves: int = 6,
        frequency: float = 1.0,
        lacunarity: float = math.pi * 2.0 / 3.0,
        persistence: float = 0.5,
    ) -> None:
        if octaves < 1:
            raise ValueError("octaves must be at least 1")
        self.seed = seed & 0xFFFFFFFF
        self.octaves = octaves
        self.frequency = frequency
        self.lacunarity = lacunarity
        self.persistence = persistence
        self._sources = [Perlin((self.seed + i) & 0xFFFFFFFF) for i in range(octaves)]
        self._scale = sum(persistence**i for i in range(octaves))

    def get(self, point: Sequence[NoiseValue]) -> NoiseValue:
        coords = [c * self.frequency for c in _as_coords(point)]
        total: NoiseValue = 0.0
        for i, source in enumerate(self._sources):
            total = total + source.get(coords) * self.persistence**i
            coords = [c * self.lacunarity for c in coords]
        result = np.asarray(total) / self._scale
        return float(result) if result.ndim == 0 else result