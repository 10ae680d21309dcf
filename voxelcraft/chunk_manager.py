"""Streaming of chunks around the camera: generation, meshing and upload."""

from __future__ import annotations

import itertools
import logging
import math
import queue
import threading
from collections import Counter
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum

from voxelcraft.aabb import AABB
from voxelcraft.faces import FaceData
from voxelcraft.frustum import Frustum
from voxelcraft.mesher import build_chunk_mesh
from voxelcraft.vector import Vec3
from voxelcraft.world import CHUNK_SIZE, ChunkBlocks, World

log = logging.getLogger(__name__)

Coord = tuple[int, int, int]

CHUNK_RADIUS = 15
CHUNK_RADIUS_VERTICAL = 2
WORKER_THREADS = 12

_SELF_AND_NEIGHBOR_OFFSETS: tuple[Coord, ...] = (
    (0, 0, 0),
    (0, 0, 1),
    (0, 0, -1),
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
)


def _offset(coord: Coord, delta: Coord) -> Coord:
    return coord[0] + delta[0], coord[1] + delta[1], coord[2] + delta[2]


@dataclass
class GpuChunkData:
    """Uploaded mesh of a chunk: packed face instances, or ``None`` if empty."""

    face_buffer: bytes | None
    face_count: int


@dataclass
class CpuMeshData:
    """A chunk mesh built on a worker, waiting to be uploaded."""

    faces: list[FaceData] = field(default_factory=list)


class ChunkState(Enum):
    """Lifecycle stage of a tracked chunk."""

    GENERATING_BLOCKS = "GeneratingBlocks"
    AWAITING_NEIGHBORS = "AwaitingNeighbors"
    MESHING = "Meshing"
    MESH_GENERATED = "MeshGenerated"
    GPU_READY = "GpuReady"


@dataclass
class _Chunk:
    state: ChunkState
    mesh: CpuMeshData | None = None
    gpu: GpuChunkData | None = None


class ChunkManager:
    """Keeps the chunks around the camera generated, meshed and uploaded.

    Block generation and meshing run on a worker pool; their results are
    collected on each :meth:`update`. ``lock`` guards writes to ``world``
    and should be held by other readers of it.
    """

    def __init__(
        self,
        horiz_radius: int,
        vert_radius: int,
        max_uploads_per_frame: int,
        world: World,
    ) -> None:
        self.horiz_radius = horiz_radius
        self.vert_radius = vert_radius
        self.max_uploads_per_frame = max_uploads_per_frame
        self.world = world
        self.lock = threading.RLock()
        self._chunks: dict[Coord, _Chunk] = {}
        self._last_camera_chunk: Coord | None = None
        self._pool = ThreadPoolExecutor(max_workers=WORKER_THREADS)
        self._block_results: queue.SimpleQueue[tuple[Coord, ChunkBlocks]] = queue.SimpleQueue()
        self._mesh_results: queue.SimpleQueue[tuple[Coord, CpuMeshData]] = queue.SimpleQueue()
        self._closed = False

    def __enter__(self) -> ChunkManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop the worker pool; pending jobs are cancelled."""
        self._closed = True
        self._pool.shutdown(wait=False, cancel_futures=True)

    def update(self, camera_position: Vec3) -> None:
        """Collect finished work, re-plan around the camera and upload meshes."""
        if self._closed:
            raise RuntimeError("chunk manager is closed")
        camera_chunk = self.chunk_coords_at(camera_position)

        self._process_block_results()
        self._process_mesh_results()

        if camera_chunk != self._last_camera_chunk:
            self._update_chunk_requests(camera_chunk)
            self._last_camera_chunk = camera_chunk

        self._process_uploads()

    def renderable_chunks(
        self, frustum: Frustum, camera_pos: Vec3
    ) -> Iterator[tuple[Coord, GpuChunkData, float]]:
        """Uploaded, non-empty chunks inside ``frustum`` with squared camera distance."""
        half = CHUNK_SIZE / 2.0
        for coords, chunk in self._chunks.items():
            gpu = chunk.gpu
            if chunk.state is not ChunkState.GPU_READY or gpu is None or gpu.face_buffer is None:
                continue
            if not frustum.intersects_aabb(self.chunk_aabb_from_coords(coords)):
                continue
            center = Vec3(*(c * CHUNK_SIZE + half for c in coords))
            yield coords, gpu, (camera_pos - center).length_squared()

    def chunk_counts(self) -> dict[str, int]:
        """Number of tracked chunks in each state."""
        return dict(Counter(chunk.state.value for chunk in self._chunks.values()))

    @staticmethod
    def chunk_coords_at(position: Vec3) -> Coord:
        """Coordinates of the chunk that contains a world position."""
        x, y, z = (math.floor(c / CHUNK_SIZE) for c in position)
        return x, y, z

    @staticmethod
    def chunk_aabb_from_coords(coords: Sequence[int]) -> AABB:
        """World-space box covered by a chunk."""
        origin = Vec3(*(float(int(c) * CHUNK_SIZE) for c in coords))
        return AABB(origin, origin + Vec3.ONE * float(CHUNK_SIZE))

    def _generate_blocks(self, coord: Coord) -> ChunkBlocks:
        return ChunkBlocks.generate(coord)

    def _process_block_results(self) -> None:
        while True:
            try:
                coord, blocks = self._block_results.get_nowait()
            except queue.Empty:
                return
            chunk = self._chunks.get(coord)
            if chunk is not None and chunk.state is ChunkState.GENERATING_BLOCKS:
                with self.lock:
                    self.world.insert_chunk_blocks(coord, blocks)
                chunk.state = ChunkState.AWAITING_NEIGHBORS
                for delta in _SELF_AND_NEIGHBOR_OFFSETS:
                    neighbor = _offset(coord, delta)
                    if neighbor in self._chunks:
                        self._schedule_mesh_if_ready(neighbor)
            else:
                with self.lock:
                    self.world.remove_chunk_blocks(coord)

    def _process_mesh_results(self) -> None:
        while True:
            try:
                coord, mesh = self._mesh_results.get_nowait()
            except queue.Empty:
                return
            chunk = self._chunks.get(coord)
            if chunk is not None and chunk.state is ChunkState.MESHING:
                chunk.state = ChunkState.MESH_GENERATED
                chunk.mesh = mesh

    def _schedule_mesh_if_ready(self, coord: Coord) -> None:
        chunk = self._chunks.get(coord)
        if chunk is None or chunk.state is not ChunkState.AWAITING_NEIGHBORS:
            return
        with self.lock:
            if not all(
                self.world.chunk_exists(_offset(coord, d)) for d in _SELF_AND_NEIGHBOR_OFFSETS
            ):
                return
            neighborhood = self.world.get_chunk_neighborhood(coord)
        if neighborhood is None:
            raise RuntimeError(f"neighbours of {coord} checked but neighbourhood fetch failed")

        chunk.state = ChunkState.MESHING

        def mesh_job() -> None:
            try:
                faces = build_chunk_mesh(neighborhood)
            except Exception:
                log.exception("Meshing failed for %s", coord)
                return
            self._mesh_results.put((coord, CpuMeshData(faces)))

        self._pool.submit(mesh_job)

    def _process_uploads(self) -> None:
        ready = [c for c, chunk in self._chunks.items() if chunk.state is ChunkState.MESH_GENERATED]
        for coord in ready[: max(self.max_uploads_per_frame, 0)]:
            chunk = self._chunks[coord]
            faces = chunk.mesh.faces if chunk.mesh is not None else []
            buffer = b"".join(face.pack() for face in faces) if faces else None
            chunk.gpu = GpuChunkData(face_buffer=buffer, face_count=len(faces))
            chunk.mesh = None
            chunk.state = ChunkState.GPU_READY

    def _update_chunk_requests(self, camera_chunk: Coord) -> None:
        cx, cy, cz = camera_chunk
        h, v = self.horiz_radius, self.vert_radius
        required = {
            (x, y, z)
            for x, y, z in itertools.product(
                range(cx - h, cx + h + 1),
                range(cy - v, cy + v + 1),
                range(cz - h, cz + h + 1),
            )
            if x - cx <= CHUNK_RADIUS
            and y - cy <= CHUNK_RADIUS_VERTICAL
            and z - cz <= CHUNK_RADIUS
        }
        current = set(self._chunks)

        with self.lock:
            for coord in current - required:
                del self._chunks[coord]
                self.world.remove_chunk_blocks(coord)

        for coord in required - current:
            self._chunks[coord] = _Chunk(ChunkState.GENERATING_BLOCKS)
            self._pool.submit(self._generate_job, coord)

    def _generate_job(self, coord: Coord) -> None:
        try:
            blocks = self._generate_blocks(coord)
        except Exception:
            log.exception("Block generation failed for %s", coord)
            return
        self._block_results.put((coord, blocks))