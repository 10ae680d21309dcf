# voxelcraft

A library for block-based voxel worlds. It provides physics, terrain, meshing and chunk streaming:

- **Vectors and boxes**: `voxelcraft.vector.Vec3` is an immutable 3D vector.
  `voxelcraft.aabb.AABB` is an axis-aligned box. It offers `from_points`, `from_center_dims`,
  `translate`, `intersects`, `union` and `expanded`. Boxes that only touch faces do not
  intersect.
- **Physics**: `voxelcraft.body.PhysicsBody` is a box-shaped body whose `position` is the
  centre of the box. `voxelcraft.collision.swept_aabb_vs_aabb` sweeps a box against a static
  box. It returns `(time, normal)` or `None`, and boxes that already overlap are ignored.
  `voxelcraft.simulation.step_simulation(body, dt, world)` moves a body by its velocity. It
  resolves the X axis, then Z, then Y. A blocked axis has its velocity set to zero, and
  `is_grounded` is set when the body lands on something below it.
- **Collision worlds**: `voxelcraft.physics_world.PhysicsWorldProvider` is the interface
  that the physics step queries. `ChunkedWorld(chunk_size)` stores cubic chunks of blocks,
  indexed `data[x][y][z]`. Block types derive from `HasAABB` and override `relative_aabb`.
- **Terrain**: `voxelcraft.noise` provides seeded `Perlin` and `Fbm` noise. Both work on
  scalars or numpy arrays. `voxelcraft.world.ChunkBlocks.generate(coords)` builds a
  64×64×64 chunk of stone, dirt and grass, with caves. `voxelcraft.world.World` holds the
  loaded chunks. It answers `get_block` for global coordinates and `get_chunk_neighborhood`
  for a chunk with its six neighbours, and it serves as a `PhysicsWorldProvider`.
- **Meshing**: `voxelcraft.mesher.build_chunk_mesh(neighborhood)` greedy-meshes a chunk into
  `voxelcraft.faces.FaceData` records. Each record packs a quad's origin, its size and a
  quad template index. `FaceData.pack()` gives 8 little-endian bytes.
  `voxelcraft.faces.create_quad_templates()` returns the 18 face templates: six each for
  stone, dirt and grass. They carry corner positions and texture-atlas UVs.
  `voxelcraft.lod.Lod` lists levels of detail.
- **Visibility and streaming**: `voxelcraft.frustum.Frustum.from_view_proj(matrix)` extracts
  clip planes from a 4×4 matrix indexed `matrix[row][column]`. `intersects_aabb` culls boxes
  against those planes. `voxelcraft.chunk_manager.ChunkManager` generates and meshes the
  chunks around the camera on a thread pool. It unloads the chunks that fall out of range.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Example: a body falling onto a block

```python
from voxelcraft.aabb import AABB
from voxelcraft.body import PhysicsBody
from voxelcraft.physics_world import ChunkedWorld, HasAABB
from voxelcraft.simulation import step_simulation
from voxelcraft.vector import Vec3


class Solid(HasAABB):
    def relative_aabb(self):
        return AABB.from_points(Vec3(0, 0, 0), Vec3(1, 1, 1))


air, solid = HasAABB(), Solid()
chunk = [[[air] * 16 for _ in range(16)] for _ in range(16)]
chunk[0][0][0] = solid

world = ChunkedWorld(16)
world.load_chunk((0, 0, 0), chunk)

body = PhysicsBody(Vec3(0.5, 3.0, 0.5), Vec3(1.0, 2.0, 1.0))
body.velocity = Vec3(0.0, -100.0, 0.0)
step_simulation(body, 1 / 60, world)
print(body.position, body.is_grounded)  # y is about 2.0, grounded
```

## Example: meshing a single block

```python
from voxelcraft.mesher import build_chunk_mesh
from voxelcraft.world import BlockType, ChunkBlocks, World

world = World()
for offset in [(0, 0, 0), (0, 0, 1), (0, 0, -1), (1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0)]:
    world.insert_chunk_blocks(offset, ChunkBlocks.empty())
world.get_chunk_blocks((0, 0, 0))[1, 1, 1] = BlockType.STONE

faces = build_chunk_mesh(world.get_chunk_neighborhood((0, 0, 0)))
print(len(faces))  # one face per side
```

## Example: streaming terrain

```python
from voxelcraft.chunk_manager import ChunkManager
from voxelcraft.vector import Vec3
from voxelcraft.world import World

with ChunkManager(2, 1, 20, World()) as manager:
    manager.update(Vec3(0.0, 525.0, 0.0))
    print(manager.chunk_counts())
```

Call `update` once per frame. Each call does three things:

- It collects finished terrain and mesh jobs.
- It requests new chunks when the camera moves into a different chunk, and drops chunks
  that are out of range.
- It moves at most `max_uploads_per_frame` meshed chunks to the ready state.

`renderable_chunks(frustum, camera_pos)` yields each ready, non-empty chunk that lies inside
the frustum. Each item is `(coords, GpuChunkData, squared_distance)`. Hold `manager.lock`
while you read `manager.world` from another thread, for example while you call
`step_simulation` against it. `close()`, or leaving the `with` block, stops the workers.

## What this package does not do

The package has no window, no renderer and no input handling. `GpuChunkData.face_buffer`
holds the packed face bytes, ready to be handed to a graphics API of your choice, but
nothing here draws them. The package has no command-line program either. It is used as a
library.

## Running the tests

```
pytest
```