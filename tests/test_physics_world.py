from enum import Enum

import pytest

from voxelcraft.aabb import AABB
from voxelcraft.physics_world import ChunkedWorld, HasAABB
from voxelcraft.vector import Vec3

TEST_CHUNK_SIZE = 16


class TestBlock(HasAABB, Enum):
    AIR = 0
    SOLID = 1

    def relative_aabb(self):
        if self is TestBlock.SOLID:
            return AABB.from_points(Vec3.ZERO, Vec3.ONE)
        return None


def create_test_chunk(fill):
    return [
        [[fill for _ in range(TEST_CHUNK_SIZE)] for _ in range(TEST_CHUNK_SIZE)]
        for _ in range(TEST_CHUNK_SIZE)
    ]


def box(a, b):
    return AABB.from_points(Vec3(*a), Vec3(*b))


def assert_aabbs_eq_unordered(actual, expected):
    def key(b):
        return tuple(b.min)

    assert sorted(actual, key=key) == sorted(expected, key=key)


def test_query_all_air_chunk():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    world.load_chunk((0, 0, 0), create_test_chunk(TestBlock.AIR))
    query = AABB.from_center_dims(Vec3(8.0, 8.0, 8.0), Vec3.ONE * 10.0)
    assert world.query_potential_colliders(query) == []


def test_query_single_solid_block_precise():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[1][2][3] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    result = world.query_potential_colliders(box((1, 2, 3), (2, 3, 4)))
    assert_aabbs_eq_unordered(result, [box((1, 2, 3), (2, 3, 4))])


def test_query_single_solid_block_partial_overlap():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[1][2][3] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    result = world.query_potential_colliders(box((1.5, 2.5, 3.5), (2.5, 3.5, 4.5)))
    assert_aabbs_eq_unordered(result, [box((1, 2, 3), (2, 3, 4))])


def test_query_single_solid_block_contained_query():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[5][5][5] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    result = world.query_potential_colliders(box((5.1, 5.1, 5.1), (5.9, 5.9, 5.9)))
    assert_aabbs_eq_unordered(result, [box((5, 5, 5), (6, 6, 6))])


def test_query_miss_solid_block():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[1][2][3] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    result = world.query_potential_colliders(box((2.1, 2.0, 3.0), (3.1, 3.0, 4.0)))
    assert result == []


def test_query_multiple_solid_blocks():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[4][4][4] = TestBlock.SOLID
    chunk[4][4][5] = TestBlock.SOLID
    chunk[5][4][4] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    result = world.query_potential_colliders(box((4.1, 4.1, 4.1), (4.9, 4.9, 5.9)))
    assert_aabbs_eq_unordered(
        result, [box((4, 4, 4), (5, 5, 5)), box((4, 4, 5), (5, 5, 6))]
    )


def test_query_block_at_chunk_origin():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[0][0][0] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    result = world.query_potential_colliders(box((-0.5, -0.5, -0.5), (0.5, 0.5, 0.5)))
    assert_aabbs_eq_unordered(result, [AABB.from_points(Vec3.ZERO, Vec3.ONE)])


def test_query_block_at_chunk_max_corner():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    max_idx = TEST_CHUNK_SIZE - 1
    chunk[max_idx][max_idx][max_idx] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)
    p = float(max_idx)
    result = world.query_potential_colliders(
        box((p + 0.5,) * 3, (p + 1.5,) * 3)
    )
    assert_aabbs_eq_unordered(result, [box((p,) * 3, (p + 1.0,) * 3)])


def test_query_across_chunk_boundary_positive():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    max_idx = TEST_CHUNK_SIZE - 1
    chunk0 = create_test_chunk(TestBlock.AIR)
    chunk0[max_idx][0][0] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk0)
    chunk1 = create_test_chunk(TestBlock.AIR)
    chunk1[0][0][0] = TestBlock.SOLID
    world.load_chunk((1, 0, 0), chunk1)
    result = world.query_potential_colliders(box((15.5, -0.5, -0.5), (16.5, 0.5, 0.5)))
    assert_aabbs_eq_unordered(
        result, [box((15, 0, 0), (16, 1, 1)), box((16, 0, 0), (17, 1, 1))]
    )


def test_query_across_chunk_boundary_negative():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    max_idx = TEST_CHUNK_SIZE - 1
    chunk_neg = create_test_chunk(TestBlock.AIR)
    chunk_neg[max_idx][0][0] = TestBlock.SOLID
    world.load_chunk((-1, 0, 0), chunk_neg)
    chunk_zero = create_test_chunk(TestBlock.AIR)
    chunk_zero[0][0][0] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk_zero)
    result = world.query_potential_colliders(box((-0.5, -0.5, -0.5), (0.5, 0.5, 0.5)))
    assert_aabbs_eq_unordered(
        result, [box((-1, 0, 0), (0, 1, 1)), box((0, 0, 0), (1, 1, 1))]
    )


def test_query_on_block_edge():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[1][1][1] = TestBlock.SOLID
    chunk[2][1][1] = TestBlock.SOLID
    world.load_chunk((0, 0, 0), chunk)

    result = world.query_potential_colliders(box((2.0, 1.0, 1.0), (2.5, 1.5, 1.5)))
    assert_aabbs_eq_unordered(result, [box((2, 1, 1), (3, 2, 2))])

    result_max = world.query_potential_colliders(box((1.5, 1.0, 1.0), (2.0, 1.5, 1.5)))
    assert_aabbs_eq_unordered(result_max, [box((1, 1, 1), (2, 2, 2))])


def test_get_block_and_unload():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    chunk = create_test_chunk(TestBlock.AIR)
    chunk[TEST_CHUNK_SIZE - 1][0][0] = TestBlock.SOLID
    world.load_chunk((-1, 0, 0), chunk)
    assert world.get_block((-1, 0, 0)) is TestBlock.SOLID
    assert world.get_block((-2, 0, 0)) is TestBlock.AIR
    assert world.get_block((0, 0, 0)) is None
    world.unload_chunk((-1, 0, 0))
    assert world.get_block((-1, 0, 0)) is None


def test_query_unloaded_region_is_empty():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    assert world.query_potential_colliders(box((0, 0, 0), (3, 3, 3))) == []


def test_world_aabb_translates_relative_box():
    solid = TestBlock.SOLID.world_aabb((3, -2, 7))
    assert solid == AABB.from_points(Vec3.ZERO, Vec3.ONE).translate(Vec3(3.0, -2.0, 7.0))
    assert TestBlock.AIR.world_aabb((3, -2, 7)) is None


def test_invalid_chunk_size_rejected():
    with pytest.raises(ValueError):
        ChunkedWorld(0)


def test_wrongly_shaped_chunk_rejected():
    world = ChunkedWorld(TEST_CHUNK_SIZE)
    with pytest.raises(ValueError):
        world.load_chunk((0, 0, 0), [[[TestBlock.AIR]]])