import random

import pytest

from dungeon_config import DungeonConfig
from spatial_partitioner import SpatialPartitioner, partition_region


def _leaves(config: DungeonConfig, seed: int = 0):
    return list(SpatialPartitioner(config, random.Random(seed)).partition().iter_leaves())


@pytest.mark.parametrize("seed", [0, 1, 42, 1234])
def test_leaves_tessellate_region(scenario_config, seed):
    leaves = _leaves(scenario_config, seed)

    assert sum(leaf.bounds.area for leaf in leaves) == scenario_config.width * scenario_config.height
    for index, leaf in enumerate(leaves):
        for other in leaves[index + 1:]:
            assert not leaf.bounds.overlaps(other.bounds)


@pytest.mark.parametrize("seed", [0, 3, 42])
def test_leaves_respect_minimum_size(scenario_config, seed):
    min_side = 2 * scenario_config.min_room_size

    for leaf in _leaves(scenario_config, seed):
        assert leaf.bounds.width >= min_side
        assert leaf.bounds.height >= min_side


def test_depth_cap_limits_tree():
    config = DungeonConfig(width=400, height=400, min_room_size=4, max_room_size=8, max_partition_depth=2)

    leaves = _leaves(config)

    assert len(leaves) <= 4
    assert all(leaf.depth <= 2 for leaf in leaves)


def test_zero_depth_yields_single_leaf(default_config):
    config = default_config.with_seed(5)
    config.max_partition_depth = 0

    assert len(_leaves(config)) == 1


def test_region_too_small_to_split_is_one_leaf(tiny_config):
    root = partition_region(tiny_config, random.Random(tiny_config.seed))

    assert root.is_leaf
    assert root.bounds.to_tuple() == (0, 0, 10, 10)


def test_same_seed_builds_same_tree(scenario_config):
    first = [leaf.bounds for leaf in _leaves(scenario_config, 42)]
    second = [leaf.bounds for leaf in _leaves(scenario_config, 42)]

    assert first == second


def test_internal_nodes_record_split_axis(scenario_config):
    root = SpatialPartitioner(scenario_config, random.Random(1)).partition()

    for node in root.iter_post_order():
        if node.is_leaf:
            assert node.split_vertical is None
        else:
            assert node.split_vertical in (True, False)
            assert len(node.children()) == 2
