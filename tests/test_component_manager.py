import pytest

from component_manager import ComponentManager, DisjointSetUnion


def test_union_keeps_smallest_id_as_root():
    dsu = DisjointSetUnion()

    dsu.union(5, 3)
    dsu.union(3, 9)

    assert dsu.find(9) == 3
    assert dsu.find(5) == 3


def test_connect_returns_canonical_root():
    manager = ComponentManager([0, 1, 4])

    assert manager.connect(4, 1) == 1
    assert manager.connect(1, 0) == 0


def test_register_rejects_negative_room_ids():
    with pytest.raises(ValueError):
        ComponentManager([-3])


def test_component_summary_and_sizes_merge_members():
    manager = ComponentManager([0, 1, 2])

    manager.connect(0, 1)

    assert manager.component_summary() == {0: [0, 1], 2: [2]}
    assert manager.component_sizes() == {0: 2, 2: 1}
    assert manager.total_components() == 2


def test_has_single_component_reflects_connectivity():
    manager = ComponentManager([0, 1, 2])
    assert not manager.has_single_component()

    manager.connect(0, 1)
    manager.connect(2, 1)

    assert manager.has_single_component()
    assert manager.total_components() == 1
