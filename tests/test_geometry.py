import pytest

from dungeon_geometry import (
    Direction,
    Rect,
    TilePos,
    distance_to_region_edge,
    overlap_interval,
)


def test_direction_is_vertical_only_for_north_and_south():
    assert Direction.NORTH.is_vertical
    assert Direction.SOUTH.is_vertical
    assert not Direction.EAST.is_vertical
    assert not Direction.WEST.is_vertical


@pytest.mark.parametrize("vertical,offset", [(True, 4), (False, 7)])
def test_split_halves_tessellate_parent(vertical, offset):
    rect = Rect(2, 3, 10, 12)
    first, second = rect.split(vertical, offset)

    assert first.area + second.area == rect.area
    assert not first.overlaps(second)
    assert rect.contains_rect(first)
    assert rect.contains_rect(second)


@pytest.mark.parametrize("offset", [0, 10, -1])
def test_split_rejects_offsets_outside_rect(offset):
    with pytest.raises(ValueError):
        Rect(0, 0, 10, 10).split(True, offset)


def test_overlaps_treats_shared_edges_as_disjoint():
    assert not Rect(0, 0, 5, 5).overlaps(Rect(5, 0, 5, 5))
    assert Rect(0, 0, 5, 5).overlaps(Rect(4, 4, 5, 5))


def test_gap_to_is_manhattan_between_edges():
    assert Rect(0, 0, 5, 5).gap_to(Rect(8, 0, 5, 5)) == 3
    assert Rect(0, 0, 5, 5).gap_to(Rect(8, 9, 5, 5)) == 7
    assert Rect(0, 0, 5, 5).gap_to(Rect(5, 0, 5, 5)) == 0


def test_overlap_interval_returns_none_for_disjoint_spans():
    assert overlap_interval((0, 10), (5, 20)) == (5, 10)
    assert overlap_interval((0, 5), (5, 10)) is None


def test_center_and_edges():
    rect = Rect(10, 20, 6, 4)

    assert rect.center == TilePos(13, 22)
    assert rect.is_on_edge(TilePos(10, 21))
    assert rect.is_on_edge(TilePos(15, 23))
    assert not rect.is_on_edge(TilePos(12, 21))
    assert not rect.is_on_edge(TilePos(16, 21))


@pytest.mark.parametrize(
    "direction,expected",
    [
        (Direction.NORTH, 5),
        (Direction.SOUTH, 14),
        (Direction.WEST, 3),
        (Direction.EAST, 36),
    ],
)
def test_distance_to_region_edge(direction, expected):
    assert distance_to_region_edge(TilePos(3, 5), direction, 40, 20) == expected


def test_iter_tiles_covers_area():
    tiles = list(Rect(1, 1, 3, 2).iter_tiles())

    assert len(tiles) == 6
    assert tiles[0] == TilePos(1, 1)
    assert tiles[-1] == TilePos(3, 2)
