import random

import pytest

from corridor_builder import BEND_X_FIRST, BEND_Y_FIRST, STRAIGHT, CorridorBuilder
from dungeon_geometry import Direction, Rect, TilePos


@pytest.fixture
def builder() -> CorridorBuilder:
    return CorridorBuilder(3, Rect(0, 0, 40, 40))


def test_horizontal_straight_corridor(builder, make_room):
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 20, 2, 10, 10)

    plan = builder.plan_straight(room_a, room_b)

    assert plan is not None
    assert plan.kind == STRAIGHT
    assert plan.door_a == TilePos(9, 5)
    assert plan.side_a is Direction.EAST
    assert plan.door_b == TilePos(20, 5)
    assert plan.side_b is Direction.WEST
    assert len(plan.cells) == 30
    assert {cell.y for cell in plan.cells} == {4, 5, 6}
    assert plan.cells[0].x == 10
    assert plan.cells[-1].x == 19


def test_vertical_straight_corridor_runs_backwards_when_b_is_above(builder, make_room):
    room_a = make_room(0, 2, 20, 10, 10)
    room_b = make_room(1, 0, 0, 10, 10)

    plan = builder.plan_straight(room_a, room_b)

    assert plan is not None
    assert plan.door_a == TilePos(5, 20)
    assert plan.side_a is Direction.NORTH
    assert plan.door_b == TilePos(5, 9)
    assert plan.side_b is Direction.SOUTH
    assert plan.cells[0].y == 19
    assert plan.cells[-1].y == 10


def test_straight_corridor_stays_within_shared_span(make_room):
    builder = CorridorBuilder(5, Rect(0, 0, 40, 40))
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 20, 8, 10, 10)

    plan = builder.plan_straight(room_a, room_b)

    assert plan is not None
    assert {cell.y for cell in plan.cells} == {8, 9}


def test_no_straight_corridor_without_shared_span(builder, make_room):
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 20, 20, 10, 10)

    assert builder.plan_straight(room_a, room_b) is None


def test_bent_corridor_leaves_a_sideways_and_enters_b_from_above(builder, make_room):
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 20, 20, 10, 10)

    plan = builder.plan_bent(room_a, room_b, 0)

    assert plan is not None
    assert plan.kind == BEND_X_FIRST
    assert plan.door_a == TilePos(9, 5)
    assert plan.side_a is Direction.EAST
    assert plan.door_b == TilePos(25, 20)
    assert plan.side_b is Direction.NORTH
    assert len(plan.cells) == 90
    assert TilePos(25, 19) in plan.cells
    assert TilePos(10, 5) in plan.cells


def test_bent_corridor_is_rejected_when_bend_would_start_inside_room(builder, make_room):
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 2, 20, 10, 10)

    assert builder.plan_bent(room_a, room_b, 0) is None


def test_diagonal_rooms_get_both_bends(builder, make_room):
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 20, 20, 10, 10)

    plans = builder.plan_corridors(room_a, room_b, random.Random(3))

    assert sorted(plan.kind for plan in plans) == sorted([BEND_X_FIRST, BEND_Y_FIRST])


def test_straight_path_is_offered_first(builder, make_room):
    room_a = make_room(0, 0, 0, 10, 10)
    room_b = make_room(1, 20, 2, 10, 10)

    plans = builder.plan_corridors(room_a, room_b, random.Random(0))

    assert plans[0].is_straight


@pytest.mark.parametrize("axis", [0, 1])
def test_corridor_cells_never_touch_end_rooms(builder, make_room, axis):
    room_a = make_room(0, 3, 4, 9, 7)
    room_b = make_room(1, 22, 25, 11, 8)

    plan = builder.plan_bent(room_a, room_b, axis)

    assert plan is not None
    for cell in plan.cells:
        assert not room_a.bounds.contains(cell)
        assert not room_b.bounds.contains(cell)
        assert Rect(0, 0, 40, 40).contains(cell)
    assert room_a.bounds.is_on_edge(plan.door_a)
    assert room_b.bounds.is_on_edge(plan.door_b)


def test_corridor_width_must_be_positive():
    with pytest.raises(ValueError):
        CorridorBuilder(0, Rect(0, 0, 10, 10))
