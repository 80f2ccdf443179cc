# tests/test_labor.py

import pytest

from paintwall.estimating.labor import (
    LaborMaterial,
    LaborTask,
    Room,
    RoomFeature,
    project_cost,
    room_cost,
    selected_tasks_cost,
    task_cost,
)


def _prime():
    return LaborTask("Prime", hours=2, rate=50, materials=[LaborMaterial(2, "gal", 30)])


def _door():
    return LaborTask("Paint door", hours=1, rate=40, materials=[LaborMaterial(1, "qt", 15)])


def test_task_cost():
    cost = task_cost(_prime(), include_materials=True)
    assert (cost.labor_cost, cost.material_cost, cost.total_cost) == (100, 60, 160)
    assert task_cost(_prime(), include_materials=False).total_cost == 100


def test_task_cost_hours_override():
    assert task_cost(_prime(), True, hours=3).labor_cost == 150
    assert task_cost(_prime(), True, hours=0).hours == 2


def test_materials_need_room_and_feature_opt_in():
    room = Room(
        "Living",
        features={
            "walls": [RoomFeature("walls", include_material_costs=False, labor=[_prime()])],
            "doors": [RoomFeature("doors", labor=[_door()])],
        },
    )
    summary = room_cost(room)
    assert summary.total_labor_cost == 140
    assert summary.total_material_cost == 15
    assert summary.total_cost == 155
    # walked in feature-type order: doors come before walls
    assert [t.name for t in summary.task_breakdown] == ["Paint door", "Prime"]

    room.include_material_costs = False
    assert room_cost(room).total_material_cost == 0


def test_unknown_feature_type():
    with pytest.raises(ValueError):
        room_cost(Room("Garage", features={"roof": []}))


def test_project_cost_sums_rooms():
    rooms = [
        Room("A", features={"walls": [RoomFeature("walls", labor=[_prime()])]}),
        Room("B", features={"doors": [RoomFeature("doors", labor=[_door(), _door()])]}),
    ]
    summary = project_cost(rooms)
    assert summary.total_cost == 160 + 55 + 55
    assert len(summary.task_breakdown) == 3


def test_selected_tasks_cost():
    summary = selected_tasks_cost(
        [_prime(), _door()],
        ["Prime", "Missing"],
        hours_override={"Prime": 0},
        include_materials=False,
    )
    assert [t.name for t in summary.task_breakdown] == ["Prime"]
    assert summary.total_cost == 100
