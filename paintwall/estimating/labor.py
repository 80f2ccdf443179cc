# paintwall/estimating/labor.py
"""
Labor and material cost roll-up for interior estimates.

A project is a list of rooms; each room holds feature collections (walls,
doors, baseboard, ...) and every feature carries the labor tasks needed to
finish it. Material costs are included only when the room AND the feature
both opt in.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

FEATURE_TYPES = (
    "ceilings",
    "flooring",
    "cabinetry",
    "outlets",
    "switches",
    "fixtures",
    "trim",
    "windows",
    "doors",
    "walls",
    "closets",
    "crown_molding",
    "chair_rail",
    "baseboard",
    "wainscoting",
    "other",
)


@dataclass
class LaborMaterial:
    quantity: float
    unit: str
    price: float
    name: Optional[str] = None

    @property
    def cost(self) -> float:
        return self.quantity * self.price


@dataclass
class LaborTask:
    name: str
    hours: float
    rate: float
    materials: List[LaborMaterial] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def material_cost(self) -> float:
        return sum(m.cost for m in self.materials)


@dataclass
class RoomFeature:
    type: str
    dimensions: str = ""
    name: Optional[str] = None
    include_material_costs: bool = True
    labor: List[LaborTask] = field(default_factory=list)


@dataclass
class Room:
    name: str
    include_material_costs: bool = True
    features: Dict[str, List[RoomFeature]] = field(default_factory=dict)


@dataclass
class TaskCost:
    name: str
    hours: float
    labor_cost: float
    material_cost: float
    total_cost: float


@dataclass
class CostSummary:
    total_cost: float
    total_labor_cost: float
    total_material_cost: float
    task_breakdown: List[TaskCost]


def task_cost(task: LaborTask, include_materials: bool, hours: Optional[float] = None) -> TaskCost:
    hours = task.hours if not hours else hours
    labor = hours * task.rate
    material = task.material_cost if include_materials else 0.0
    return TaskCost(
        name=task.name,
        hours=hours,
        labor_cost=labor,
        material_cost=material,
        total_cost=labor + material,
    )


def _summarize(breakdown: List[TaskCost]) -> CostSummary:
    labor = sum(t.labor_cost for t in breakdown)
    material = sum(t.material_cost for t in breakdown)
    return CostSummary(
        total_cost=labor + material,
        total_labor_cost=labor,
        total_material_cost=material,
        task_breakdown=breakdown,
    )


def room_cost(room: Room) -> CostSummary:
    unknown = set(room.features) - set(FEATURE_TYPES)
    if unknown:
        raise ValueError(f"Unknown feature types in room {room.name!r}: {sorted(unknown)}")

    breakdown = []
    for feature_type in FEATURE_TYPES:
        for feature in room.features.get(feature_type, []):
            with_materials = room.include_material_costs and feature.include_material_costs
            breakdown.extend(task_cost(task, with_materials) for task in feature.labor)
    return _summarize(breakdown)


def project_cost(rooms: Iterable[Room]) -> CostSummary:
    breakdown: List[TaskCost] = []
    for room in rooms:
        breakdown.extend(room_cost(room).task_breakdown)
    return _summarize(breakdown)


def selected_tasks_cost(
    catalog: Iterable[LaborTask],
    selected: Iterable[str],
    hours_override: Optional[Mapping[str, float]] = None,
    include_materials: bool = True,
) -> CostSummary:
    """
    Cost of the tasks picked from a task catalog by name.

    Names missing from the catalog are skipped. An hours override of 0 or a
    missing override falls back to the catalog hours.
    """
    by_name = {task.name: task for task in catalog}
    overrides = hours_override or {}
    breakdown = [
        task_cost(by_name[name], include_materials, overrides.get(name))
        for name in selected
        if name in by_name
    ]
    return _summarize(breakdown)
