# paintwall/models/calculators.py

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, NonNegativeFloat

from paintwall.estimating.measurement import MeasurementUnit


class RoomDimensionsIn(BaseModel):
    dimensions: str = Field(..., description='Floor plan, e.g. "12 x 14"')
    room_height: float = Field(default=8, gt=0)
    unit: MeasurementUnit = MeasurementUnit.ft


class RoomDimensionsOut(BaseModel):
    length: float
    width: float
    floor_area: float
    wall_area: float
    unit: MeasurementUnit
    floor_area_sqft: float
    wall_area_sqft: float


class PaintSurfaceIn(BaseModel):
    surface: float = Field(..., ge=0)
    coats: int = Field(default=2, ge=0)
    paint_base: Optional[str] = None


class GallonsIn(BaseModel):
    unit: MeasurementUnit = MeasurementUnit.ft
    sections: Dict[str, List[PaintSurfaceIn]]


class PaintBaseTotal(BaseModel):
    paint_base: Optional[str] = None
    surface: float


class GallonsOut(BaseModel):
    total_gallons: int
    gallons_by_section: Dict[str, int]
    surface_by_paint_base: Dict[str, List[PaintBaseTotal]]
    total_hours: float
    total_days: int
    section_names: Dict[str, str]


class PaintingHoursIn(BaseModel):
    wall_sqft: float = Field(default=0, ge=0)
    ceiling_sqft: float = Field(default=0, ge=0)
    trim_linear_ft: float = Field(default=0, ge=0)
    wall_coats: int = Field(default=2, ge=0)
    ceiling_coats: int = Field(default=1, ge=0)
    trim_coats: int = Field(default=1, ge=0)
    wall_speed: float = Field(default=150, gt=0)
    ceiling_speed: float = Field(default=120, gt=0)
    trim_speed: float = Field(default=50, gt=0)
    efficiency: float = Field(default=1, gt=0)
    hours_per_day: float = Field(default=8, gt=0)


class PaintingHoursOut(BaseModel):
    hours: float
    days: int


class LaborMaterialIn(BaseModel):
    name: Optional[str] = None
    quantity: float = Field(..., ge=0)
    unit: str
    price: float = Field(..., ge=0)


class LaborTaskIn(BaseModel):
    name: str = Field(..., min_length=1)
    hours: float = Field(..., ge=0)
    rate: float = Field(..., ge=0)
    description: Optional[str] = None
    materials: List[LaborMaterialIn] = []


class RoomFeatureIn(BaseModel):
    type: str
    name: Optional[str] = None
    dimensions: str = ""
    include_material_costs: bool = True
    labor: List[LaborTaskIn] = []


class LaborRoomIn(BaseModel):
    name: str = Field(..., min_length=1)
    include_material_costs: bool = True
    features: Dict[str, List[RoomFeatureIn]] = {}


class TaskSelectionIn(BaseModel):
    catalog: List[LaborTaskIn]
    selected: List[str]
    hours_override: Dict[str, NonNegativeFloat] = {}
    include_materials: bool = True


class ProjectLaborIn(BaseModel):
    rooms: List[LaborRoomIn]


class TaskCostOut(BaseModel):
    name: str
    hours: float
    labor_cost: float
    material_cost: float
    total_cost: float


class CostSummaryOut(BaseModel):
    total_cost: float
    total_labor_cost: float
    total_material_cost: float
    task_breakdown: List[TaskCostOut]


class DrywallIn(BaseModel):
    repair_type: Optional[str] = None
    size: Optional[str] = None
    orientation: Optional[str] = None
    access: Optional[str] = None
    finish: Optional[str] = None
    paint_scope: Optional[str] = None
    protection: Optional[str] = None
    modifiers: List[str] = []
    quantity: int = 1
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)


class DrywallLineOut(BaseModel):
    title: str
    description: str
    amount: int


class DrywallOut(BaseModel):
    sku: str
    sku_labels: str
    bundle_id: str
    bundle_title: str
    bundle_steps: List[str]
    labor_subtotal: int
    modifiers_total: int
    subtotal: int
    tax: int
    total: int
    items: List[DrywallLineOut]


class ConvertIn(BaseModel):
    value: float
    from_unit: MeasurementUnit
    to_unit: MeasurementUnit
    is_area: bool = False


class ConvertOut(BaseModel):
    value: float
    unit: MeasurementUnit
    display: str
