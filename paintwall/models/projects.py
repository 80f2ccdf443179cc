# paintwall/models/projects.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from paintwall.models.enums import EstimateStatus, ProjectStatus, ProjectType, ServiceType, UnitType


class ProjectCreate(BaseModel):
    client_id: int
    property_id: int
    name: str = Field(..., min_length=1)
    project_type: ProjectType = ProjectType.interior_paint
    status: ProjectStatus = ProjectStatus.draft
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scope_notes: Optional[str] = None
    material_cost_cents: int = Field(default=0, ge=0)
    labor_cost_cents: int = Field(default=0, ge=0)
    company_fee_cents: int = Field(default=0, ge=0)
    markup_bps: int = Field(default=0, ge=0)
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)
    labor_hours_estimated: Optional[float] = Field(default=None, ge=0)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    project_type: Optional[ProjectType] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scope_notes: Optional[str] = None
    material_cost_cents: Optional[int] = Field(default=None, ge=0)
    labor_cost_cents: Optional[int] = Field(default=None, ge=0)
    company_fee_cents: Optional[int] = Field(default=None, ge=0)
    markup_bps: Optional[int] = Field(default=None, ge=0)
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)
    labor_hours_estimated: Optional[float] = Field(default=None, ge=0)


class ProjectStatusIn(BaseModel):
    status: ProjectStatus


class ProjectOut(BaseModel):
    id: int
    company_id: int
    client_id: int
    property_id: int
    name: str
    project_type: ProjectType
    status: ProjectStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scope_notes: Optional[str] = None
    material_cost_cents: int
    labor_cost_cents: int
    company_fee_cents: int
    markup_bps: int
    tax_rate_bps: int
    tax_amount_cents: int
    labor_hours_estimated: Optional[float] = None
    invoice_total_cents: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EstimateLineIn(BaseModel):
    service: ServiceType
    unit: UnitType
    quantity: float = Field(..., ge=0)
    room_id: Optional[int] = None
    units_per_hour: Optional[float] = Field(
        default=None, gt=0, description="Overrides the company / template production rate"
    )
    notes: Optional[str] = None


class EstimateLineOut(BaseModel):
    id: int
    estimate_id: int
    room_id: Optional[int] = None
    service: ServiceType
    unit: UnitType
    quantity: float
    units_per_hour: float
    man_hours: float
    labor_price_cents: int
    sort_order: int
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class EstimateOut(BaseModel):
    id: int
    project_id: int
    status: EstimateStatus
    estimated_man_hours: float
    labor_price_cents: int
    material_cost_cents: int
    material_price_cents: int
    tax_cents: int
    total_cents: int
    snapshot_billable_rate_per_hour_cents: int
    snapshot_direct_labor_cost_per_hour_cents: int
    snapshot_overhead_per_hour_cents: int
    snapshot_true_cost_per_hour_cents: int
    snapshot_labor_margin_bps: int
    snapshot_material_margin_bps: int
    updated_at: datetime

    class Config:
        from_attributes = True


class EstimateFull(BaseModel):
    estimate: Optional[EstimateOut] = None
    lines: List[EstimateLineOut] = []


class EstimateStatusIn(BaseModel):
    status: EstimateStatus
