# paintwall/models/companies.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from paintwall.models.enums import ServiceType, UnitType


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    billing_email: Optional[EmailStr] = None
    phone: Optional[str] = None


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    billing_email: Optional[EmailStr] = None
    phone: Optional[str] = None


class CompanyOut(BaseModel):
    id: int
    name: str
    billing_email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FinancialProfileIn(BaseModel):
    currency: str = Field(default="USD", min_length=3, max_length=3)
    annual_overhead_cents: int = Field(default=0, ge=0)
    field_employee_count: int = Field(default=1, ge=0)
    weeks_per_year: int = Field(default=48, ge=0, le=52)
    hours_per_week: float = Field(default=40, ge=0, le=168)
    avg_wage_cents: int = Field(default=2500, ge=0)
    labor_burden_bps: int = Field(default=2000, ge=0)
    target_profit_margin_bps: int = Field(default=2000, ge=0)
    material_profit_margin_bps: int = Field(default=1500, ge=0)


class FinancialProfileOut(FinancialProfileIn):
    company_id: int
    sellable_man_hours: float
    overhead_per_hour_cents: int
    direct_labor_cost_per_hour_cents: int
    true_cost_per_hour_cents: int
    billable_rate_per_hour_cents: int
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductionRateIn(BaseModel):
    service: ServiceType
    unit: UnitType
    units_per_hour: float = Field(..., gt=0)
    notes: Optional[str] = None


class ProductionRateOut(ProductionRateIn):
    id: int
    company_id: int

    class Config:
        from_attributes = True


class RateTemplateIn(ProductionRateIn):
    label: str = Field(..., min_length=1)


class RateTemplateOut(RateTemplateIn):
    id: int

    class Config:
        from_attributes = True
