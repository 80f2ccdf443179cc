# paintwall/models/finance.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from paintwall.models.enums import (
    AccountType,
    AssetStatus,
    DocumentType,
    TransactionSource,
    VendorType,
)


class VendorCreate(BaseModel):
    company_id: int
    name: str = Field(..., min_length=1)
    type: VendorType = VendorType.supplier
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    tax_id_last4: Optional[str] = Field(default=None, pattern=r"^\d{4}$")
    notes: Optional[str] = None


class VendorUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[VendorType] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    tax_id_last4: Optional[str] = Field(default=None, pattern=r"^\d{4}$")
    notes: Optional[str] = None


class VendorOut(BaseModel):
    id: int
    company_id: int
    name: str
    type: VendorType
    email: Optional[str] = None
    phone: Optional[str] = None
    tax_id_last4: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class AccountCreate(BaseModel):
    company_id: int
    name: str = Field(..., min_length=1)
    type: AccountType
    code: Optional[str] = None
    description: Optional[str] = None
    parent_account_id: Optional[int] = None
    is_active: bool = True


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[AccountType] = None
    code: Optional[str] = None
    description: Optional[str] = None
    parent_account_id: Optional[int] = None
    is_active: Optional[bool] = None


class AccountOut(BaseModel):
    id: int
    company_id: int
    parent_account_id: Optional[int] = None
    code: Optional[str] = None
    name: str
    type: AccountType
    description: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class AssetCreate(BaseModel):
    company_id: int
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    purchase_date: date
    purchase_price_cents: int = Field(..., ge=0)
    status: AssetStatus = AssetStatus.active
    vendor_id: Optional[int] = None
    transaction_id: Optional[int] = None
    notes: Optional[str] = None


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price_cents: Optional[int] = Field(default=None, ge=0)
    status: Optional[AssetStatus] = None
    vendor_id: Optional[int] = None
    transaction_id: Optional[int] = None
    notes: Optional[str] = None


class AssetOut(BaseModel):
    id: int
    company_id: int
    vendor_id: Optional[int] = None
    transaction_id: Optional[int] = None
    name: str
    category: Optional[str] = None
    purchase_date: date
    purchase_price_cents: int
    status: AssetStatus
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class TransactionCreate(BaseModel):
    company_id: int
    account_id: int
    transaction_date: date
    amount_cents: int
    description: str = Field(..., min_length=1)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    memo: Optional[str] = None
    reference_number: Optional[str] = None
    external_id: Optional[str] = None
    vendor_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    invoice_id: Optional[int] = None


class TransactionUpdate(BaseModel):
    account_id: Optional[int] = None
    transaction_date: Optional[date] = None
    amount_cents: Optional[int] = None
    description: Optional[str] = Field(default=None, min_length=1)
    memo: Optional[str] = None
    reference_number: Optional[str] = None
    vendor_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None


class TransactionOut(BaseModel):
    id: int
    company_id: int
    account_id: int
    vendor_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    invoice_id: Optional[int] = None
    receipt_id: Optional[int] = None
    transaction_date: date
    posted_at: datetime
    amount_cents: int
    currency: str
    description: str
    memo: Optional[str] = None
    reference_number: Optional[str] = None
    external_id: Optional[str] = None
    source: TransactionSource

    class Config:
        from_attributes = True


class DocumentOut(BaseModel):
    id: int
    company_id: int
    transaction_id: Optional[int] = None
    vendor_id: Optional[int] = None
    project_id: Optional[int] = None
    document_type: DocumentType
    file_name: str
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    description: Optional[str] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True


class TransactionWithDocuments(TransactionOut):
    documents: List[DocumentOut] = []


class CategoryBreakdownOut(BaseModel):
    category: str
    total_cents: int
    count: int
    percentage: float


class FinancialSummaryOut(BaseModel):
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    total_revenue_cents: int
    total_cogs_cents: int
    total_operating_expenses_cents: int
    net_profit_cents: int
    owner_contributions_cents: int
    owner_draws_cents: int
    uncategorized_total_cents: int
    transaction_count: int
    operating_expenses: List[CategoryBreakdownOut]
    owner_contributions: List[CategoryBreakdownOut]
    owner_draws: List[CategoryBreakdownOut]


class DashboardMetricsOut(BaseModel):
    year: int
    jobs_completed: int
    amount_earned_cents: int
    number_of_customers: int
    pending_work: int
    labor_cost_cents: int
    taxes_cents: int
    average_amount_spent_by_client_cents: int
