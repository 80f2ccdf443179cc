# paintwall/models/invoices.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from paintwall.models.clients import ClientOut, PropertyOut
from paintwall.models.enums import InvoiceStatus, PaymentMethod, ReceiptStatus
from paintwall.models.projects import ProjectOut


class InvoiceItemIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    quantity: float = Field(default=1, ge=0)
    unit_price_cents: int
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)
    sort_order: Optional[int] = None


class InvoiceItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    quantity: Optional[float] = Field(default=None, ge=0)
    unit_price_cents: Optional[int] = None
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)
    sort_order: Optional[int] = None


class InvoiceItemOut(BaseModel):
    id: int
    invoice_id: int
    name: str
    description: Optional[str] = None
    quantity: float
    unit_price_cents: int
    tax_rate_bps: Optional[int] = None
    sort_order: int
    line_subtotal_cents: int
    line_tax_cents: int
    line_total_cents: int

    class Config:
        from_attributes = True


class InvoiceCreate(BaseModel):
    client_id: int
    project_id: Optional[int] = None
    property_id: Optional[int] = None
    invoice_number: Optional[str] = Field(default=None, description="Generated when omitted")
    status: InvoiceStatus = InvoiceStatus.draft
    issued_date: Optional[date] = None
    due_date: Optional[date] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)
    items: List[InvoiceItemIn] = []


class InvoiceUpdate(BaseModel):
    project_id: Optional[int] = None
    property_id: Optional[int] = None
    status: Optional[InvoiceStatus] = None
    issued_date: Optional[date] = None
    due_date: Optional[date] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    tax_rate_bps: Optional[int] = Field(default=None, ge=0)


class InvoiceVoidIn(BaseModel):
    reason: Optional[str] = None


class InvoiceOut(BaseModel):
    id: int
    company_id: int
    client_id: int
    project_id: Optional[int] = None
    property_id: Optional[int] = None
    invoice_number: str
    status: InvoiceStatus
    issued_date: date
    due_date: Optional[date] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    currency: str
    tax_rate_bps: int
    subtotal_cents: int
    tax_cents: int
    total_cents: int
    paid_cents: int
    balance_cents: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvoiceWithItems(InvoiceOut):
    items: List[InvoiceItemOut] = []


class InvoiceFull(InvoiceWithItems):
    client: ClientOut
    property: Optional[PropertyOut] = None
    project: Optional[ProjectOut] = None


class PastDueInvoiceItem(BaseModel):
    id: int
    invoice_number: str
    client_id: int
    client_name: str
    issued_date: date
    due_date: date
    total_cents: int
    paid_cents: int
    balance_cents: int
    currency: str
    status: InvoiceStatus
    days_past_due: int


class PastDueResponse(BaseModel):
    as_of: date
    items: List[PastDueInvoiceItem]
    total: int
    limit: int
    offset: int


class ReceiptCreate(BaseModel):
    client_id: int
    project_id: Optional[int] = None
    invoice_id: Optional[int] = None
    amount_cents: int = Field(..., gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    paid_at: Optional[datetime] = None
    payment_method: PaymentMethod = PaymentMethod.other
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class ReceiptUpdate(BaseModel):
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None


class ReceiptNoteIn(BaseModel):
    note: Optional[str] = None


class ReceiptRefundIn(BaseModel):
    amount_cents: Optional[int] = Field(default=None, gt=0, description="Defaults to the unrefunded remainder")
    note: Optional[str] = None


class ReceiptOut(BaseModel):
    id: int
    company_id: int
    client_id: int
    project_id: Optional[int] = None
    invoice_id: Optional[int] = None
    refund_of_receipt_id: Optional[int] = None
    amount_cents: int
    currency: str
    paid_at: datetime
    payment_method: PaymentMethod
    reference_number: Optional[str] = None
    status: ReceiptStatus
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
