# paintwall/models/enums.py

from enum import Enum


class AccountType(str, Enum):
    revenue = "revenue"
    cogs = "cogs"
    expense = "expense"
    asset = "asset"
    liability = "liability"
    equity = "equity"


class AssetStatus(str, Enum):
    active = "active"
    sold = "sold"
    disposed = "disposed"


class ClientStatus(str, Enum):
    lead = "lead"
    active = "active"
    inactive = "inactive"


class ClientType(str, Enum):
    person = "person"
    business = "business"


class DocumentType(str, Enum):
    expense_receipt = "expense_receipt"
    supplier_invoice = "supplier_invoice"
    client_payment_proof = "client_payment_proof"
    bank_statement = "bank_statement"
    tax_document = "tax_document"
    asset_purchase = "asset_purchase"
    warranty = "warranty"
    other = "other"


class EstimateStatus(str, Enum):
    draft = "draft"
    final = "final"


class InvoiceStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    partially_paid = "partially_paid"
    paid = "paid"
    overdue = "overdue"
    void = "void"


class PaymentMethod(str, Enum):
    cash = "cash"
    check = "check"
    zelle = "zelle"
    cash_app = "cash_app"
    venmo = "venmo"
    credit_card = "credit_card"
    debit_card = "debit_card"
    ach = "ach"
    wire = "wire"
    other = "other"


class ProjectStatus(str, Enum):
    draft = "draft"
    scheduled = "scheduled"
    in_progress = "in_progress"
    on_hold = "on_hold"
    completed = "completed"
    canceled = "canceled"


class ProjectType(str, Enum):
    interior_paint = "interior_paint"
    exterior_paint = "exterior_paint"
    drywall_repair = "drywall_repair"
    trim_paint = "trim_paint"
    cabinet_paint = "cabinet_paint"
    wallpaper = "wallpaper"
    other = "other"


class PropertyType(str, Enum):
    residential = "residential"
    commercial = "commercial"


class ReceiptStatus(str, Enum):
    posted = "posted"
    refunded = "refunded"
    voided = "voided"


class ServiceType(str, Enum):
    interior_paint = "interior_paint"
    exterior_paint = "exterior_paint"
    drywall_patch = "drywall_patch"
    drywall_finish = "drywall_finish"
    trim_paint = "trim_paint"
    door_paint = "door_paint"
    cabinet_paint = "cabinet_paint"


class TransactionSource(str, Enum):
    manual = "manual"
    receipt_posted = "receipt_posted"
    receipt_refunded = "receipt_refunded"
    receipt_voided = "receipt_voided"
    invoice_created = "invoice_created"
    invoice_updated = "invoice_updated"
    import_ = "import"


class UnitType(str, Enum):
    sqft_wall = "sqft_wall"
    sqft_ceiling = "sqft_ceiling"
    sqft_floor = "sqft_floor"
    linear_ft_trim = "linear_ft_trim"
    each_door = "each_door"
    each_patch = "each_patch"


class VendorType(str, Enum):
    supplier = "supplier"
    subcontractor = "subcontractor"
    service = "service"
    other = "other"


def values(enum_cls) -> list:
    return [member.value for member in enum_cls]
