# paintwall/db/schema.py

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    false,
    func,
    true,
)

from paintwall.models import enums

metadata = MetaData()


def _one_of(column: str, enum_cls, name: str) -> CheckConstraint:
    allowed = ", ".join(f"'{v}'" for v in enums.values(enum_cls))
    return CheckConstraint(f"{column} IN ({allowed})", name=name)


def _timestamps():
    return [
        Column("created_at", DateTime, nullable=False, server_default=func.now()),
        Column(
            "updated_at",
            DateTime,
            nullable=False,
            server_default=func.now(),
            onupdate=func.now(),
        ),
    ]


def _company_fk():
    return Column(
        "company_id",
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


companies = Table(
    "companies",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("billing_email", String),
    Column("phone", String),
    *_timestamps(),
)

clients = Table(
    "clients",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("display_name", String, nullable=False),
    Column("client_type", String, nullable=False, server_default="person"),
    Column("status", String, nullable=False, server_default="active"),
    Column("primary_email", String),
    Column("primary_phone", String),
    # lower-cased email / digits-only phone, maintained on every write
    Column("normalized_email", String, index=True),
    Column("normalized_phone", String, index=True),
    Column("notes", Text),
    *_timestamps(),
    _one_of("client_type", enums.ClientType, "ck_clients_client_type"),
    _one_of("status", enums.ClientStatus, "ck_clients_status"),
)

properties = Table(
    "properties",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("client_id", Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("property_type", String, nullable=False, server_default="residential"),
    Column("address_line1", String, nullable=False),
    Column("address_line2", String),
    Column("city", String, nullable=False),
    Column("state", String, nullable=False),
    Column("zip", String, nullable=False),
    Column("country", String, nullable=False, server_default="US"),
    *_timestamps(),
    _one_of("property_type", enums.PropertyType, "ck_properties_property_type"),
)

projects = Table(
    "projects",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("client_id", Integer, ForeignKey("clients.id"), nullable=False, index=True),
    Column("property_id", Integer, ForeignKey("properties.id"), nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("project_type", String, nullable=False, server_default="interior_paint"),
    Column("status", String, nullable=False, server_default="draft"),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("scope_notes", Text),
    Column("material_cost_cents", Integer, nullable=False, server_default="0"),
    Column("labor_cost_cents", Integer, nullable=False, server_default="0"),
    Column("company_fee_cents", Integer, nullable=False, server_default="0"),
    Column("markup_bps", Integer, nullable=False, server_default="0"),
    Column("tax_rate_bps", Integer, nullable=False, server_default="0"),
    Column("tax_amount_cents", Integer, nullable=False, server_default="0"),
    Column("labor_hours_estimated", Float),
    Column("invoice_total_cents", Integer),
    *_timestamps(),
    _one_of("project_type", enums.ProjectType, "ck_projects_project_type"),
    _one_of("status", enums.ProjectStatus, "ck_projects_status"),
    CheckConstraint("material_cost_cents >= 0", name="ck_projects_material_nonneg"),
    CheckConstraint("labor_cost_cents >= 0", name="ck_projects_labor_nonneg"),
    CheckConstraint("company_fee_cents >= 0", name="ck_projects_fee_nonneg"),
)

property_rooms = Table(
    "property_rooms",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("property_id", Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="SET NULL"), index=True),
    Column("name", String, nullable=False),
    Column("description", Text),
    Column("level", Integer, nullable=False, server_default="1"),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("room_height_ft", Float),
    Column("ceiling_height_ft", Float),
    Column("floor_area_sqft", Float),
    Column("ceiling_area_sqft", Float),
    Column("wall_perimeter_ft", Float),
    Column("wall_area_sqft", Float),
    Column("openings_area_sqft", Float),
    Column("paint_walls", Boolean, nullable=False, server_default=true()),
    Column("paint_ceiling", Boolean, nullable=False, server_default=false()),
    Column("paint_trim", Boolean, nullable=False, server_default=false()),
    Column("paint_doors", Boolean, nullable=False, server_default=false()),
    Column("notes_customer", Text),
    Column("notes_internal", Text),
    *_timestamps(),
)

invoices = Table(
    "invoices",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("client_id", Integer, ForeignKey("clients.id"), nullable=False, index=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="SET NULL"), index=True),
    Column("property_id", Integer, ForeignKey("properties.id", ondelete="SET NULL")),
    Column("invoice_number", String, nullable=False),
    Column("status", String, nullable=False, server_default="draft"),
    Column("issued_date", Date, nullable=False),
    Column("due_date", Date),
    Column("terms", String),
    Column("notes", Text),
    Column("currency", String(3), nullable=False, server_default="USD"),
    Column("tax_rate_bps", Integer, nullable=False, server_default="0"),
    Column("subtotal_cents", Integer, nullable=False, server_default="0"),
    Column("tax_cents", Integer, nullable=False, server_default="0"),
    Column("total_cents", Integer, nullable=False, server_default="0"),
    Column("paid_cents", Integer, nullable=False, server_default="0"),
    Column("balance_cents", Integer, nullable=False, server_default="0"),
    *_timestamps(),
    UniqueConstraint("company_id", "invoice_number", name="uq_invoices_company_number"),
    _one_of("status", enums.InvoiceStatus, "ck_invoices_status"),
    CheckConstraint("tax_rate_bps >= 0", name="ck_invoices_tax_rate_nonneg"),
)

invoice_items = Table(
    "invoice_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("invoice_id", Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("description", Text),
    Column("quantity", Float, nullable=False, server_default="1"),
    Column("unit_price_cents", Integer, nullable=False),
    Column("tax_rate_bps", Integer),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("line_subtotal_cents", Integer, nullable=False, server_default="0"),
    Column("line_tax_cents", Integer, nullable=False, server_default="0"),
    Column("line_total_cents", Integer, nullable=False, server_default="0"),
    *_timestamps(),
    CheckConstraint("quantity >= 0", name="ck_invoice_items_quantity_nonneg"),
)

receipts = Table(
    "receipts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("client_id", Integer, ForeignKey("clients.id"), nullable=False, index=True),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="SET NULL")),
    Column("invoice_id", Integer, ForeignKey("invoices.id", ondelete="SET NULL"), index=True),
    # set on refund rows: the posted receipt the money was returned against
    Column("refund_of_receipt_id", Integer, ForeignKey("receipts.id", ondelete="CASCADE"), index=True),
    Column("amount_cents", Integer, nullable=False),
    Column("currency", String(3), nullable=False, server_default="USD"),
    Column("paid_at", DateTime, nullable=False),
    Column("payment_method", String, nullable=False, server_default="other"),
    Column("reference_number", String),
    Column("status", String, nullable=False, server_default="posted"),
    Column("notes", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("amount_cents > 0", name="ck_receipts_amount_positive"),
    _one_of("payment_method", enums.PaymentMethod, "ck_receipts_payment_method"),
    _one_of("status", enums.ReceiptStatus, "ck_receipts_status"),
)

vendors = Table(
    "vendors",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("name", String, nullable=False),
    Column("type", String, nullable=False, server_default="supplier"),
    Column("email", String),
    Column("phone", String),
    Column("tax_id_last4", String(4)),
    Column("notes", Text),
    *_timestamps(),
    _one_of("type", enums.VendorType, "ck_vendors_type"),
)

accounts = Table(
    "accounts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("parent_account_id", Integer, ForeignKey("accounts.id", ondelete="SET NULL")),
    Column("code", String),
    Column("name", String, nullable=False),
    Column("type", String, nullable=False),
    Column("description", Text),
    Column("is_active", Boolean, nullable=False, server_default=true()),
    *_timestamps(),
    _one_of("type", enums.AccountType, "ck_accounts_type"),
)

financial_transactions = Table(
    "financial_transactions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("account_id", Integer, ForeignKey("accounts.id"), nullable=False, index=True),
    Column("vendor_id", Integer, ForeignKey("vendors.id", ondelete="SET NULL")),
    Column("client_id", Integer, ForeignKey("clients.id", ondelete="SET NULL")),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="SET NULL")),
    Column("invoice_id", Integer, ForeignKey("invoices.id", ondelete="SET NULL")),
    Column("receipt_id", Integer, ForeignKey("receipts.id", ondelete="SET NULL")),
    Column("transaction_date", Date, nullable=False, index=True),
    Column("posted_at", DateTime, nullable=False, server_default=func.now()),
    # signed: income positive, spending negative
    Column("amount_cents", Integer, nullable=False),
    Column("currency", String(3), nullable=False, server_default="USD"),
    Column("description", String, nullable=False),
    Column("memo", Text),
    Column("reference_number", String),
    Column("external_id", String),
    Column("source", String, nullable=False, server_default="manual"),
    *_timestamps(),
    UniqueConstraint("company_id", "external_id", name="uq_transactions_company_external_id"),
    _one_of("source", enums.TransactionSource, "ck_transactions_source"),
)

assets = Table(
    "assets",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("vendor_id", Integer, ForeignKey("vendors.id", ondelete="SET NULL")),
    Column("transaction_id", Integer, ForeignKey("financial_transactions.id", ondelete="SET NULL")),
    Column("name", String, nullable=False),
    Column("category", String),
    Column("purchase_date", Date, nullable=False),
    Column("purchase_price_cents", Integer, nullable=False),
    Column("status", String, nullable=False, server_default="active"),
    Column("notes", Text),
    *_timestamps(),
    _one_of("status", enums.AssetStatus, "ck_assets_status"),
    CheckConstraint("purchase_price_cents >= 0", name="ck_assets_price_nonneg"),
)

financial_documents = Table(
    "financial_documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("transaction_id", Integer, ForeignKey("financial_transactions.id", ondelete="SET NULL")),
    Column("vendor_id", Integer, ForeignKey("vendors.id", ondelete="SET NULL")),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="SET NULL")),
    Column("document_type", String, nullable=False, server_default="other"),
    Column("file_name", String, nullable=False),
    Column("file_path", String, nullable=False),
    Column("mime_type", String),
    Column("size_bytes", Integer),
    Column("description", Text),
    Column("uploaded_at", DateTime, nullable=False, server_default=func.now()),
    _one_of("document_type", enums.DocumentType, "ck_documents_document_type"),
)

company_financial_profiles = Table(
    "company_financial_profiles",
    metadata,
    Column("company_id", Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True),
    Column("currency", String(3), nullable=False, server_default="USD"),
    Column("annual_overhead_cents", Integer, nullable=False, server_default="0"),
    Column("field_employee_count", Integer, nullable=False, server_default="1"),
    Column("weeks_per_year", Integer, nullable=False, server_default="48"),
    Column("hours_per_week", Float, nullable=False, server_default="40"),
    Column("avg_wage_cents", Integer, nullable=False, server_default="2500"),
    Column("labor_burden_bps", Integer, nullable=False, server_default="2000"),
    Column("target_profit_margin_bps", Integer, nullable=False, server_default="2000"),
    Column("material_profit_margin_bps", Integer, nullable=False, server_default="1500"),
    # derived by recalc_company_gpp_rates
    Column("sellable_man_hours", Float, nullable=False, server_default="0"),
    Column("overhead_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("direct_labor_cost_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("true_cost_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("billable_rate_per_hour_cents", Integer, nullable=False, server_default="0"),
    *_timestamps(),
)

production_rate_templates = Table(
    "production_rate_templates",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("label", String, nullable=False),
    Column("service", String, nullable=False),
    Column("unit", String, nullable=False),
    Column("units_per_hour", Float, nullable=False),
    Column("notes", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    _one_of("service", enums.ServiceType, "ck_rate_templates_service"),
    _one_of("unit", enums.UnitType, "ck_rate_templates_unit"),
    CheckConstraint("units_per_hour > 0", name="ck_rate_templates_positive"),
)

company_production_rates = Table(
    "company_production_rates",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("service", String, nullable=False),
    Column("unit", String, nullable=False),
    Column("units_per_hour", Float, nullable=False),
    Column("notes", Text),
    *_timestamps(),
    UniqueConstraint("company_id", "service", "unit", name="uq_production_rates_company_service_unit"),
    _one_of("service", enums.ServiceType, "ck_production_rates_service"),
    _one_of("unit", enums.UnitType, "ck_production_rates_unit"),
    CheckConstraint("units_per_hour > 0", name="ck_production_rates_positive"),
)

project_estimates = Table(
    "project_estimates",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True),
    Column("status", String, nullable=False, server_default="draft"),
    Column("estimated_man_hours", Float, nullable=False, server_default="0"),
    Column("labor_price_cents", Integer, nullable=False, server_default="0"),
    Column("material_cost_cents", Integer, nullable=False, server_default="0"),
    Column("material_price_cents", Integer, nullable=False, server_default="0"),
    Column("tax_cents", Integer, nullable=False, server_default="0"),
    Column("total_cents", Integer, nullable=False, server_default="0"),
    Column("snapshot_billable_rate_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("snapshot_direct_labor_cost_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("snapshot_overhead_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("snapshot_true_cost_per_hour_cents", Integer, nullable=False, server_default="0"),
    Column("snapshot_labor_margin_bps", Integer, nullable=False, server_default="0"),
    Column("snapshot_material_margin_bps", Integer, nullable=False, server_default="0"),
    *_timestamps(),
    _one_of("status", enums.EstimateStatus, "ck_project_estimates_status"),
)

project_estimate_lines = Table(
    "project_estimate_lines",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _company_fk(),
    Column("estimate_id", Integer, ForeignKey("project_estimates.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("room_id", Integer, ForeignKey("property_rooms.id", ondelete="SET NULL")),
    Column("service", String, nullable=False),
    Column("unit", String, nullable=False),
    Column("quantity", Float, nullable=False),
    Column("units_per_hour", Float, nullable=False, server_default="0"),
    Column("man_hours", Float, nullable=False, server_default="0"),
    Column("labor_price_cents", Integer, nullable=False, server_default="0"),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("notes", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    _one_of("service", enums.ServiceType, "ck_estimate_lines_service"),
    _one_of("unit", enums.UnitType, "ck_estimate_lines_unit"),
    CheckConstraint("quantity >= 0", name="ck_estimate_lines_quantity_nonneg"),
)
