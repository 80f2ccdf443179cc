# paintwall/api/vendors.py

from typing import Optional

from fastapi import APIRouter, Query

from paintwall.api.crud import delete_row, get_row, insert_row, list_rows, require_row, search, update_row
from paintwall.db.engine import get_engine
from paintwall.db.schema import companies, vendors
from paintwall.models.common import Page
from paintwall.models.enums import VendorType
from paintwall.models.finance import VendorCreate, VendorOut, VendorUpdate

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=Page[VendorOut])
def list_vendors(
    company_id: Optional[int] = Query(default=None),
    type: Optional[VendorType] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches name, email and phone"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[VendorOut]:
    conditions = []
    if company_id is not None:
        conditions.append(vendors.c.company_id == company_id)
    if type is not None:
        conditions.append(vendors.c.type == type.value)
    if q and q.strip():
        conditions.append(search(q, vendors.c.name, vendors.c.email, vendors.c.phone))

    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, vendors, conditions, [vendors.c.name, vendors.c.id], limit, offset)
    return Page[VendorOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=VendorOut, status_code=201)
def create_vendor(payload: VendorCreate) -> VendorOut:
    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, payload.company_id, "Company")
        row = insert_row(conn, vendors, payload.model_dump(), "Vendor")
    return VendorOut.model_validate(row)


@router.get("/{vendor_id}", response_model=VendorOut)
def get_vendor(vendor_id: int) -> VendorOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, vendors, vendor_id, "Vendor")
    return VendorOut.model_validate(row)


@router.patch("/{vendor_id}", response_model=VendorOut)
def update_vendor(vendor_id: int, payload: VendorUpdate) -> VendorOut:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, vendors, vendor_id, "Vendor")
        row = update_row(conn, vendors, vendor_id, payload.model_dump(exclude_unset=True), "Vendor")
    return VendorOut.model_validate(row)


@router.delete("/{vendor_id}", status_code=204)
def delete_vendor(vendor_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, vendors, vendor_id, "Vendor")
