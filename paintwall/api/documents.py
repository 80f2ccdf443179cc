# paintwall/api/documents.py
"""
Uploaded paperwork (expense receipts, supplier invoices, statements ...).

Files are written under ``UPLOAD_DIR/<company_id>/`` with a random prefix;
the table keeps the original name and where the bytes live.
"""

import logging
import os
import re
import uuid
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse

from paintwall.api.crud import get_row, list_rows, require_owned, require_row
from paintwall.core.config import get_settings
from paintwall.db.engine import get_engine
from paintwall.db.schema import companies, financial_documents, financial_transactions, projects, vendors
from paintwall.models.common import Page
from paintwall.models.enums import DocumentType
from paintwall.models.finance import DocumentOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def _stored_name(file_name: str) -> str:
    safe = _UNSAFE.sub("_", os.path.basename(file_name)).strip("._") or "upload"
    return f"{uuid.uuid4().hex}_{safe}"


@router.get("", response_model=Page[DocumentOut])
def list_documents(
    company_id: Optional[int] = Query(default=None),
    transaction_id: Optional[int] = Query(default=None),
    vendor_id: Optional[int] = Query(default=None),
    project_id: Optional[int] = Query(default=None),
    document_type: Optional[DocumentType] = Query(default=None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[DocumentOut]:
    d = financial_documents
    conditions = []
    for column, value in (
        (d.c.company_id, company_id),
        (d.c.transaction_id, transaction_id),
        (d.c.vendor_id, vendor_id),
        (d.c.project_id, project_id),
    ):
        if value is not None:
            conditions.append(column == value)
    if document_type is not None:
        conditions.append(d.c.document_type == document_type.value)

    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, d, conditions, [d.c.uploaded_at.desc(), d.c.id.desc()], limit, offset)
    return Page[DocumentOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=DocumentOut, status_code=201)
def upload_document(
    file: UploadFile = File(...),
    company_id: int = Form(...),
    document_type: DocumentType = Form(DocumentType.other),
    transaction_id: Optional[int] = Form(None),
    vendor_id: Optional[int] = Form(None),
    project_id: Optional[int] = Form(None),
    description: Optional[str] = Form(None),
) -> DocumentOut:
    file_name = file.filename or "upload"
    directory = os.path.join(get_settings().upload_dir, str(company_id))
    path = os.path.join(directory, _stored_name(file_name))

    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, company_id, "Company")
        require_owned(conn, financial_transactions, transaction_id, company_id, "Transaction")
        require_owned(conn, vendors, vendor_id, company_id, "Vendor")
        require_owned(conn, projects, project_id, company_id, "Project")

        os.makedirs(directory, exist_ok=True)
        content = file.file.read()
        with open(path, "wb") as out:
            out.write(content)

        try:
            result = conn.execute(
                financial_documents.insert().values(
                    company_id=company_id,
                    transaction_id=transaction_id,
                    vendor_id=vendor_id,
                    project_id=project_id,
                    document_type=document_type.value,
                    file_name=file_name,
                    file_path=path,
                    mime_type=file.content_type,
                    size_bytes=len(content),
                    description=description,
                )
            )
        except Exception:
            os.remove(path)
            raise
        row = get_row(conn, financial_documents, result.inserted_primary_key[0], "Document")
    logger.info("Stored document %s (%s, %s bytes)", row["id"], file_name, len(content))
    return DocumentOut.model_validate(row)


@router.get("/{document_id}", response_model=DocumentOut)
def get_document(document_id: int) -> DocumentOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, financial_documents, document_id, "Document")
    return DocumentOut.model_validate(row)


@router.get("/{document_id}/download")
def download_document(document_id: int) -> FileResponse:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, financial_documents, document_id, "Document")
    if not os.path.exists(row["file_path"]):
        raise HTTPException(status_code=404, detail="Document file is missing")
    return FileResponse(
        row["file_path"],
        media_type=row["mime_type"] or "application/octet-stream",
        filename=row["file_name"],
    )


@router.delete("/{document_id}", status_code=204)
def delete_document(document_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        row = get_row(conn, financial_documents, document_id, "Document")
        conn.execute(financial_documents.delete().where(financial_documents.c.id == document_id))
    if os.path.exists(row["file_path"]):
        os.remove(row["file_path"])
    logger.info("Deleted document %s", document_id)
