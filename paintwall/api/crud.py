# paintwall/api/crud.py
"""
Small helpers shared by the routers: fetch-or-404, paged listing and
insert/update that read the row back.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import Table, func, or_, select


def to_row(data: dict) -> dict:
    """Plain column values from a pydantic dump (enum members -> their value)."""
    return {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}


def get_row(conn, table: Table, row_id: int, what: str):
    row = conn.execute(select(table).where(table.c.id == row_id)).mappings().first()
    if row is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return dict(row)


def require_row(conn, table: Table, row_id: Optional[int], what: str):
    """Like get_row, but a missing reference in a request body is a 400."""
    if row_id is None:
        return None
    row = conn.execute(select(table).where(table.c.id == row_id)).mappings().first()
    if row is None:
        raise HTTPException(status_code=400, detail=f"{what} {row_id} does not exist")
    return dict(row)


def search(q: Optional[str], *columns):
    """Case-insensitive substring match of ``q`` against any of ``columns``."""
    pattern = f"%{q.strip()}%"
    return or_(*(column.ilike(pattern) for column in columns))


def list_rows(
    conn,
    table: Table,
    conditions: Iterable = (),
    order_by: Iterable = (),
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List, int]:
    conditions = list(conditions)

    count_stmt = select(func.count()).select_from(table).where(*conditions)
    total = conn.execute(count_stmt).scalar_one()

    stmt = (
        select(table)
        .where(*conditions)
        .order_by(*order_by)
        .limit(limit)
        .offset(offset)
    )
    rows = [dict(r) for r in conn.execute(stmt).mappings()]
    return rows, total


def insert_row(conn, table: Table, values: dict, what: str):
    result = conn.execute(table.insert().values(**to_row(values)))
    return get_row(conn, table, result.inserted_primary_key[0], what)


def update_row(conn, table: Table, row_id: int, values: dict, what: str):
    if values:
        conn.execute(table.update().where(table.c.id == row_id).values(**to_row(values)))
    return get_row(conn, table, row_id, what)


def delete_row(conn, table: Table, row_id: int, what: str) -> None:
    get_row(conn, table, row_id, what)
    conn.execute(table.delete().where(table.c.id == row_id))


def require_owned(conn, table: Table, row_id: Optional[int], company_id: int, what: str):
    """A referenced row must exist and belong to the same company."""
    row = require_row(conn, table, row_id, what)
    if row is not None and row["company_id"] != company_id:
        raise HTTPException(status_code=400, detail=f"{what} {row_id} belongs to a different company")
    return row
