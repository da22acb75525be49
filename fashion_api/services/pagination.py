"""
Offset pagination over SQLAlchemy select statements.
"""

import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from fashion_api.schemas.common import Pagination


def paginate(db: Session, stmt: Select, page: int, limit: int) -> tuple[list[Any], Pagination]:
    """
    Run a select for one page of results.

    Args:
        db: Session
        stmt: Select statement (already filtered and ordered)
        page: 1-based page number
        limit: Page size

    Returns:
        (rows on the page, pagination info)
    """
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    rows = list(db.scalars(stmt.offset((page - 1) * limit).limit(limit)))
    pagination = Pagination(
        page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if total else 0
    )
    return rows, pagination
