from typing import Callable, Optional

from sqlalchemy import func
from sqlmodel import select

MAX_PAGE_SIZE = 100


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 20,
    transform: Optional[Callable] = None,
):
    """
    Run ``query`` for one page. ``transform`` is applied to each row, so
    callers can attach computed fields (e.g. the resolved offer) in place.
    """
    page = max(page, 1)
    limit = min(limit, MAX_PAGE_SIZE) if limit >= 1 else 20

    total = session.exec(select(func.count()).select_from(query.subquery())).one()
    rows = session.exec(query.offset((page - 1) * limit).limit(limit)).all()

    return {
        "total_items": total,
        "total_pages": -(-total // limit),
        "current_page": page,
        "limit": limit,
        "results": [transform(row) for row in rows] if transform else rows,
    }
