from typing import Callable, Optional, Sequence

from sqlalchemy import func
from sqlmodel import select

MAX_PAGE_SIZE = 100


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 10,
    transform: Optional[Callable[[Sequence], list]] = None,
):
    """Run ``query`` for one page.

    ``transform`` receives the page's rows and returns what goes into
    ``results`` (e.g. ORM rows -> response schemas).
    """
    page = max(page, 1)
    if limit < 1:
        limit = 10
    limit = min(limit, MAX_PAGE_SIZE)

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    rows = session.exec(
        query.offset((page - 1) * limit).limit(limit)
    ).all()

    return {
        "total_items": total,
        "total_pages": (total + limit - 1) // limit,
        "current_page": page,
        "limit": limit,
        "results": transform(rows) if transform else list(rows),
    }
