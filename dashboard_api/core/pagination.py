"""
Pagination utilities shared by list endpoints.

Lists are offset-based and report `has_more` instead of a total count:
one extra row is fetched past the requested limit and, when present,
dropped from the page and reported as `has_more = True`.
"""

from typing import Any, Dict, List, Sequence, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.selectable import Select


async def paginate_query(
    db: AsyncSession,
    query: Select,
    offset: int = 0,
    limit: int = 10,
) -> Tuple[List[Any], bool]:
    """
    Apply offset-based pagination to a SQLAlchemy query.

    The query should already carry its WHERE clauses (including soft-delete
    filters), eager loading and ORDER BY.

    Args:
        db: SQLAlchemy async session
        query: Base query with filters and ordering already applied
        offset: Number of rows to skip
        limit: Page size

    Returns:
        Tuple of (page_items, has_more)
    """
    result = await db.execute(query.offset(offset).limit(limit + 1))
    items = list(result.scalars().all())

    has_more = len(items) > limit
    return items[:limit], has_more


def build_paginated_response(items: Sequence[Any], has_more: bool = False) -> Dict[str, Any]:
    """Build the standard `{"data": [...], "has_more": bool}` list body."""
    return {
        "data": list(items),
        "has_more": has_more,
    }
