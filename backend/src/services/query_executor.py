"""Paged reads against storage for a predicate set."""
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption
from sqlalchemy.sql.elements import ColumnElement

from models.base import Base
from services.predicates import Predicate, compile_predicates

M = TypeVar("M", bound=Base)


async def fetch_page(
    db: AsyncSession,
    model: type[M],
    predicates: Sequence[Predicate],
    *,
    offset: int,
    limit: int,
    order_by: Sequence[ColumnElement],
    options: Sequence[ORMOption] = (),
    now: datetime | None = None,
) -> tuple[list[M], int]:
    """
    Read one page of rows plus the total number of matching rows.

    Both reads use the same compiled predicate set. They are not run in a
    single snapshot, so a concurrent write can make the page and the count
    disagree slightly.

    Args:
        db: Database session.
        model: Entity to query.
        predicates: Conjunctive filters; empty matches every row.
        offset: Rows to skip.
        limit: Maximum rows to return.
        order_by: Sort clauses for the page read.
        options: Loader options (e.g. ``selectinload``) for the page read.
        now: Timestamp substituted for time-relative predicates. Defaults to now (UTC).

    Returns:
        Tuple of (rows, total count).
    """
    clauses = compile_predicates(predicates, model, now or datetime.now(UTC))
    base_query = select(model).where(*clauses)

    # Get total count before pagination
    count_query = select(func.count()).select_from(base_query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    page_query = (
        base_query
        .options(*options)
        .order_by(*order_by)
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(page_query)
    rows = list(result.scalars().all())

    return rows, total
