"""Service layer for cost items."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.cost import Category, CostItem
from models.project import Project, SubProject
from schemas.cost_item import CostItemCreate, CostItemUpdate
from services.exceptions import NotFoundError
from services.pagination import PageRequest
from services.predicates import Op, Predicate, PredicateSet
from services.query_executor import fetch_page
from services.task_filters import parse_optional_int

logger = logging.getLogger(__name__)

# Sending null for these leaves them unchanged
_REQUIRED_FIELDS = frozenset({"item_name", "date", "estimated_cost", "status", "category_id"})

_COST_ITEM_LOAD_OPTIONS = (
    selectinload(CostItem.category),
    selectinload(CostItem.project),
    selectinload(CostItem.subproject),
)


def build_cost_item_predicates(
    project_id: str | None = None,
    subproject_id: str | None = None,
) -> PredicateSet:
    """Build the cost item filter set. A malformed project id is ignored."""
    predicates: list[Predicate] = []
    parsed_project_id = parse_optional_int(project_id)
    if parsed_project_id is not None:
        predicates.append(Predicate("project_id", Op.EQ, parsed_project_id))
    if subproject_id:
        predicates.append(Predicate("subproject_id", Op.EQ, subproject_id))
    return tuple(predicates)


async def list_cost_items(
    db: AsyncSession,
    predicates: PredicateSet,
    page: PageRequest,
) -> tuple[list[CostItem], int]:
    """List cost items, newest first."""
    return await fetch_page(
        db,
        CostItem,
        predicates,
        offset=page.offset,
        limit=page.limit,
        order_by=(CostItem.date.desc(), CostItem.created_at.desc(), CostItem.id.desc()),
        options=_COST_ITEM_LOAD_OPTIONS,
    )


async def create_cost_item(db: AsyncSession, data: CostItemCreate) -> CostItem:
    """
    Record a cost item.

    Raises:
        NotFoundError: If the project, subproject, or category does not exist.
    """
    if await db.get(Project, data.project_id) is None:
        raise NotFoundError("Project")
    if data.subproject_id is not None and await db.get(SubProject, data.subproject_id) is None:
        raise NotFoundError("Subproject")
    if await db.get(Category, data.category_id) is None:
        raise NotFoundError("Category")

    item = CostItem(**data.model_dump())
    db.add(item)
    await db.flush()
    await db.refresh(item, attribute_names=["category", "project", "subproject"])
    logger.info("cost_item_created cost_item_id=%s project_id=%s", item.id, item.project_id)
    return item


async def get_cost_item(db: AsyncSession, cost_item_id: str) -> CostItem | None:
    """Get a cost item with its category, project, and subproject loaded."""
    result = await db.execute(
        select(CostItem).options(*_COST_ITEM_LOAD_OPTIONS).where(CostItem.id == cost_item_id),
    )
    return result.scalar_one_or_none()


async def update_cost_item(
    db: AsyncSession, cost_item_id: str, data: CostItemUpdate,
) -> CostItem | None:
    """
    Update the fields present in ``data``.

    Returns:
        The updated item, or None if it does not exist.

    Raises:
        NotFoundError: If a new category does not exist.
    """
    item = await get_cost_item(db, cost_item_id)
    if item is None:
        return None

    updates = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in _REQUIRED_FIELDS
    }
    if "category_id" in updates and await db.get(Category, updates["category_id"]) is None:
        raise NotFoundError("Category")
    for field, value in updates.items():
        setattr(item, field, value)
    await db.flush()
    await db.refresh(item, attribute_names=["category", "updated_at"])
    return item


async def delete_cost_item(db: AsyncSession, cost_item_id: str) -> bool:
    """Delete a cost item. Returns False if it does not exist."""
    item = await db.get(CostItem, cost_item_id)
    if item is None:
        return False
    await db.delete(item)
    await db.flush()
    logger.info("cost_item_deleted cost_item_id=%s", cost_item_id)
    return True
