"""Service layer for cost categories."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.cost import Category, CostItem
from services.exceptions import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


async def list_categories(db: AsyncSession) -> list[Category]:
    """All categories, alphabetically."""
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: str | None = None) -> None:
    query = select(Category.id).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise ConflictError(f"A category named '{name}' already exists")


async def create_category(db: AsyncSession, name: str) -> Category:
    """
    Create a category.

    Raises:
        ConflictError: If the name is taken (case-insensitive).
    """
    await _ensure_name_free(db, name)
    category = Category(name=name)
    db.add(category)
    await db.flush()
    logger.info("category_created category_id=%s", category.id)
    return category


async def rename_category(db: AsyncSession, category_id: str, name: str) -> Category:
    """
    Rename a category.

    Raises:
        NotFoundError: If the category does not exist.
        ConflictError: If another category already has the name.
    """
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category")
    await _ensure_name_free(db, name, exclude_id=category_id)
    category.name = name
    await db.flush()
    return category


async def delete_category(db: AsyncSession, category_id: str) -> None:
    """
    Delete a category that no cost item uses.

    Raises:
        NotFoundError: If the category does not exist.
        InvalidInputError: If cost items still reference it.
    """
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category")
    usage = await db.scalar(
        select(func.count()).select_from(CostItem).where(CostItem.category_id == category_id),
    )
    if usage:
        raise InvalidInputError(
            f"Category '{category.name}' is used by {usage} cost item(s) and cannot be deleted",
        )
    await db.delete(category)
    await db.flush()
    logger.info("category_deleted category_id=%s", category_id)
