"""Service layer for task listing and task CRUD."""
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.result_cache import ResultCache, build_cache_key
from core.session import SessionClaims
from models.project import Project, SubProject
from models.task import Task
from models.user import User
from schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from services.exceptions import NotFoundError
from services.pagination import PageRequest, total_pages
from services.query_executor import fetch_page
from services.task_filters import TaskListOptions, build_task_predicates

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "tasks"

# Sending null for these leaves them unchanged
_NON_NULLABLE_FIELDS = frozenset({"title", "status", "priority", "is_urgent"})

_TASK_LOAD_OPTIONS = (
    selectinload(Task.project),
    selectinload(Task.subproject),
    selectinload(Task.assigned_to),
    selectinload(Task.creator),
)


async def list_tasks(
    db: AsyncSession,
    cache: ResultCache,
    claims: SessionClaims,
    options: TaskListOptions,
    page: PageRequest,
    now: datetime | None = None,
) -> TaskListResponse:
    """
    List tasks visible to the caller, filtered and paginated.

    Results are memoized in ``cache`` keyed by the predicate set and page
    window; a cache hit is returned with ``cached=True``.

    Args:
        db: Database session.
        cache: Result cache shared by the process.
        claims: Verified caller identity (drives the creator visibility rule).
        options: Parsed list filters.
        page: Resolved page window.
        now: Query-time clock for DELAYED filtering. Defaults to now (UTC).

    Returns:
        TaskListResponse for the requested page.
    """
    predicates = build_task_predicates(options, claims)
    cache_key = build_cache_key(
        CACHE_NAMESPACE,
        [predicate.as_dict() for predicate in predicates],
        page.offset,
        page.limit,
    )

    cached = await cache.get(cache_key)
    if cached is not None:
        return TaskListResponse.model_validate({**cached, "cached": True})

    tasks, total = await fetch_page(
        db,
        Task,
        predicates,
        offset=page.offset,
        limit=page.limit,
        order_by=(
            Task.due_date.asc().nulls_last(),
            Task.created_at.asc(),
            Task.id.asc(),
        ),
        options=_TASK_LOAD_OPTIONS,
        now=now,
    )
    response = TaskListResponse(
        tasks=[TaskResponse.from_task(task) for task in tasks],
        total=total,
        page=page.page,
        limit=page.limit,
        total_pages=total_pages(total, page.page_size),
    )
    await cache.put(cache_key, response.model_dump(mode="json"))
    return response


async def get_task(db: AsyncSession, claims: SessionClaims, task_id: str) -> Task | None:
    """
    Get a task by ID, applying the same visibility rule as the list.

    Non-admins only see tasks they created.
    """
    query = select(Task).options(*_TASK_LOAD_OPTIONS).where(Task.id == task_id)
    if not claims.is_admin:
        query = query.where(Task.creator_id == claims.user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def _ensure_assignee_exists(db: AsyncSession, user_id: int | None) -> None:
    if user_id is not None and await db.get(User, user_id) is None:
        raise NotFoundError("Assignee")


async def create_task(
    db: AsyncSession,
    claims: SessionClaims,
    data: TaskCreate,
) -> Task:
    """
    Create a task owned by the caller.

    Cached task lists are not cleared here; the caller clears them once the
    write is committed.

    Raises:
        NotFoundError: If the project, subproject (within that project), or assignee
            does not exist.
    """
    if await db.get(Project, data.project_id) is None:
        raise NotFoundError("Project")
    subproject = await db.get(SubProject, data.subproject_id)
    if subproject is None or subproject.project_id != data.project_id:
        raise NotFoundError("Subproject")
    await _ensure_assignee_exists(db, data.assigned_to_id)

    task = Task(**data.model_dump(), creator_id=claims.user_id)
    db.add(task)
    await db.flush()
    logger.info("task_created task_id=%s creator_id=%s", task.id, claims.user_id)

    await db.refresh(task, attribute_names=["project", "subproject", "assigned_to", "creator"])
    return task


async def update_task(
    db: AsyncSession,
    claims: SessionClaims,
    task_id: str,
    data: TaskUpdate,
) -> Task | None:
    """
    Update the fields present in ``data``.

    Returns:
        The updated task, or None if it does not exist or is not visible to the caller.
    """
    task = await get_task(db, claims, task_id)
    if task is None:
        return None

    updates = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in _NON_NULLABLE_FIELDS
    }
    if "assigned_to_id" in updates:
        await _ensure_assignee_exists(db, updates["assigned_to_id"])
    for field, value in updates.items():
        setattr(task, field, value)
    await db.flush()

    # Re-read so relationship names reflect a changed assignee
    await db.refresh(task, attribute_names=["assigned_to", "updated_at"])
    return task


async def delete_task(db: AsyncSession, claims: SessionClaims, task_id: str) -> bool:
    """
    Delete a task visible to the caller.

    Returns:
        True if deleted, False if it does not exist or is not visible to the caller.
    """
    task = await get_task(db, claims, task_id)
    if task is None:
        return False
    await db.delete(task)
    await db.flush()
    logger.info("task_deleted task_id=%s deleted_by=%s", task_id, claims.user_id)
    return True
