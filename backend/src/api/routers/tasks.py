"""Task list and CRUD endpoints."""
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_async_session,
    get_current_claims,
    get_result_cache,
    get_settings,
)
from core.config import Settings
from core.result_cache import ResultCache
from core.session import SessionClaims
from schemas.errors import ErrorResponse
from schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from services import task_service
from services.exceptions import NotFoundError
from services.pagination import DEFAULT_PAGE_SIZE, resolve_page
from services.task_filters import TaskListOptions

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    responses={401: {"model": ErrorResponse}},
)


async def _commit_and_invalidate(db: AsyncSession, cache: ResultCache) -> None:
    # Cached lists are dropped only once the write is visible to other sessions
    await db.commit()
    await cache.clear()


@router.get("/", response_model=TaskListResponse)
async def list_tasks(
    project: str | None = Query(default=None, description="Project id"),
    subproject: str | None = Query(default=None, description="Subproject id"),
    status: str | None = Query(default=None, description="PENDING, IN_PROGRESS, DONE, ON_HOLD"),
    assigned_to: str | None = Query(default=None, alias="assignedTo"),
    created_by: str | None = Query(default=None, alias="createdBy"),
    priority: str | None = Query(default=None, description="HIGH, MEDIUM, LOW"),
    due_date: str | None = Query(
        default=None,
        alias="date",
        description="Only tasks due on or before the end of this day (UTC)",
    ),
    view_category: str | None = Query(
        default=None,
        alias="viewCategory",
        description="COMPLETED, ON_HOLD, or DELAYED. Overrides excludeCompleted.",
    ),
    exclude_completed: str | None = Query(
        default=None,
        alias="excludeCompleted",
        description="Hide DONE tasks (default true). Ignored when viewCategory is set.",
    ),
    page: str | None = Query(default=None, description="1-based page number"),
    limit: str | None = Query(default=None, description="Page size"),
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
    cache: ResultCache = Depends(get_result_cache),
    settings: Settings = Depends(get_settings),
) -> TaskListResponse:
    """
    List tasks visible to the caller.

    Non-admin callers only see tasks they created; admins see every task.
    Numeric and date filters that fail to parse are ignored. Unknown status,
    priority, or viewCategory values return 400.

    Identical queries within the cache TTL are served from the result cache
    (``cached: true`` in the response).
    """
    options = TaskListOptions.from_query(
        project=project,
        subproject=subproject,
        assigned_to=assigned_to,
        created_by=created_by,
        priority=priority,
        status=status,
        due_date=due_date,
        view_category=view_category,
        exclude_completed=exclude_completed,
    )
    page_request = resolve_page(
        page, limit, default_page_size=DEFAULT_PAGE_SIZE, max_page_size=settings.max_page_size,
    )
    return await task_service.list_tasks(db, cache, claims, options, page_request)


@router.post("/", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
    cache: ResultCache = Depends(get_result_cache),
) -> TaskResponse:
    """Create a task. The caller becomes its creator."""
    task = await task_service.create_task(db, claims, data)
    response = TaskResponse.from_task(task)
    await _commit_and_invalidate(db, cache)
    return response


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> TaskResponse:
    """Get a single task. Non-admins can only read tasks they created."""
    task = await task_service.get_task(db, claims, task_id)
    if task is None:
        raise NotFoundError("Task")
    return TaskResponse.from_task(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
    cache: ResultCache = Depends(get_result_cache),
) -> TaskResponse:
    """Update a task. Only fields present in the body are changed."""
    task = await task_service.update_task(db, claims, task_id, data)
    if task is None:
        raise NotFoundError("Task")
    response = TaskResponse.from_task(task)
    await _commit_and_invalidate(db, cache)
    return response


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
    cache: ResultCache = Depends(get_result_cache),
) -> Response:
    """Delete a task. Non-admins can only delete tasks they created."""
    if not await task_service.delete_task(db, claims, task_id):
        raise NotFoundError("Task")
    await _commit_and_invalidate(db, cache)
    return Response(status_code=204)
