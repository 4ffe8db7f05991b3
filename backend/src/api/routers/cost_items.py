"""Cost item endpoints."""
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_claims, get_settings
from core.config import Settings
from core.session import SessionClaims
from schemas.cost_item import (
    CostItemCreate,
    CostItemListResponse,
    CostItemResponse,
    CostItemUpdate,
)
from schemas.errors import ErrorResponse
from services import cost_item_service
from services.exceptions import NotFoundError
from services.pagination import DEFAULT_PAGE_SIZE, resolve_page, total_pages

router = APIRouter(
    prefix="/cost-items",
    tags=["cost-items"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/", response_model=CostItemListResponse)
async def list_cost_items(
    project_id: str | None = Query(default=None, alias="projectId"),
    subproject_id: str | None = Query(default=None, alias="subprojectId"),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> CostItemListResponse:
    """List cost items, newest first, optionally scoped to a project or subproject."""
    predicates = cost_item_service.build_cost_item_predicates(project_id, subproject_id)
    page_request = resolve_page(
        page, limit, default_page_size=DEFAULT_PAGE_SIZE, max_page_size=settings.max_page_size,
    )
    items, total = await cost_item_service.list_cost_items(db, predicates, page_request)
    return CostItemListResponse(
        items=[CostItemResponse.from_cost_item(item) for item in items],
        total=total,
        page=page_request.page,
        limit=page_request.limit,
        total_pages=total_pages(total, page_request.page_size),
    )


@router.post("/", response_model=CostItemResponse, status_code=201)
async def create_cost_item(
    data: CostItemCreate,
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> CostItemResponse:
    """Record a cost item against a project (and optionally a subproject)."""
    item = await cost_item_service.create_cost_item(db, data)
    return CostItemResponse.from_cost_item(item)


@router.get("/{cost_item_id}", response_model=CostItemResponse)
async def get_cost_item(
    cost_item_id: str,
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> CostItemResponse:
    """Get a single cost item."""
    item = await cost_item_service.get_cost_item(db, cost_item_id)
    if item is None:
        raise NotFoundError("Cost item")
    return CostItemResponse.from_cost_item(item)


@router.put("/{cost_item_id}", response_model=CostItemResponse)
async def update_cost_item(
    cost_item_id: str,
    data: CostItemUpdate,
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> CostItemResponse:
    """Edit a cost item. Only fields present in the body are changed."""
    item = await cost_item_service.update_cost_item(db, cost_item_id, data)
    if item is None:
        raise NotFoundError("Cost item")
    return CostItemResponse.from_cost_item(item)


@router.delete("/{cost_item_id}", status_code=204)
async def delete_cost_item(
    cost_item_id: str,
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Delete a cost item."""
    if not await cost_item_service.delete_cost_item(db, cost_item_id):
        raise NotFoundError("Cost item")
    return Response(status_code=204)
