"""Cost category endpoints."""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_claims, require_admin
from core.session import SessionClaims
from models.cost import Category
from schemas.category import CategoryResponse, CategoryWrite
from schemas.errors import ErrorResponse
from services import category_service

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/", response_model=list[CategoryResponse])
async def list_categories(
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> list[Category]:
    """All cost categories, alphabetically."""
    return await category_service.list_categories(db)


@router.post("/", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryWrite,
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> Category:
    """Create a category (admin only). Names are unique, ignoring case."""
    return await category_service.create_category(db, data.name)


@router.put("/{category_id}", response_model=CategoryResponse)
async def rename_category(
    category_id: str,
    data: CategoryWrite,
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> Category:
    """Rename a category (admin only)."""
    return await category_service.rename_category(db, category_id, data.name)


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Delete a category (admin only). Categories still used by cost items return 400."""
    await category_service.delete_category(db, category_id)
    return Response(status_code=204)
