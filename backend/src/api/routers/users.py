"""Current-user and admin user management endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_claims, require_admin
from core.session import SessionClaims
from models.user import User
from schemas.errors import ErrorResponse
from schemas.user import UserCreate, UserResponse
from services import user_service
from services.exceptions import NotFoundError


router = APIRouter(
    tags=["users"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/me", response_model=UserResponse)
async def get_me(
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """Get the authenticated caller's profile."""
    user = await user_service.get_user(db, claims.user_id)
    if user is None:
        # Token outlived the account
        raise NotFoundError("User")
    return user


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    search: str | None = Query(default=None, description="Case-insensitive name substring"),
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> list[User]:
    """List accounts (admin only), e.g. to pick a task assignee."""
    return await user_service.list_users(db, search)


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """Create an account (admin only). Duplicate emails return 409."""
    return await user_service.create_user(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        contact=data.contact,
    )
