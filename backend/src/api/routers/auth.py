"""Login and logout endpoints (session cookie issuance)."""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings
from core.session import SESSION_COOKIE_NAME, issue_session_token
from schemas.errors import ErrorResponse
from schemas.user import LoginRequest, LoginResponse
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={401: {"model": ErrorResponse}},
)


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """
    Verify credentials and set the session cookie.

    The token is only delivered as an HTTP-only cookie; it never appears in
    the response body. Unknown email and wrong password both return 401.
    """
    user = await user_service.authenticate(db, data.email, data.password)
    token = issue_session_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        secret=settings.jwt_secret,
        ttl_seconds=settings.session_ttl_seconds,
        algorithm=settings.jwt_algorithm,
    )
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    logger.info("login_succeeded user_id=%s role=%s", user.id, user.role)
    return LoginResponse(message="Login successful", role=user.role)


@router.post("/logout", status_code=204)
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings),
) -> None:
    """Clear the session cookie. Succeeds whether or not a session exists."""
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
