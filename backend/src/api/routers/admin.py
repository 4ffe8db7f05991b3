"""Admin-only endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, require_admin
from core.session import SessionClaims
from schemas.errors import ErrorResponse
from schemas.project import DashboardSummary
from services import project_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> DashboardSummary:
    """Totals across all projects, tasks, users, and cost items."""
    return await project_service.get_dashboard_summary(db)
