"""Project endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_async_session,
    get_current_claims,
    get_settings,
    require_admin,
)
from core.config import Settings
from core.session import SessionClaims
from models.project import Project
from schemas.errors import ErrorResponse
from schemas.project import ProjectCreate, ProjectListResponse, ProjectResponse
from services import project_service
from services.pagination import DEFAULT_PROJECT_PAGE_SIZE, resolve_page, total_pages

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/", response_model=ProjectListResponse)
async def list_projects(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> ProjectListResponse:
    """List projects, newest first (6 per page by default)."""
    page_request = resolve_page(
        page,
        limit,
        default_page_size=DEFAULT_PROJECT_PAGE_SIZE,
        max_page_size=settings.max_page_size,
    )
    projects, total = await project_service.list_projects(db, page_request)
    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p) for p in projects],
        total=total,
        page=page_request.page,
        limit=page_request.limit,
        total_pages=total_pages(total, page_request.page_size),
    )


@router.post("/", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> Project:
    """Create a project owned by the calling admin."""
    return await project_service.create_project(db, claims.user_id, data)
