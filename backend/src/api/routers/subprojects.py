"""Subproject endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_claims, require_admin
from core.session import SessionClaims
from models.project import SubProject
from schemas.errors import ErrorResponse
from schemas.subproject import SubProjectCreate, SubProjectListResponse, SubProjectResponse
from services import subproject_service
from services.task_filters import parse_optional_int

router = APIRouter(
    prefix="/subprojects",
    tags=["subprojects"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/", response_model=SubProjectListResponse)
async def list_subprojects(
    project_id: str | None = Query(default=None, alias="projectId"),
    _claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_async_session),
) -> SubProjectListResponse:
    """
    List the subprojects of one project, newest first.

    A missing or malformed projectId returns an empty list.
    """
    subprojects = await subproject_service.list_subprojects(db, parse_optional_int(project_id))
    return SubProjectListResponse(
        subprojects=[SubProjectResponse.model_validate(s) for s in subprojects],
        total=len(subprojects),
    )


@router.post("/", response_model=SubProjectResponse, status_code=201)
async def create_subproject(
    data: SubProjectCreate,
    _claims: SessionClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
) -> SubProject:
    """Add a subproject to a project (admin only)."""
    return await subproject_service.create_subproject(db, data)
