"""Service layer for subprojects."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.project import Project, SubProject
from schemas.subproject import SubProjectCreate
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


async def list_subprojects(db: AsyncSession, project_id: int | None) -> list[SubProject]:
    """
    List a project's subprojects, newest first.

    A missing project id lists nothing rather than every subproject.
    """
    if project_id is None:
        return []
    result = await db.execute(
        select(SubProject)
        .where(SubProject.project_id == project_id)
        .order_by(SubProject.created_at.desc(), SubProject.id),
    )
    return list(result.scalars().all())


async def create_subproject(db: AsyncSession, data: SubProjectCreate) -> SubProject:
    """
    Add a subproject to an existing project.

    Raises:
        NotFoundError: If the project does not exist.
    """
    if await db.get(Project, data.project_id) is None:
        raise NotFoundError("Project")
    subproject = SubProject(name=data.name, project_id=data.project_id)
    db.add(subproject)
    await db.flush()
    await db.refresh(subproject)
    logger.info(
        "subproject_created subproject_id=%s project_id=%s", subproject.id, data.project_id,
    )
    return subproject
