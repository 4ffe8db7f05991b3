"""Service layer for projects and the admin dashboard."""
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.cost import CostItem
from models.project import Project
from models.task import Task
from models.user import User
from schemas.project import DashboardSummary, ProjectCreate
from services.pagination import PageRequest
from services.query_executor import fetch_page


async def list_projects(db: AsyncSession, page: PageRequest) -> tuple[list[Project], int]:
    """List all projects, newest first. Projects are visible to every role."""
    return await fetch_page(
        db,
        Project,
        (),
        offset=page.offset,
        limit=page.limit,
        order_by=(Project.created_at.desc(), Project.id.desc()),
    )


async def create_project(db: AsyncSession, owner_id: int, data: ProjectCreate) -> Project:
    """Create a project owned by ``owner_id``."""
    project = Project(**data.model_dump(), user_id=owner_id)
    db.add(project)
    await db.flush()
    await db.refresh(project)
    return project


async def get_dashboard_summary(db: AsyncSession) -> DashboardSummary:
    """Aggregate counts and cost totals for the admin dashboard."""
    counts = await db.execute(
        select(
            select(func.count()).select_from(Project).scalar_subquery(),
            select(func.count()).select_from(Task).scalar_subquery(),
            select(func.count()).select_from(User).scalar_subquery(),
            select(func.count()).select_from(CostItem).scalar_subquery(),
        ),
    )
    total_projects, total_tasks, total_users, total_cost_items = counts.one()

    sums = await db.execute(
        select(
            func.coalesce(func.sum(CostItem.estimated_cost), 0),
            func.coalesce(func.sum(CostItem.actual_cost), 0),
        ),
    )
    total_estimated, total_actual = sums.one()

    return DashboardSummary(
        total_projects=total_projects,
        total_tasks=total_tasks,
        total_users=total_users,
        total_cost_items=total_cost_items,
        total_estimated_cost=Decimal(total_estimated),
        total_actual_cost=Decimal(total_actual),
    )
