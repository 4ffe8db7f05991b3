"""Pydantic schemas for project endpoints."""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import ensure_utc


class ProjectCreate(BaseModel):
    """Schema for creating a project (admin only)."""

    title: str = Field(min_length=1, max_length=255)
    location: str | None = None
    start_date: datetime | None = None
    expected_end_date: datetime | None = None
    budget: Decimal | None = Field(default=None, ge=0)
    image: str | None = None

    @field_validator("start_date", "expected_end_date")
    @classmethod
    def dates_utc(cls, v: datetime | None) -> datetime | None:
        """Interpret naive dates as UTC."""
        return ensure_utc(v)


class ProjectResponse(BaseModel):
    """Project summary."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    location: str | None
    start_date: datetime | None
    expected_end_date: datetime | None
    budget: Decimal | None
    image: str | None


class ProjectListResponse(BaseModel):
    """Paginated project list."""

    projects: list[ProjectResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class DashboardSummary(BaseModel):
    """Admin dashboard totals."""

    total_projects: int
    total_tasks: int
    total_users: int
    total_cost_items: int
    total_estimated_cost: Decimal
    total_actual_cost: Decimal
