"""Pydantic schemas for cost item endpoints."""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from models.cost import CostItem
from models.enums import CostStatus
from schemas.validators import ensure_utc


class CostItemCreate(BaseModel):
    """Schema for recording a cost entry."""

    item_name: str = Field(min_length=1, max_length=255)
    floor_phase: str | None = None
    contractor: str | None = None
    date: datetime
    estimated_cost: Decimal = Field(gt=0)
    actual_cost: Decimal | None = Field(default=None, ge=0)
    status: CostStatus
    category_id: str = Field(min_length=1)
    project_id: int
    subproject_id: str | None = None

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime) -> datetime:
        """Interpret naive dates as UTC."""
        return ensure_utc(v)

    @field_validator("subproject_id", mode="before")
    @classmethod
    def blank_subproject_is_none(cls, v: object) -> object:
        """An empty subproject id means 'no subproject'."""
        if v == "":
            return None
        return v


class CostItemUpdate(BaseModel):
    """Schema for editing a cost entry. Only fields that are sent are changed."""

    item_name: str | None = Field(default=None, min_length=1, max_length=255)
    floor_phase: str | None = None
    contractor: str | None = None
    date: datetime | None = None
    estimated_cost: Decimal | None = Field(default=None, gt=0)
    actual_cost: Decimal | None = Field(default=None, ge=0)
    status: CostStatus | None = None
    category_id: str | None = Field(default=None, min_length=1)

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class CostItemResponse(BaseModel):
    """Cost item as returned by the API, with related display names."""

    id: str
    item_name: str
    floor_phase: str | None
    contractor: str | None
    date: datetime
    estimated_cost: Decimal
    actual_cost: Decimal | None
    status: CostStatus
    category_id: str
    project_id: int
    subproject_id: str | None
    category_name: str | None = None
    project_title: str | None = None
    subproject_name: str | None = None

    @classmethod
    def from_cost_item(cls, item: CostItem) -> "CostItemResponse":
        """Build from a CostItem whose category/project/subproject are loaded."""
        return cls(
            id=item.id,
            item_name=item.item_name,
            floor_phase=item.floor_phase,
            contractor=item.contractor,
            date=item.date,
            estimated_cost=item.estimated_cost,
            actual_cost=item.actual_cost,
            status=item.status,
            category_id=item.category_id,
            project_id=item.project_id,
            subproject_id=item.subproject_id,
            category_name=item.category.name if item.category else None,
            project_title=item.project.title if item.project else None,
            subproject_name=item.subproject.name if item.subproject else None,
        )


class CostItemListResponse(BaseModel):
    """Paginated cost item list."""

    items: list[CostItemResponse]
    total: int
    page: int
    limit: int
    total_pages: int
