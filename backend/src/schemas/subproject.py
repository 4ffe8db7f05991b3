"""Pydantic schemas for subproject endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubProjectCreate(BaseModel):
    """Schema for adding a phase or building to a project."""

    name: str = Field(min_length=1, max_length=255)
    project_id: int

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name cannot be blank")
        return stripped


class SubProjectResponse(BaseModel):
    """Subproject summary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    project_id: int
    created_at: datetime


class SubProjectListResponse(BaseModel):
    """All subprojects of one project, newest first."""

    subprojects: list[SubProjectResponse]
    total: int
