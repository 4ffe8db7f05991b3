"""Pydantic schemas for task endpoints."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from models.enums import TaskPriority, TaskStatus
from models.task import Task
from schemas.validators import ensure_utc


class TaskCreate(BaseModel):
    """Schema for creating a task. The creator is always the caller."""

    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    due_date: datetime | None = Field(
        default=None,
        description="ISO 8601 date or datetime. Dates without a timezone are treated as UTC.",
    )
    priority: TaskPriority = TaskPriority.MEDIUM
    is_urgent: bool = False
    status: TaskStatus = TaskStatus.PENDING
    project_id: int
    subproject_id: str = Field(min_length=1)
    assigned_to_id: int | None = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime | None) -> datetime | None:
        """Interpret naive due dates as UTC."""
        return ensure_utc(v)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Reject whitespace-only titles."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Title cannot be blank")
        return stripped


class TaskUpdate(BaseModel):
    """Schema for updating a task. Only fields that are sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    is_urgent: bool | None = None
    assigned_to_id: int | None = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime | None) -> datetime | None:
        """Interpret naive due dates as UTC."""
        return ensure_utc(v)


class TaskResponse(BaseModel):
    """Task as returned by the API, with related display names."""

    id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    is_urgent: bool
    project_id: int
    subproject_id: str
    assigned_to_id: int | None
    creator_id: int
    project_title: str | None = None
    subproject_name: str | None = None
    assigned_to_name: str | None = None
    creator_name: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        """Build from a Task whose project/subproject/assignee/creator are loaded."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            is_urgent=task.is_urgent,
            project_id=task.project_id,
            subproject_id=task.subproject_id,
            assigned_to_id=task.assigned_to_id,
            creator_id=task.creator_id,
            project_title=task.project.title if task.project else None,
            subproject_name=task.subproject.name if task.subproject else None,
            assigned_to_name=task.assigned_to.name if task.assigned_to else None,
            creator_name=task.creator.name if task.creator else None,
        )


class TaskListResponse(BaseModel):
    """Paginated task list."""

    tasks: list[TaskResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    cached: bool = False
