"""Task model."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, generate_id
from models.enums import TaskPriority, TaskStatus

if TYPE_CHECKING:
    from models.project import Project, SubProject
    from models.user import User


class Task(Base, TimestampMixin):
    """A unit of site work inside a subproject."""

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status"),
        default=TaskStatus.PENDING,
        nullable=False,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, name="task_priority"),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    # Sole sort key for task lists
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )
    is_urgent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        index=True,
    )
    subproject_id: Mapped[str] = mapped_column(
        ForeignKey("subprojects.id", ondelete="CASCADE"),
        index=True,
    )
    assigned_to_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )

    project: Mapped["Project"] = relationship(back_populates="tasks")
    subproject: Mapped["SubProject"] = relationship(back_populates="tasks")
    assigned_to: Mapped["User | None"] = relationship(
        back_populates="assigned_tasks", foreign_keys=[assigned_to_id],
    )
    creator: Mapped["User"] = relationship(
        back_populates="created_tasks", foreign_keys=[creator_id],
    )
