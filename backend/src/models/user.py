"""User model for dashboard accounts."""
from typing import TYPE_CHECKING

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin
from models.enums import Role

if TYPE_CHECKING:
    from models.project import Project
    from models.task import Task


class User(Base, TimestampMixin):
    """User model - an administrator or a regular site user."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    contact: Mapped[str | None] = mapped_column(String(50), nullable=True)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        comment="scrypt$<salt hex>$<digest hex>",
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role"), default=Role.USER, nullable=False,
    )

    projects: Mapped[list["Project"]] = relationship(back_populates="owner")
    created_tasks: Mapped[list["Task"]] = relationship(
        back_populates="creator", foreign_keys="Task.creator_id",
    )
    assigned_tasks: Mapped[list["Task"]] = relationship(
        back_populates="assigned_to", foreign_keys="Task.assigned_to_id",
    )
