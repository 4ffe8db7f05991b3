"""Cost tracking models: categories, cost items, and uploaded cost reports."""
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, generate_id
from models.enums import CostStatus

if TYPE_CHECKING:
    from models.project import Project, SubProject


class Category(Base):
    """Cost category (e.g. 'Concrete', 'Electrical')."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    cost_items: Mapped[list["CostItem"]] = relationship(back_populates="category")


class CostItem(Base, TimestampMixin):
    """A single estimated/actual cost line for a project."""

    __tablename__ = "cost_items"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    floor_phase: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contractor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    estimated_cost: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    actual_cost: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    # values_callable stores "OnHold" rather than the member name "ON_HOLD"
    status: Mapped[CostStatus] = mapped_column(
        Enum(
            CostStatus,
            name="cost_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    category_id: Mapped[str] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"),
        index=True,
    )
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        index=True,
    )
    subproject_id: Mapped[str | None] = mapped_column(
        ForeignKey("subprojects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    category: Mapped["Category"] = relationship(back_populates="cost_items")
    project: Mapped["Project"] = relationship()
    subproject: Mapped["SubProject | None"] = relationship()


class CostReport(Base):
    """A signed cost report file uploaded for a subproject."""

    __tablename__ = "cost_reports"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        index=True,
    )
    subproject_id: Mapped[str] = mapped_column(
        ForeignKey("subprojects.id", ondelete="CASCADE"),
        index=True,
    )
    uploaded_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )
