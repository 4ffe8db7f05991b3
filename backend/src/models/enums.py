"""Enumerations shared by models, schemas, and the query layer."""
from enum import StrEnum


class Role(StrEnum):
    """User role carried in session claims. Checks are exact-match, not hierarchical."""

    USER = "USER"
    ADMIN = "ADMIN"


class TaskStatus(StrEnum):
    """Lifecycle status of a task."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    ON_HOLD = "ON_HOLD"


class TaskPriority(StrEnum):
    """Task priority."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class CostStatus(StrEnum):
    """Approval/payment status of a cost item."""

    PENDING = "Pending"
    APPROVED = "Approved"
    PAID = "Paid"
    ON_HOLD = "OnHold"
    CANCELLED = "Cancelled"


class ViewCategory(StrEnum):
    """Named task list presets that replace the default active-tasks view."""

    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    DELAYED = "DELAYED"
