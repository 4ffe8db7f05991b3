"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.cost import Category, CostItem, CostReport
from models.enums import CostStatus, Role, TaskPriority, TaskStatus, ViewCategory
from models.project import Milestone, Project, SubProject
from models.task import Task
from models.user import User

__all__ = [
    "Base",
    "Category",
    "CostItem",
    "CostReport",
    "CostStatus",
    "Milestone",
    "Project",
    "Role",
    "SubProject",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "ViewCategory",
]
