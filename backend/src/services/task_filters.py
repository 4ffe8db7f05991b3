"""
Task list filtering: query option parsing, predicate building, and view categories.

Predicate order is fixed:

1. Creator visibility rule for non-admins (always first, never user-settable)
2. project, subproject, assignee, creator, priority, status filters
3. Either the view category preset or the default "exclude completed" view
4. Due-date upper bound
"""
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import TypeVar

from core.session import SessionClaims
from models.enums import TaskPriority, TaskStatus, ViewCategory
from services.exceptions import InvalidInputError
from services.predicates import NOW, Op, Predicate, PredicateSet

END_OF_DAY = time(23, 59, 59, 999_000)

# Id columns are INTEGER
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

E = TypeVar("E", TaskStatus, TaskPriority, ViewCategory)


def parse_lenient_int(value: str | None) -> int | None:
    """Parse an integer query parameter; malformed values yield None."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_optional_int(value: str | None) -> int | None:
    """
    Parse an optional id query parameter.

    Malformed values, and values no INTEGER column can hold, are treated as
    not supplied rather than rejected.
    """
    parsed = parse_lenient_int(value)
    if parsed is None or not INT32_MIN <= parsed <= INT32_MAX:
        return None
    return parsed


def parse_optional_date(value: str | None) -> date | None:
    """
    Parse an ISO date (or datetime) query parameter down to its UTC calendar day.

    Datetimes with an offset are converted to UTC first. Malformed values are
    treated as not supplied.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse a boolean flag; anything other than true/false-like strings yields the default."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"true", "1", "yes"}:
        return True
    if normalized in {"false", "0", "no"}:
        return False
    return default


def _parse_enum(
    enum_cls: type[E],
    value: str | None,
    param: str,
) -> E | None:
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(f"Invalid {param} '{value}'. Allowed: {allowed}")


def end_of_day(day: date) -> datetime:
    """Last representable millisecond of ``day`` in UTC."""
    return datetime.combine(day, END_OF_DAY, tzinfo=UTC)


@dataclass(frozen=True)
class TaskListOptions:
    """Recognized task list filters, already parsed."""

    project_id: int | None = None
    subproject_id: str | None = None
    assigned_to_id: int | None = None
    created_by_id: int | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    view_category: ViewCategory | None = None
    exclude_completed: bool = True
    due_on_or_before: date | None = None

    @classmethod
    def from_query(
        cls,
        *,
        project: str | None = None,
        subproject: str | None = None,
        assigned_to: str | None = None,
        created_by: str | None = None,
        priority: str | None = None,
        status: str | None = None,
        due_date: str | None = None,
        view_category: str | None = None,
        exclude_completed: str | None = None,
    ) -> "TaskListOptions":
        """
        Build options from raw query string values.

        Integer and date parameters are lenient (malformed means absent).
        Enum parameters are strict and raise ``InvalidInputError``.
        """
        return cls(
            project_id=parse_optional_int(project),
            subproject_id=subproject or None,
            assigned_to_id=parse_optional_int(assigned_to),
            created_by_id=parse_optional_int(created_by),
            priority=_parse_enum(TaskPriority, priority, "priority"),
            status=_parse_enum(TaskStatus, status, "status"),
            view_category=_parse_enum(ViewCategory, view_category, "viewCategory"),
            exclude_completed=parse_bool(exclude_completed, default=True),
            due_on_or_before=parse_optional_date(due_date),
        )


def resolve_view_category(view_category: ViewCategory | None) -> PredicateSet:
    """
    Map a view category onto its predicates.

    DELAYED compares against the query-time clock with a strict less-than, so a
    task due exactly now is not yet delayed.
    """
    if view_category == ViewCategory.COMPLETED:
        return (Predicate("status", Op.EQ, TaskStatus.DONE),)
    if view_category == ViewCategory.ON_HOLD:
        return (Predicate("status", Op.EQ, TaskStatus.ON_HOLD),)
    if view_category == ViewCategory.DELAYED:
        return (
            Predicate("status", Op.NE, TaskStatus.DONE),
            Predicate("due_date", Op.LT, NOW),
        )
    return ()


def build_task_predicates(options: TaskListOptions, claims: SessionClaims) -> PredicateSet:
    """Translate list options and the caller's identity into a conjunctive predicate set."""
    predicates: list[Predicate] = []

    # Non-admins only ever see tasks they created
    if not claims.is_admin:
        predicates.append(Predicate("creator_id", Op.EQ, claims.user_id))

    if options.project_id is not None:
        predicates.append(Predicate("project_id", Op.EQ, options.project_id))
    if options.subproject_id:
        predicates.append(Predicate("subproject_id", Op.EQ, options.subproject_id))
    if options.assigned_to_id is not None:
        predicates.append(Predicate("assigned_to_id", Op.EQ, options.assigned_to_id))
    if options.created_by_id is not None:
        predicates.append(Predicate("creator_id", Op.EQ, options.created_by_id))
    if options.priority is not None:
        predicates.append(Predicate("priority", Op.EQ, options.priority))
    if options.status is not None:
        predicates.append(Predicate("status", Op.EQ, options.status))

    # View category and "exclude completed" are mutually exclusive view modes
    if options.view_category is not None:
        predicates.extend(resolve_view_category(options.view_category))
    elif options.exclude_completed:
        predicates.append(Predicate("status", Op.NE, TaskStatus.DONE))

    if options.due_on_or_before is not None:
        predicates.append(
            Predicate("due_date", Op.LTE, end_of_day(options.due_on_or_before)),
        )

    return tuple(predicates)
