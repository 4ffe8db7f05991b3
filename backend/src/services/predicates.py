"""
Conjunctive predicate sets for list queries.

A predicate set is an ordered tuple of ``Predicate`` descriptors. Each one is a
plain ``column <op> value`` comparison that is only compiled to a SQLAlchemy
clause when the query runs, so the same set can also be serialized into a
cache key. Clauses are always ANDed together; an empty set matches every row.
"""
import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlalchemy.sql.elements import ColumnElement

from models.base import Base


class Op(StrEnum):
    """Supported comparison operators."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"


_OPERATORS: dict[Op, Callable[[Any, Any], Any]] = {
    Op.EQ: operator.eq,
    Op.NE: operator.ne,
    Op.LT: operator.lt,
    Op.LTE: operator.le,
}


class QueryTime:
    """
    Placeholder for "the current time" inside a predicate.

    Resolved to a concrete timestamp when the predicate is compiled, and
    serialized symbolically so that time-relative predicate sets produce a
    stable cache key.
    """

    def __str__(self) -> str:
        return "$now"

    __repr__ = __str__


NOW = QueryTime()


@dataclass(frozen=True)
class Predicate:
    """A single ``field <op> value`` filter clause."""

    field: str
    op: Op
    value: Any

    def to_clause(self, model: type[Base], now: datetime) -> ColumnElement[bool]:
        """Compile to a SQLAlchemy boolean clause against ``model``."""
        column = getattr(model, self.field)
        value = now if self.value is NOW else self.value
        return _OPERATORS[self.op](column, value)

    def as_dict(self) -> dict[str, Any]:
        """Structural form used for cache keys."""
        return {self.field: {str(self.op): self.value}}


PredicateSet = tuple[Predicate, ...]


def compile_predicates(
    predicates: Sequence[Predicate],
    model: type[Base],
    now: datetime,
) -> list[ColumnElement[bool]]:
    """Compile a predicate set to a list of clauses for ``Select.where(*clauses)``."""
    return [predicate.to_clause(model, now) for predicate in predicates]
