"""
Shared validation functions for Pydantic schemas.

This module contains validators used across multiple entity schemas (tasks, cost items, projects).
"""
from datetime import UTC, datetime


def ensure_utc(value: datetime | None) -> datetime | None:
    """
    Attach UTC to naive datetimes.

    Clients often send bare dates ("2025-01-10") or naive timestamps. Storage
    columns are TIMESTAMP WITH TIME ZONE, so naive values are interpreted as UTC
    to keep due-date comparisons consistent with the list filters.
    """
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
