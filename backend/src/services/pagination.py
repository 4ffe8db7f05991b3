"""Page number / page size arithmetic for list endpoints."""
import math
from dataclasses import dataclass

from services.task_filters import parse_lenient_int

DEFAULT_PAGE_SIZE = 10
DEFAULT_PROJECT_PAGE_SIZE = 6

# OFFSET and LIMIT are BIGINT in PostgreSQL
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    """A resolved page: 1-based page number plus the offset/limit window it covers."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass(frozen=True)
class Pagination:
    """Result of ``paginate``."""

    offset: int
    limit: int
    total_pages: int


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` rows (0 when there are none)."""
    if total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def resolve_page(
    page: int | str | None,
    page_size: int | str | None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int | None = None,
) -> PageRequest:
    """
    Normalize raw page parameters.

    A missing, malformed, or non-positive page becomes 1; a missing, malformed,
    or non-positive page size becomes ``default_page_size``. Page size is
    clamped to ``max_page_size`` when one is given, and the page number is
    clamped so the offset stays within ``MAX_OFFSET``.
    """
    page_number = parse_lenient_int(page) if isinstance(page, str) else page
    size = parse_lenient_int(page_size) if isinstance(page_size, str) else page_size

    if page_number is None or page_number < 1:
        page_number = 1
    if size is None or size < 1:
        size = default_page_size
    if max_page_size is not None:
        size = min(size, max_page_size)
    size = min(size, MAX_OFFSET)
    page_number = min(page_number, MAX_OFFSET // size + 1)
    return PageRequest(page=page_number, page_size=size)


def paginate(page_number: int | None, page_size: int | None, total_count: int) -> Pagination:
    """Compute the offset/limit window and total page count for one page."""
    request = resolve_page(page_number, page_size)
    return Pagination(
        offset=request.offset,
        limit=request.limit,
        total_pages=total_pages(total_count, request.page_size),
    )
