"""FastAPI dependencies for injection."""
from fastapi import Request

from core.auth import get_current_claims, get_session_claims, require_admin
from core.config import get_settings
from core.result_cache import ResultCache
from db.session import get_async_session


def get_result_cache(request: Request) -> ResultCache:
    """Return the process-wide result cache created at startup."""
    return request.app.state.result_cache


__all__ = [
    "get_async_session",
    "get_current_claims",
    "get_result_cache",
    "get_session_claims",
    "get_settings",
    "require_admin",
]
