"""Authorization gate for cookie-based session tokens."""
import logging
from dataclasses import dataclass
from enum import StrEnum

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie

from core.config import Settings, get_settings
from core.session import (
    SESSION_COOKIE_NAME,
    SessionClaims,
    SessionFailure,
    verify_session_token,
)
from models.enums import Role

logger = logging.getLogger(__name__)


# Session cookie scheme (auto_error=False so the gate decides the response)
session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


class DenyReason(StrEnum):
    """Stable, machine-readable denial codes."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Allow:
    """Gate decision: the caller may proceed."""

    claims: SessionClaims


@dataclass(frozen=True)
class Deny:
    """Gate decision: the caller is rejected."""

    reason: DenyReason
    message: str

    @property
    def status_code(self) -> int:
        """HTTP status for this denial (401 vs 403)."""
        if self.reason == DenyReason.UNAUTHORIZED:
            return status.HTTP_401_UNAUTHORIZED
        return status.HTTP_403_FORBIDDEN


def authorize(claims: SessionClaims | None, required_role: Role | None = None) -> Allow | Deny:
    """
    Decide whether a caller may run a protected operation.

    Role checks are exact equality against ``required_role``. An ADMIN route
    rejects USER callers and vice versa; there is no hierarchy.
    """
    if claims is None:
        return Deny(DenyReason.UNAUTHORIZED, "Not authenticated")
    if required_role is not None and claims.role != required_role:
        return Deny(DenyReason.FORBIDDEN, f"Forbidden: {required_role} role required")
    return Allow(claims)


def _enforce(decision: Allow | Deny) -> SessionClaims:
    """Turn a gate decision into claims or an HTTP error."""
    if isinstance(decision, Allow):
        return decision.claims

    headers = None
    if decision.reason == DenyReason.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Cookie"}
    raise HTTPException(
        status_code=decision.status_code,
        detail={"error": str(decision.reason), "message": decision.message},
        headers=headers,
    )


def get_session_claims(
    token: str | None = Depends(session_cookie),
    settings: Settings = Depends(get_settings),
) -> SessionClaims | None:
    """Dependency that verifies the session cookie. Returns None if it is missing or invalid."""
    result = verify_session_token(token, settings.jwt_secret, settings.jwt_algorithm)
    if isinstance(result, SessionFailure):
        logger.debug("session_verification_failed reason=%s", result.reason)
        return None
    return result


def get_current_claims(
    claims: SessionClaims | None = Depends(get_session_claims),
) -> SessionClaims:
    """Dependency for routes open to any authenticated role."""
    return _enforce(authorize(claims))


def require_admin(
    claims: SessionClaims | None = Depends(get_session_claims),
) -> SessionClaims:
    """Dependency for ADMIN-only routes."""
    return _enforce(authorize(claims, Role.ADMIN))
