"""
Stateless session tokens.

Sessions are HS256-signed JWTs minted at login and carried in the ``token``
cookie. Nothing is stored server-side: every request re-derives the caller's
claims by verifying the token against the shared secret.

Verification never raises. It returns either ``SessionClaims`` or a
``SessionFailure`` describing why the token was rejected, so callers branch on
the result instead of catching library exceptions.
"""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

import jwt

from models.enums import Role

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "token"
DEFAULT_ALGORITHM = "HS256"


class FailureReason(StrEnum):
    """Why a session token was rejected."""

    MISSING = "missing"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class SessionClaims:
    """Identity and role facts extracted from a verified token."""

    user_id: int
    email: str
    role: Role
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        """Exact role check; there is no role hierarchy."""
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class SessionFailure:
    """Typed verification failure."""

    reason: FailureReason


def issue_session_token(
    user_id: int,
    email: str,
    role: Role,
    secret: str,
    ttl_seconds: int,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> str:
    """
    Mint a signed session token.

    The payload uses the claim names the browser client already understands
    (``userId``, ``email``, ``role``) plus the registered ``iat``/``exp`` claims.
    """
    issued_at = now or datetime.now(UTC)
    payload = {
        "userId": user_id,
        "email": email,
        "role": str(role),
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_session_token(
    token: str | None,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> SessionClaims | SessionFailure:
    """
    Verify a session token's signature and expiry and extract its claims.

    A token with a missing or unrecognized role, or a non-integer user id, is
    reported as MALFORMED so downstream authorization treats it as
    unauthenticated.
    """
    if not token:
        return SessionFailure(FailureReason.MISSING)

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        return SessionFailure(FailureReason.EXPIRED)
    except jwt.InvalidSignatureError:
        logger.warning("session_token_rejected reason=invalid_signature")
        return SessionFailure(FailureReason.INVALID_SIGNATURE)
    except jwt.PyJWTError as e:
        # Full details stay server-side
        logger.warning("session_token_rejected reason=malformed error=%s", e)
        return SessionFailure(FailureReason.MALFORMED)

    return _claims_from_payload(payload)


def _claims_from_payload(payload: dict) -> SessionClaims | SessionFailure:
    """Validate payload shape and build claims."""
    user_id = payload.get("userId")
    email = payload.get("email")
    raw_role = payload.get("role")

    # bool is a subclass of int; a boolean user id is never valid
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return SessionFailure(FailureReason.MALFORMED)
    if not isinstance(email, str):
        return SessionFailure(FailureReason.MALFORMED)
    try:
        role = Role(raw_role)
    except ValueError:
        return SessionFailure(FailureReason.MALFORMED)

    return SessionClaims(
        user_id=user_id,
        email=email,
        role=role,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )
