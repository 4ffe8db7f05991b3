"""Shared exceptions for service layer operations."""


class ServiceError(Exception):
    """
    Base class for errors surfaced to API callers.

    Each subclass carries a stable machine-readable ``error`` code and the HTTP
    status it maps to. The exception handler in ``api.main`` renders them as
    ``{"detail": {"error": ..., "message": ...}}``.
    """

    error: str = "error"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist (or is not visible to the caller)."""

    error = "not_found"
    status_code = 404

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"{entity_name} not found")


class InvalidInputError(ServiceError):
    """
    Raised when a required field is missing or malformed.

    Optional list filters never raise this; they are ignored when malformed.
    """

    error = "invalid_input"
    status_code = 400


class InvalidCredentialsError(ServiceError):
    """Raised when a login email/password pair does not match."""

    error = "invalid_credentials"
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class ConflictError(ServiceError):
    """Raised when a write collides with an existing unique value (email, category name)."""

    error = "conflict"
    status_code = 409
