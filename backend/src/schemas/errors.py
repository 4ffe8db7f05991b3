"""Error response schemas for OpenAPI documentation."""
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Machine-readable error code plus a human-readable message."""

    error: str = Field(
        description="Stable error code: unauthorized, forbidden, not_found, "
        "invalid_input, invalid_credentials, conflict, storage_failure",
    )
    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    detail: ErrorDetail
