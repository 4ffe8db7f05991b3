"""Pydantic schemas for login and the current-user endpoint."""
from pydantic import BaseModel, ConfigDict, Field

from models.enums import Role


class LoginRequest(BaseModel):
    """Email/password login."""

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    """Login result. The session token itself is only sent as an HTTP-only cookie."""

    message: str
    role: Role


class UserResponse(BaseModel):
    """The caller's profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    contact: str | None
    role: Role


class UserCreate(BaseModel):
    """Admin-created account."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8)
    contact: str | None = Field(default=None, max_length=50)
    role: Role = Role.USER
