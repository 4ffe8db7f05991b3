"""Pydantic schemas for cost category endpoints."""
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryWrite(BaseModel):
    """Body for creating or renaming a category."""

    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name cannot be blank")
        return stripped


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
