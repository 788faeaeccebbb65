"""Environment schemas for API request/response."""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from src.config_service.core.validators import (
    DEFAULT_PRIORITY,
    MAX_ENVIRONMENT_NAME_LENGTH,
    MAX_ENVIRONMENT_SLUG_LENGTH,
    MAX_PRIORITY,
    MAX_SHORT_DESCRIPTION_LENGTH,
    MIN_PRIORITY,
    validate_slug_format,
)
from src.config_service.schemas.base import PartialUpdate


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Environment name cannot be empty or whitespace only")
    return v


class EnvironmentCreate(BaseModel):
    """Schema for creating an environment."""

    name: str = Field(min_length=1, max_length=MAX_ENVIRONMENT_NAME_LENGTH)
    slug: str = Field(
        min_length=1,
        max_length=MAX_ENVIRONMENT_SLUG_LENGTH,
        json_schema_extra={
            "examples": ["dev", "staging", "prod"],
            "description": "ASCII letters and digits only.",
        },
    )
    description: str = Field(default="", max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    active: bool = True
    priority: int = Field(default=DEFAULT_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        return validate_slug_format(v)


class EnvironmentUpdate(PartialUpdate):
    """Schema for updating an environment. `description: null` resets it to empty."""

    CLEARABLE: ClassVar[dict[str, str]] = {"description": ""}

    name: str | None = Field(default=None, min_length=1, max_length=MAX_ENVIRONMENT_NAME_LENGTH)
    slug: str | None = Field(default=None, min_length=1, max_length=MAX_ENVIRONMENT_SLUG_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    active: bool | None = None
    priority: int | None = Field(default=None, ge=MIN_PRIORITY, le=MAX_PRIORITY)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        return validate_slug_format(v) if v is not None else v


class EnvironmentRead(BaseModel):
    """Schema for reading an environment."""

    id: int
    name: str
    slug: str
    description: str
    active: bool
    priority: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
