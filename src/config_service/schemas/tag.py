"""Tag schemas for API request/response."""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from src.config_service.core.validators import (
    DEFAULT_TAG_COLOR,
    MAX_SHORT_DESCRIPTION_LENGTH,
    MAX_TAG_NAME_LENGTH,
    validate_hex_color,
)
from src.config_service.schemas.base import PartialUpdate


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Tag name cannot be empty or whitespace only")
    return v


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(min_length=1, max_length=MAX_TAG_NAME_LENGTH)
    description: str = Field(default="", max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    color: str = Field(default=DEFAULT_TAG_COLOR, json_schema_extra={"examples": ["#3b82f6"]})

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return validate_hex_color(v)


class TagUpdate(PartialUpdate):
    """Schema for updating a tag. `description: null` resets it to empty."""

    CLEARABLE: ClassVar[dict[str, str]] = {"description": ""}

    name: str | None = Field(default=None, min_length=1, max_length=MAX_TAG_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return validate_hex_color(v) if v is not None else v


class TagRead(BaseModel):
    """Schema for reading a tag."""

    id: int
    name: str
    description: str
    color: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
