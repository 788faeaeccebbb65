"""Template schemas for API request/response."""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.config_service.core.validators import (
    MAX_ACTOR_LENGTH,
    MAX_LONG_DESCRIPTION_LENGTH,
    MAX_TEMPLATE_NAME_LENGTH,
    MAX_VERSION_LENGTH,
    validate_document,
    validate_semver,
)
from src.config_service.models.enums import ConfigFormat
from src.config_service.schemas.base import PartialUpdate
from src.config_service.schemas.environment import EnvironmentRead
from src.config_service.schemas.tag import TagRead


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Template name cannot be empty or whitespace only")
    return v


def _clean_actor(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Actor cannot be empty or whitespace only")
    return v


def _check_content(v: str) -> str:
    if not v.strip():
        raise ValueError("Content cannot be empty or whitespace only")
    return v


def _unique_ids(ids: list[int]) -> list[int]:
    if any(i < 1 for i in ids):
        raise ValueError("Tag IDs must be positive integers")
    return list(dict.fromkeys(ids))


class TemplateCreate(BaseModel):
    """Schema for creating a template."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=MAX_TEMPLATE_NAME_LENGTH)
    description: str = Field(default="", max_length=MAX_LONG_DESCRIPTION_LENGTH)
    format: ConfigFormat
    content: str = Field(min_length=1)
    document_schema: dict[str, Any] = Field(
        default_factory=dict,
        alias="schema",
        description="Document describing the expected configuration shape.",
    )
    default_values: dict[str, Any] = Field(default_factory=dict)
    version: str = Field(max_length=MAX_VERSION_LENGTH, json_schema_extra={"examples": ["1.0.0"]})
    environment_id: int = Field(ge=1)
    tag_ids: list[int] = Field(default_factory=list)
    active: bool = True
    created_by: str = Field(min_length=1, max_length=MAX_ACTOR_LENGTH)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _check_content(v)

    @field_validator("document_schema", "default_values")
    @classmethod
    def validate_documents(cls, v: dict[str, Any]) -> dict[str, Any]:
        return validate_document(v)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        return validate_semver(v)

    @field_validator("tag_ids")
    @classmethod
    def validate_tag_ids(cls, v: list[int]) -> list[int]:
        return _unique_ids(v)

    @field_validator("created_by")
    @classmethod
    def validate_created_by(cls, v: str) -> str:
        return _clean_actor(v)


class TemplateUpdate(PartialUpdate):
    """Schema for updating a template.

    `description`, `schema`, `default_values` and `tag_ids` sent as null are
    reset to their empty values. `updated_by` is always required.
    """

    model_config = ConfigDict(populate_by_name=True)

    CLEARABLE: ClassVar[dict[str, Any]] = {
        "description": "",
        "document_schema": {},
        "default_values": {},
        "tag_ids": [],
    }

    name: str | None = Field(default=None, min_length=1, max_length=MAX_TEMPLATE_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_LONG_DESCRIPTION_LENGTH)
    format: ConfigFormat | None = None
    content: str | None = Field(default=None, min_length=1)
    document_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    default_values: dict[str, Any] | None = None
    version: str | None = Field(default=None, max_length=MAX_VERSION_LENGTH)
    environment_id: int | None = Field(default=None, ge=1)
    tag_ids: list[int] | None = None
    active: bool | None = None
    updated_by: str = Field(min_length=1, max_length=MAX_ACTOR_LENGTH)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str | None) -> str | None:
        return _check_content(v) if v is not None else v

    @field_validator("document_schema", "default_values")
    @classmethod
    def validate_documents(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        return validate_document(v) if v is not None else v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str | None) -> str | None:
        return validate_semver(v) if v is not None else v

    @field_validator("tag_ids")
    @classmethod
    def validate_tag_ids(cls, v: list[int] | None) -> list[int] | None:
        return _unique_ids(v) if v is not None else v

    @field_validator("updated_by")
    @classmethod
    def validate_updated_by(cls, v: str) -> str:
        return _clean_actor(v)


class TemplateRead(BaseModel):
    """Schema for reading a template with its environment and tags."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    format: ConfigFormat
    content: str
    # Responses are re-validated from their aliased dump, so accept both names
    document_schema: dict[str, Any] = Field(
        validation_alias=AliasChoices("document_schema", "schema"),
        serialization_alias="schema",
    )
    default_values: dict[str, Any]
    version: str
    environment_id: int
    environment: EnvironmentRead | None = None
    tag_ids: list[int]
    tags: list[TagRead]
    active: bool
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str
