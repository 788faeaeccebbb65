"""Template model and its tag junction table."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, Column, Enum, ForeignKey, Text, UniqueConstraint, text
from sqlmodel import Field, Relationship, SQLModel

from src.config_service.core.validators import (
    MAX_ACTOR_LENGTH,
    MAX_LONG_DESCRIPTION_LENGTH,
    MAX_TEMPLATE_NAME_LENGTH,
    MAX_VERSION_LENGTH,
)
from src.config_service.models.base import created_at_field, id_field, updated_at_field
from src.config_service.models.enums import ConfigFormat
from src.config_service.models.environment import Environment
from src.config_service.models.tag import Tag

CONFIG_FORMAT_ENUM = Enum(
    ConfigFormat,
    name="config_format",
    values_callable=lambda enum: [member.value for member in enum],
)


class TemplateTag(SQLModel, table=True):
    """Junction row linking a template to a tag. Removed with either side."""

    __tablename__ = "template_tags"

    template_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("templates.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        )
    )
    tag_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        )
    )


class Template(SQLModel, table=True):
    """Versioned configuration document scoped to one environment.

    `document_schema` is stored in the `schema` column; the attribute is renamed
    because pydantic reserves `schema` on models.
    """

    __tablename__ = "templates"
    __table_args__ = (
        UniqueConstraint("name", "environment_id", name="templates_name_environment_id_key"),
    )

    id: int | None = id_field()
    name: str = Field(max_length=MAX_TEMPLATE_NAME_LENGTH, index=True)
    description: str = Field(default="", max_length=MAX_LONG_DESCRIPTION_LENGTH)
    format: ConfigFormat = Field(sa_column=Column(CONFIG_FORMAT_ENUM, nullable=False, index=True))
    content: str = Field(sa_type=Text)
    document_schema: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("schema", JSON, nullable=False, server_default=text("'{}'")),
    )
    default_values: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, server_default=text("'{}'")),
    )
    version: str = Field(max_length=MAX_VERSION_LENGTH, index=True)
    environment_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("environments.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    active: bool = Field(default=True, index=True)
    created_at: datetime | None = created_at_field()
    updated_at: datetime | None = updated_at_field()
    created_by: str = Field(max_length=MAX_ACTOR_LENGTH, index=True)
    updated_by: str = Field(max_length=MAX_ACTOR_LENGTH)

    environment: Environment | None = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )
    tags: list[Tag] = Relationship(
        link_model=TemplateTag,
        sa_relationship_kwargs={"lazy": "selectin", "order_by": Tag.name},
    )

    @property
    def tag_ids(self) -> list[int]:
        return [tag.id for tag in self.tags if tag.id is not None]
