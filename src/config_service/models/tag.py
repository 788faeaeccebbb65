"""Tag model - labeled, colored marker for templates."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.config_service.core.validators import (
    DEFAULT_TAG_COLOR,
    MAX_SHORT_DESCRIPTION_LENGTH,
    MAX_TAG_NAME_LENGTH,
)
from src.config_service.models.base import created_at_field, id_field, updated_at_field


class Tag(SQLModel, table=True):
    __tablename__ = "tags"

    id: int | None = id_field()
    name: str = Field(max_length=MAX_TAG_NAME_LENGTH, unique=True, index=True)
    description: str = Field(default="", max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    color: str = Field(default=DEFAULT_TAG_COLOR, max_length=7)
    created_at: datetime | None = created_at_field()
    updated_at: datetime | None = updated_at_field()
