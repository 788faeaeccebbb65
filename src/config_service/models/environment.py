"""Environment model - named deployment target."""

from datetime import datetime

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.config_service.core.validators import (
    DEFAULT_PRIORITY,
    MAX_ENVIRONMENT_NAME_LENGTH,
    MAX_ENVIRONMENT_SLUG_LENGTH,
    MAX_SHORT_DESCRIPTION_LENGTH,
)
from src.config_service.models.base import created_at_field, id_field, updated_at_field


class Environment(SQLModel, table=True):
    """Deployment target. Higher priority means higher deployment precedence."""

    __tablename__ = "environments"
    __table_args__ = (
        CheckConstraint("priority >= 0 AND priority <= 100", name="environments_priority_check"),
    )

    id: int | None = id_field()
    name: str = Field(max_length=MAX_ENVIRONMENT_NAME_LENGTH, unique=True, index=True)
    slug: str = Field(max_length=MAX_ENVIRONMENT_SLUG_LENGTH, unique=True, index=True)
    description: str = Field(default="", max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    active: bool = Field(default=True, index=True)
    priority: int = Field(default=DEFAULT_PRIORITY, index=True)
    created_at: datetime | None = created_at_field()
    updated_at: datetime | None = updated_at_field()
