"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.config_service.api.dependencies.db import DBSession
from src.config_service.repositories import (
    EnvironmentRepository,
    TagRepository,
    TemplateRepository,
)


def get_tag_repository(session: DBSession) -> TagRepository:
    return TagRepository(session)


def get_environment_repository(session: DBSession) -> EnvironmentRepository:
    return EnvironmentRepository(session)


def get_template_repository(session: DBSession) -> TemplateRepository:
    return TemplateRepository(session)


TagRepo = Annotated[TagRepository, Depends(get_tag_repository)]
EnvironmentRepo = Annotated[EnvironmentRepository, Depends(get_environment_repository)]
TemplateRepo = Annotated[TemplateRepository, Depends(get_template_repository)]
