"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.config_service.api.dependencies.db import DBSession
from src.config_service.api.dependencies.repositories import (
    EnvironmentRepo,
    TagRepo,
    TemplateRepo,
)
from src.config_service.services import EnvironmentService, TagService, TemplateService


def get_tag_service(tag_repo: TagRepo, session: DBSession) -> TagService:
    """Get tag service."""
    return TagService(tag_repo, session)


def get_environment_service(
    environment_repo: EnvironmentRepo, session: DBSession
) -> EnvironmentService:
    """Get environment service."""
    return EnvironmentService(environment_repo, session)


def get_template_service(
    template_repo: TemplateRepo,
    environment_repo: EnvironmentRepo,
    tag_repo: TagRepo,
    session: DBSession,
) -> TemplateService:
    """Get template service with the repositories it resolves references through."""
    return TemplateService(template_repo, environment_repo, tag_repo, session)


TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
EnvironmentServiceDep = Annotated[EnvironmentService, Depends(get_environment_service)]
TemplateServiceDep = Annotated[TemplateService, Depends(get_template_service)]
