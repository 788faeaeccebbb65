"""FastAPI dependency injection definitions."""

from src.config_service.api.dependencies.db import DBSession, get_db_session
from src.config_service.api.dependencies.repositories import (
    EnvironmentRepo,
    TagRepo,
    TemplateRepo,
    get_environment_repository,
    get_tag_repository,
    get_template_repository,
)
from src.config_service.api.dependencies.services import (
    EnvironmentServiceDep,
    TagServiceDep,
    TemplateServiceDep,
    get_environment_service,
    get_tag_service,
    get_template_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "EnvironmentRepo",
    "TagRepo",
    "TemplateRepo",
    "get_environment_repository",
    "get_tag_repository",
    "get_template_repository",
    # Services
    "EnvironmentServiceDep",
    "TagServiceDep",
    "TemplateServiceDep",
    "get_environment_service",
    "get_tag_service",
    "get_template_service",
]
