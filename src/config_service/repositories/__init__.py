from src.config_service.repositories.base import BaseRepository
from src.config_service.repositories.environment import EnvironmentRepository
from src.config_service.repositories.tag import TagRepository
from src.config_service.repositories.template import TemplateRepository

__all__ = [
    "BaseRepository",
    "EnvironmentRepository",
    "TagRepository",
    "TemplateRepository",
]
