from src.config_service.services.environment_service import EnvironmentService
from src.config_service.services.tag_service import TagService
from src.config_service.services.template_service import TemplateService

__all__ = [
    "EnvironmentService",
    "TagService",
    "TemplateService",
]
