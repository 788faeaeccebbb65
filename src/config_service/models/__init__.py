"""Model exports.

Import from here: `from src.config_service.models import Tag, Template`
"""

from src.config_service.models.enums import ConfigFormat
from src.config_service.models.environment import Environment
from src.config_service.models.tag import Tag
from src.config_service.models.template import Template, TemplateTag

__all__ = [
    # Enums
    "ConfigFormat",
    # Tables
    "Environment",
    "Tag",
    "Template",
    "TemplateTag",
]
