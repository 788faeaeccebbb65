from src.config_service.schemas.base import PartialUpdate, validate_payload
from src.config_service.schemas.environment import (
    EnvironmentCreate,
    EnvironmentRead,
    EnvironmentUpdate,
)
from src.config_service.schemas.health import (
    HealthReport,
    MessageResponse,
    PingResponse,
    ServiceHealth,
)
from src.config_service.schemas.pagination import PaginatedResponse
from src.config_service.schemas.tag import TagCreate, TagRead, TagUpdate
from src.config_service.schemas.template import TemplateCreate, TemplateRead, TemplateUpdate

__all__ = [
    # Base
    "PartialUpdate",
    "validate_payload",
    # Environment
    "EnvironmentCreate",
    "EnvironmentRead",
    "EnvironmentUpdate",
    # Health
    "HealthReport",
    "MessageResponse",
    "PingResponse",
    "ServiceHealth",
    # Pagination
    "PaginatedResponse",
    # Tag
    "TagCreate",
    "TagRead",
    "TagUpdate",
    # Template
    "TemplateCreate",
    "TemplateRead",
    "TemplateUpdate",
]
