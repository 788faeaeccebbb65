"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import TagFactory, EnvironmentFactory, ...
"""

from tests.factories.base import BaseFactory, next_id, unique_suffix, utc_now
from tests.factories.entities import EnvironmentFactory, TagFactory, TemplateFactory

__all__ = [
    # Base
    "BaseFactory",
    "next_id",
    "unique_suffix",
    "utc_now",
    # Entities
    "EnvironmentFactory",
    "TagFactory",
    "TemplateFactory",
]
