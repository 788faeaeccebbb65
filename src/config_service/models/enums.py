"""Shared enums for models."""

from enum import Enum


class ConfigFormat(str, Enum):
    """Format of a template's raw content."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    ENV = "env"
