"""Field format validators shared by request schemas."""

import json
import math
import re
from typing import Any, Final

MAX_TAG_NAME_LENGTH: Final[int] = 100
MAX_ENVIRONMENT_NAME_LENGTH: Final[int] = 100
MAX_ENVIRONMENT_SLUG_LENGTH: Final[int] = 100
MAX_TEMPLATE_NAME_LENGTH: Final[int] = 200
MAX_SHORT_DESCRIPTION_LENGTH: Final[int] = 500
MAX_LONG_DESCRIPTION_LENGTH: Final[int] = 1000
MAX_VERSION_LENGTH: Final[int] = 50
MAX_ACTOR_LENGTH: Final[int] = 100
MIN_PRIORITY: Final[int] = 0
MAX_PRIORITY: Final[int] = 100
DEFAULT_PRIORITY: Final[int] = 50
DEFAULT_TAG_COLOR: Final[str] = "#6b7280"

# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
SEMVER_REGEX: Final[str] = (
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)
# Column is VARCHAR(7): short and long forms only
HEX_COLOR_REGEX: Final[str] = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"
SLUG_REGEX: Final[str] = r"^[a-zA-Z0-9]+$"

_SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(SEMVER_REGEX)
_HEX_COLOR_PATTERN: Final[re.Pattern[str]] = re.compile(HEX_COLOR_REGEX)
_SLUG_PATTERN: Final[re.Pattern[str]] = re.compile(SLUG_REGEX, re.ASCII)


def validate_semver(version: str) -> str:
    """Validate a semantic version string (e.g. 1.0.0, 2.1.0-rc.1+build.5)."""
    if not _SEMVER_PATTERN.fullmatch(version):
        raise ValueError("Version must be a semantic version such as 1.0.0")
    return version


def validate_hex_color(color: str) -> str:
    """Validate a hex color in #rgb or #rrggbb form."""
    if not _HEX_COLOR_PATTERN.fullmatch(color):
        raise ValueError("Color must be a hex color such as #6b7280")
    return color


def validate_slug_format(slug: str) -> str:
    """Validate an environment slug (ASCII letters and digits only).

    This validates **format only**. Length is enforced by Field(max_length=...).
    """
    if not _SLUG_PATTERN.fullmatch(slug):
        raise ValueError("Slug must contain only letters and digits")
    return slug


def _check_finite(value: Any) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Document values must be finite numbers")
    if isinstance(value, dict):
        for item in value.values():
            _check_finite(item)
    elif isinstance(value, list):
        for item in value:
            _check_finite(item)


def validate_document(document: dict[str, Any]) -> dict[str, Any]:
    """Validate that a structured document round-trips through JSON unchanged.

    The inner shape is not validated; keys must be strings and values JSON
    scalars, arrays or objects.
    """
    _check_finite(document)
    try:
        encoded = json.dumps(document, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValueError("Document must contain only JSON values") from e
    if json.loads(encoded) != document:
        raise ValueError("Document must contain only JSON values")
    return document
