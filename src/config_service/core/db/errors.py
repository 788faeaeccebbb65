"""Translation of database constraint violations into domain errors."""

from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import DBAPIError

from src.config_service.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"

# Check constraints and the request field each one guards
CHECK_CONSTRAINT_FIELDS: dict[str, str] = {
    "environments_priority_check": "priority",
}


def _driver_errors(exc: DBAPIError) -> list[Any]:
    # asyncpg errors arrive wrapped in SQLAlchemy's adapter, the original is the cause
    orig = exc.orig
    return [e for e in (orig, getattr(orig, "__cause__", None)) if e is not None]


def sqlstate(exc: DBAPIError) -> str | None:
    """SQLSTATE code of the failed statement (asyncpg or psycopg2)."""
    for err in _driver_errors(exc):
        code = getattr(err, "sqlstate", None) or getattr(err, "pgcode", None)
        if code:
            return str(code)
    return None


def constraint_name(exc: DBAPIError) -> str | None:
    """Name of the violated constraint, when the driver reports it."""
    for err in _driver_errors(exc):
        name = getattr(err, "constraint_name", None)
        if name:
            return str(name)
        diag = getattr(err, "diag", None)
        if diag is not None and getattr(diag, "constraint_name", None):
            return str(diag.constraint_name)
    return None


def translate_integrity_error(
    exc: DBAPIError,
    *,
    conflict: ConflictError | Callable[[str | None], ConflictError] | None = None,
    missing: NotFoundError | Callable[[str | None], NotFoundError] | None = None,
) -> ServiceError:
    """Map an integrity violation onto the error the caller should raise.

    Args:
        exc: The IntegrityError raised on flush/commit.
        conflict: Error to use for a unique violation, or a callable that picks
            one from the violated constraint name.
        missing: Error to use for a foreign key violation, or a callable that
            picks one from the violated constraint name.

    Returns:
        The domain error. Unknown violations become an opaque InternalError.
    """
    code = sqlstate(exc)
    if code == UNIQUE_VIOLATION and conflict is not None:
        if callable(conflict):
            return conflict(constraint_name(exc))
        return conflict
    if code == FOREIGN_KEY_VIOLATION and missing is not None:
        if callable(missing):
            return missing(constraint_name(exc))
        return missing
    if code == CHECK_VIOLATION:
        name = constraint_name(exc) or ""
        field = CHECK_CONSTRAINT_FIELDS.get(name, "body")
        return ValidationError({field: f"Value violates constraint {name}".rstrip()})
    return InternalError(f"Unhandled integrity error ({code}): {exc.orig}")
