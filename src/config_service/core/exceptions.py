"""Domain errors and exception handlers with request_id in responses."""

from collections.abc import Iterable, Mapping
from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config_service.core.logging import get_logger

logger = get_logger(__name__)

# Location prefixes FastAPI adds in front of the field path
_REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})
_VALUE_ERROR_PREFIX = "Value error, "


class ServiceError(Exception):
    """Base class for errors that map to a structured API response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(self, message: str, details: Mapping[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else None

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(ServiceError):
    """One or more request fields violate their constraints."""

    status_code = 422
    error = "validation_failed"

    def __init__(self, errors: Mapping[str, str], message: str = "Request validation failed"):
        super().__init__(message, errors)
        self.errors = dict(errors)


class NotFoundError(ServiceError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(ServiceError):
    """A uniqueness constraint was violated."""

    status_code = status.HTTP_409_CONFLICT
    error = "conflict"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {field: message} if field else None)
        self.field = field


class DependencyUnavailable(ServiceError):
    """The data store or cache could not be reached in time."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "service_unavailable"

    def __init__(self, dependency: str, reason: str | None = None):
        super().__init__(f"{dependency} unavailable" + (f": {reason}" if reason else ""))
        self.dependency = dependency

    @property
    def public_message(self) -> str:
        return "Service temporarily unavailable"


class InternalError(ServiceError):
    """Unexpected failure. The message is logged, never returned."""

    @property
    def public_message(self) -> str:
        return "Internal server error"


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def errors_to_field_map(errors: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Collapse pydantic error entries into a {field: reason} mapping.

    Several violations on the same field are joined with "; ".
    """
    fields: dict[str, str] = {}
    for err in errors:
        name = _field_name(err.get("loc", ()))
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith(_VALUE_ERROR_PREFIX):
            msg = msg[len(_VALUE_ERROR_PREFIX) :]
        fields[name] = f"{fields[name]}; {msg}" if name in fields else msg
    return fields


def error_body(error: str, message: str, details: Mapping[str, str] | None = None) -> dict:
    body: dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": correlation_id.get(),
    }
    if details:
        body["details"] = dict(details)
    return body


def _render_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            error=exc.error,
            detail=exc.message,
            path=request.url.path,
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.info(
            "Request rejected",
            error=exc.error,
            detail=exc.message,
            path=request.url.path,
        )
    details = exc.details if exc.status_code < 500 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.public_message, details),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _render_service_error(request, exc)

    async def storage_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
        error = DependencyUnavailable("database", str(exc))
        error.__cause__ = exc
        return _render_service_error(request, error)

    # Connection loss and pool/connect timeouts, not constraint violations
    for exc_class in (
        OperationalError,
        InterfaceError,
        PoolTimeoutError,
        ConnectionError,
        TimeoutError,
    ):
        app.add_exception_handler(exc_class, storage_unavailable_handler)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_body(
                ValidationError.error,
                "Request validation failed",
                errors_to_field_map(exc.errors()),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=error_body(InternalError.error, "Internal server error"),
        )
