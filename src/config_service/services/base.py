"""Shared transaction handling for entity services."""

from collections.abc import Callable
from typing import Any

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from src.config_service.core.db.errors import translate_integrity_error
from src.config_service.core.exceptions import ConflictError, NotFoundError
from src.config_service.core.logging import get_logger


class BaseService:
    """Owns the session's transaction: services commit, repositories don't."""

    def __init__(
        self,
        session: AsyncSession,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.session = session
        self.logger = logger or get_logger(type(self).__module__)

    async def _commit(
        self,
        entity: SQLModel | None = None,
        *,
        conflict: ConflictError | Callable[[str | None], ConflictError] | None = None,
        missing: NotFoundError | Callable[[str | None], NotFoundError] | None = None,
    ) -> None:
        """Commit and refresh ``entity``, translating constraint violations.

        The store's constraints are the last word on uniqueness and references;
        a concurrent writer that slipped past the pre-checks lands here.
        """
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise translate_integrity_error(e, conflict=conflict, missing=missing) from e
        except Exception:
            await self.session.rollback()
            raise
        if entity is not None:
            await self.session.refresh(entity)

    @staticmethod
    def _apply_changes(entity: SQLModel, changes: dict[str, Any]) -> None:
        """Set changed columns and force an UPDATE so updated_at always advances."""
        for field, value in changes.items():
            setattr(entity, field, value)
        entity.updated_at = func.now()  # type: ignore[attr-defined]
