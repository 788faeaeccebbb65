"""Environment management service."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from src.config_service.core.exceptions import ConflictError, NotFoundError
from src.config_service.core.metrics import record_entity_operation
from src.config_service.models import Environment
from src.config_service.repositories import EnvironmentRepository
from src.config_service.schemas.environment import EnvironmentCreate, EnvironmentUpdate
from src.config_service.services.base import BaseService


def _name_conflict(name: str) -> ConflictError:
    return ConflictError(f"Environment with name '{name}' already exists", field="name")


def _slug_conflict(slug: str) -> ConflictError:
    return ConflictError(f"Environment with slug '{slug}' already exists", field="slug")


class EnvironmentService(BaseService):
    """Environment CRUD. Deleting an environment deletes its templates."""

    def __init__(
        self,
        environment_repo: EnvironmentRepository,
        session: AsyncSession,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        super().__init__(session, logger)
        self.environment_repo = environment_repo

    @contextmanager
    def _recorded(self, operation: str) -> Iterator[None]:
        try:
            yield
        except Exception:
            record_entity_operation("environment", operation, "error")
            raise
        record_entity_operation("environment", operation, "success")

    async def _check_unique(
        self, name: str | None, slug: str | None, current: Environment | None = None
    ) -> None:
        if name is not None and (current is None or name != current.name):
            if await self.environment_repo.get_by_name(name) is not None:
                raise _name_conflict(name)
        if slug is not None and (current is None or slug != current.slug):
            if await self.environment_repo.get_by_slug(slug) is not None:
                raise _slug_conflict(slug)

    async def get(self, environment_id: int) -> Environment:
        environment = await self.environment_repo.get_by_id(environment_id)
        if environment is None:
            raise NotFoundError("Environment", environment_id)
        return environment

    async def get_by_slug(self, slug: str) -> Environment:
        environment = await self.environment_repo.get_by_slug(slug)
        if environment is None:
            raise NotFoundError("Environment", slug)
        return environment

    async def list_environments(
        self, cursor: str | None, limit: int, active: bool | None = None
    ) -> tuple[list[Environment], str | None, bool]:
        return await self.environment_repo.list_all(cursor, limit, active)

    async def create(self, data: EnvironmentCreate) -> Environment:
        with self._recorded("create"):
            await self._check_unique(data.name, data.slug)

            environment = Environment(**data.model_dump())
            self.environment_repo.add(environment)
            await self._commit(
                environment,
                conflict=lambda constraint: (
                    _slug_conflict(data.slug)
                    if constraint and "slug" in constraint
                    else _name_conflict(data.name)
                ),
            )
            self.logger.info(
                "Environment created", environment_id=environment.id, slug=environment.slug
            )
            return environment

    async def update(self, environment_id: int, data: EnvironmentUpdate) -> Environment:
        """Apply a partial update. Absent fields are left untouched."""
        with self._recorded("update"):
            environment = await self.get(environment_id)
            changes = data.changes()
            await self._check_unique(changes.get("name"), changes.get("slug"), environment)

            self._apply_changes(environment, changes)
            await self._commit(
                environment,
                conflict=lambda constraint: (
                    _slug_conflict(changes.get("slug", ""))
                    if constraint and "slug" in constraint
                    else _name_conflict(changes.get("name", ""))
                ),
            )
            self.logger.info(
                "Environment updated", environment_id=environment.id, fields=sorted(changes)
            )
            return environment

    async def delete(self, environment_id: int) -> None:
        """Delete an environment; its templates go with it (ON DELETE CASCADE)."""
        with self._recorded("delete"):
            environment = await self.get(environment_id)
            await self.environment_repo.delete(environment)
            await self._commit()
            self.logger.info("Environment deleted", environment_id=environment_id)
