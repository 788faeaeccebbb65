"""Tag management service."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from src.config_service.core.exceptions import ConflictError, NotFoundError
from src.config_service.core.metrics import record_entity_operation
from src.config_service.models import Tag
from src.config_service.repositories import TagRepository
from src.config_service.schemas.tag import TagCreate, TagUpdate
from src.config_service.services.base import BaseService


def _name_conflict(name: str) -> ConflictError:
    return ConflictError(f"Tag with name '{name}' already exists", field="name")


class TagService(BaseService):
    """Tag CRUD. Deleting a tag drops its template links, never the templates."""

    def __init__(
        self,
        tag_repo: TagRepository,
        session: AsyncSession,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        super().__init__(session, logger)
        self.tag_repo = tag_repo

    @contextmanager
    def _recorded(self, operation: str) -> Iterator[None]:
        try:
            yield
        except Exception:
            record_entity_operation("tag", operation, "error")
            raise
        record_entity_operation("tag", operation, "success")

    async def get(self, tag_id: int) -> Tag:
        tag = await self.tag_repo.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def list_tags(
        self, cursor: str | None, limit: int
    ) -> tuple[list[Tag], str | None, bool]:
        return await self.tag_repo.list_all(cursor, limit)

    async def create(self, data: TagCreate) -> Tag:
        with self._recorded("create"):
            if await self.tag_repo.get_by_name(data.name) is not None:
                raise _name_conflict(data.name)

            tag = Tag(**data.model_dump())
            self.tag_repo.add(tag)
            await self._commit(tag, conflict=_name_conflict(data.name))
            self.logger.info("Tag created", tag_id=tag.id, name=tag.name)
            return tag

    async def update(self, tag_id: int, data: TagUpdate) -> Tag:
        """Apply a partial update. Absent fields are left untouched."""
        with self._recorded("update"):
            tag = await self.get(tag_id)
            changes = data.changes()

            new_name = changes.get("name")
            if new_name is not None and new_name != tag.name:
                if await self.tag_repo.get_by_name(new_name) is not None:
                    raise _name_conflict(new_name)

            self._apply_changes(tag, changes)
            await self._commit(tag, conflict=_name_conflict(new_name or tag.name))
            self.logger.info("Tag updated", tag_id=tag.id, fields=sorted(changes))
            return tag

    async def delete(self, tag_id: int) -> None:
        with self._recorded("delete"):
            tag = await self.get(tag_id)
            await self.tag_repo.delete(tag)
            await self._commit()
            self.logger.info("Tag deleted", tag_id=tag_id)
