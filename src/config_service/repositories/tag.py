"""Repository for Tag entity."""

from collections.abc import Iterable

from sqlmodel import select

from src.config_service.models import Tag
from src.config_service.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    model = Tag

    async def list_all(
        self,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Tag], str | None, bool]:
        """List tags with cursor-based pagination."""
        return await self.paginate(select(Tag), cursor, limit)

    async def get_by_name(self, name: str) -> Tag | None:
        result = await self.session.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, ids: Iterable[int]) -> list[Tag]:
        """Fetch the tags with the given ids; missing ids are simply absent."""
        ids = list(ids)
        if not ids:
            return []
        result = await self.session.execute(select(Tag).where(Tag.id.in_(ids)))  # type: ignore[union-attr]
        return list(result.scalars().all())
