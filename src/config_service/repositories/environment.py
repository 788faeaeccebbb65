"""Repository for Environment entity."""

from sqlmodel import select

from src.config_service.models import Environment
from src.config_service.repositories.base import BaseRepository


class EnvironmentRepository(BaseRepository[Environment]):
    model = Environment

    async def list_all(
        self,
        cursor: str | None = None,
        limit: int = 50,
        active: bool | None = None,
    ) -> tuple[list[Environment], str | None, bool]:
        """List environments with cursor-based pagination.

        Args:
            cursor: Optional cursor for pagination
            limit: Maximum number of results
            active: Only environments with this active flag, if given

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Environment)
        if active is not None:
            query = query.where(Environment.active == active)
        return await self.paginate(query, cursor, limit)

    async def get_by_name(self, name: str) -> Environment | None:
        result = await self.session.execute(select(Environment).where(Environment.name == name))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Environment | None:
        result = await self.session.execute(select(Environment).where(Environment.slug == slug))
        return result.scalar_one_or_none()
