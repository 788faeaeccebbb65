"""Shared data access for entities keyed by a bigint primary key."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from src.config_service.schemas.pagination import decode_cursor, encode_cursor


class BaseRepository[ModelType: SQLModel]:
    """Lookups and keyset paging over one table.

    Repositories never commit; the service owning the unit of work does.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        return await self.session.get(self.model, id)

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)

    async def paginate(
        self, query: Any, cursor: str | None, limit: int
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run ``query`` one page at a time, highest id first.

        An unreadable cursor restarts from the first page.

        Returns:
            (items, next_cursor, has_more)
        """
        pk = self.model.id  # type: ignore[attr-defined]
        if cursor:
            try:
                query = query.where(pk < decode_cursor(cursor))
            except ValueError:
                pass

        # One extra row tells us whether another page exists
        result = await self.session.execute(query.order_by(pk.desc()).limit(limit + 1))
        items = list(result.scalars().all())
        has_more = len(items) > limit
        del items[limit:]

        next_cursor = encode_cursor(items[-1].id) if has_more else None  # type: ignore[attr-defined]
        return items, next_cursor, has_more
