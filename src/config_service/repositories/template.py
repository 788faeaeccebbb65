"""Repository for Template entity."""

from sqlmodel import col, or_, select

from src.config_service.models import ConfigFormat, Template, TemplateTag
from src.config_service.repositories.base import BaseRepository


class TemplateRepository(BaseRepository[Template]):
    """Templates load their environment and tags eagerly (selectin)."""

    model = Template

    async def list_all(
        self,
        cursor: str | None = None,
        limit: int = 50,
        *,
        active: bool | None = None,
        environment_id: int | None = None,
        format: ConfigFormat | None = None,
        tag_id: int | None = None,
        search: str | None = None,
    ) -> tuple[list[Template], str | None, bool]:
        """List templates with cursor-based pagination and optional filters.

        Args:
            cursor: Optional cursor for pagination
            limit: Maximum number of results
            active: Only templates with this active flag
            environment_id: Only templates in this environment
            format: Only templates in this format
            tag_id: Only templates carrying this tag
            search: Case-insensitive substring of name or description

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Template)
        if active is not None:
            query = query.where(Template.active == active)
        if environment_id is not None:
            query = query.where(Template.environment_id == environment_id)
        if format is not None:
            query = query.where(Template.format == format)
        if tag_id is not None:
            tagged = select(TemplateTag.template_id).where(TemplateTag.tag_id == tag_id)
            query = query.where(col(Template.id).in_(tagged))
        if search:
            query = query.where(
                or_(
                    col(Template.name).icontains(search, autoescape=True),
                    col(Template.description).icontains(search, autoescape=True),
                )
            )
        return await self.paginate(query, cursor, limit)

    async def get_by_name(self, name: str, environment_id: int) -> Template | None:
        result = await self.session.execute(
            select(Template).where(
                Template.name == name,
                Template.environment_id == environment_id,
            )
        )
        return result.scalar_one_or_none()
