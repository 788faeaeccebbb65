"""Template management service."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from src.config_service.core.exceptions import ConflictError, NotFoundError
from src.config_service.core.metrics import observe_template_size, record_template_operation
from src.config_service.models import ConfigFormat, Environment, Tag, Template
from src.config_service.repositories import (
    EnvironmentRepository,
    TagRepository,
    TemplateRepository,
)
from src.config_service.schemas.template import TemplateCreate, TemplateUpdate
from src.config_service.services.base import BaseService


def _name_conflict(name: str, environment_id: int) -> ConflictError:
    return ConflictError(
        f"Template with name '{name}' already exists in environment {environment_id}",
        field="name",
    )


class TemplateService(BaseService):
    """Template CRUD including environment and tag references."""

    def __init__(
        self,
        template_repo: TemplateRepository,
        environment_repo: EnvironmentRepository,
        tag_repo: TagRepository,
        session: AsyncSession,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        super().__init__(session, logger)
        self.template_repo = template_repo
        self.environment_repo = environment_repo
        self.tag_repo = tag_repo

    @contextmanager
    def _recorded(self, operation: str, environment: str) -> Iterator[None]:
        try:
            yield
        except Exception:
            record_template_operation(operation, environment, "error")
            raise
        record_template_operation(operation, environment, "success")

    async def _environment(self, environment_id: int) -> Environment:
        environment = await self.environment_repo.get_by_id(environment_id)
        if environment is None:
            raise NotFoundError("Environment", environment_id)
        return environment

    async def _tags(self, tag_ids: list[int]) -> list[Tag]:
        tags = await self.tag_repo.get_many(tag_ids)
        missing = sorted(set(tag_ids) - {tag.id for tag in tags})
        if missing:
            raise NotFoundError("Tag", ", ".join(str(i) for i in missing))
        return tags

    @staticmethod
    def _missing_reference(
        environment_id: int, tag_ids: list[int]
    ) -> Callable[[str | None], NotFoundError]:
        def pick(constraint: str | None) -> NotFoundError:
            if constraint and "tag_id" in constraint:
                return NotFoundError("Tag", ", ".join(str(i) for i in tag_ids))
            return NotFoundError("Environment", environment_id)

        return pick

    async def get(self, template_id: int) -> Template:
        template = await self.template_repo.get_by_id(template_id)
        if template is None:
            raise NotFoundError("Template", template_id)
        return template

    async def list_templates(
        self,
        cursor: str | None,
        limit: int,
        *,
        active: bool | None = None,
        environment_id: int | None = None,
        format: ConfigFormat | None = None,
        tag_id: int | None = None,
        search: str | None = None,
    ) -> tuple[list[Template], str | None, bool]:
        return await self.template_repo.list_all(
            cursor,
            limit,
            active=active,
            environment_id=environment_id,
            format=format,
            tag_id=tag_id,
            search=search,
        )

    async def create(self, data: TemplateCreate) -> Template:
        """Create a template in an existing environment with existing tags.

        Raises:
            NotFoundError: The environment or one of the tags does not exist.
            ConflictError: The name is already used in that environment.
        """
        environment = await self._environment(data.environment_id)
        with self._recorded("create", environment.slug):
            tags = await self._tags(data.tag_ids)
            if await self.template_repo.get_by_name(data.name, environment.id) is not None:
                raise _name_conflict(data.name, environment.id)

            template = Template(
                **data.model_dump(exclude={"tag_ids"}),
                updated_by=data.created_by,
            )
            template.environment = environment
            template.tags = tags
            self.template_repo.add(template)
            await self._commit(
                template,
                conflict=_name_conflict(data.name, environment.id),
                missing=self._missing_reference(environment.id, data.tag_ids),
            )
            observe_template_size(template.format.value, template.content)
            self.logger.info(
                "Template created",
                template_id=template.id,
                name=template.name,
                environment=environment.slug,
            )
            return template

    async def update(self, template_id: int, data: TemplateUpdate) -> Template:
        """Apply a partial update.

        Absent fields are left untouched; null clears description, schema,
        default_values and tag_ids. ``updated_at`` always advances.
        """
        template = await self.get(template_id)
        environment = template.environment
        with self._recorded("update", environment.slug if environment else "unknown"):
            changes = data.changes()
            tag_ids = changes.pop("tag_ids", None)

            new_environment_id = changes.get("environment_id", template.environment_id)
            if new_environment_id != template.environment_id:
                environment = await self._environment(new_environment_id)
                template.environment = environment

            new_name = changes.get("name", template.name)
            if (new_name, new_environment_id) != (template.name, template.environment_id):
                existing = await self.template_repo.get_by_name(new_name, new_environment_id)
                if existing is not None and existing.id != template.id:
                    raise _name_conflict(new_name, new_environment_id)

            if tag_ids is not None:
                template.tags = await self._tags(tag_ids)

            self._apply_changes(template, changes)
            await self._commit(
                template,
                conflict=_name_conflict(new_name, new_environment_id),
                missing=self._missing_reference(new_environment_id, tag_ids or []),
            )
            if "content" in changes or "format" in changes:
                observe_template_size(template.format.value, template.content)
            self.logger.info(
                "Template updated",
                template_id=template.id,
                fields=sorted([*changes, *(["tag_ids"] if tag_ids is not None else [])]),
            )
            return template

    async def delete(self, template_id: int) -> None:
        template = await self.get(template_id)
        environment = template.environment
        with self._recorded("delete", environment.slug if environment else "unknown"):
            await self.template_repo.delete(template)
            await self._commit()
            self.logger.info("Template deleted", template_id=template_id)
