"""Unit tests for entity services with mocked repositories and session."""

from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config_service.core.exceptions import ConflictError, NotFoundError
from src.config_service.models import ConfigFormat, Tag, Template
from src.config_service.repositories import (
    EnvironmentRepository,
    TagRepository,
    TemplateRepository,
)
from src.config_service.schemas import (
    EnvironmentCreate,
    EnvironmentUpdate,
    TagCreate,
    TagUpdate,
    TemplateCreate,
    TemplateUpdate,
)
from src.config_service.services import EnvironmentService, TagService, TemplateService
from tests.factories import EnvironmentFactory, TagFactory, TemplateFactory

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


class DriverError(Exception):
    def __init__(self, sqlstate: str, constraint_name: str):
        super().__init__(sqlstate)
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


def integrity_error(sqlstate: str, constraint: str) -> IntegrityError:
    return IntegrityError("COMMIT", {}, DriverError(sqlstate, constraint))


def sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=AsyncSession)


@pytest.fixture
def tag_repo() -> MagicMock:
    repo = MagicMock(spec=TagRepository)
    repo.get_by_name.return_value = None
    return repo


@pytest.fixture
def environment_repo() -> MagicMock:
    repo = MagicMock(spec=EnvironmentRepository)
    repo.get_by_name.return_value = None
    repo.get_by_slug.return_value = None
    return repo


@pytest.fixture
def template_repo() -> MagicMock:
    repo = MagicMock(spec=TemplateRepository)
    repo.get_by_name.return_value = None
    return repo


class TestTagService:
    async def test_create_commits_and_refreshes(self, tag_repo, session):
        service = TagService(tag_repo, session)

        tag = await service.create(TagCreate(name="api", color="#10b981"))

        assert isinstance(tag, Tag)
        assert (tag.name, tag.color, tag.description) == ("api", "#10b981", "")
        tag_repo.add.assert_called_once_with(tag)
        session.commit.assert_awaited_once()
        session.refresh.assert_awaited_once_with(tag)

    async def test_create_duplicate_name_rejected_before_insert(self, tag_repo, session):
        tag_repo.get_by_name.return_value = TagFactory.build(name="api")
        service = TagService(tag_repo, session)

        with pytest.raises(ConflictError) as exc_info:
            await service.create(TagCreate(name="api"))

        assert exc_info.value.field == "name"
        tag_repo.add.assert_not_called()
        session.commit.assert_not_awaited()

    async def test_concurrent_duplicate_surfaces_as_conflict(self, tag_repo, session):
        session.commit.side_effect = integrity_error("23505", "tags_name_key")
        service = TagService(tag_repo, session)
        before = sample(
            "config_entity_operations_total", entity="tag", operation="create", status="error"
        )

        with pytest.raises(ConflictError):
            await service.create(TagCreate(name="api"))

        session.rollback.assert_awaited_once()
        after = sample(
            "config_entity_operations_total", entity="tag", operation="create", status="error"
        )
        assert after == before + 1

    async def test_get_missing(self, tag_repo, session):
        tag_repo.get_by_id.return_value = None
        with pytest.raises(NotFoundError) as exc_info:
            await TagService(tag_repo, session).get(99)
        assert exc_info.value.message == "Tag 99 not found"

    async def test_update_changes_only_sent_fields(self, tag_repo, session):
        tag = TagFactory.build(name="api", description="API configs", color="#10b981")
        tag_repo.get_by_id.return_value = tag

        await TagService(tag_repo, session).update(tag.id, TagUpdate(color="#fff"))

        assert (tag.name, tag.description, tag.color) == ("api", "API configs", "#fff")
        tag_repo.get_by_name.assert_not_called()
        session.commit.assert_awaited_once()

    async def test_update_without_changes_still_touches_row(self, tag_repo, session):
        tag = TagFactory.build()
        original = tag.updated_at
        tag_repo.get_by_id.return_value = tag

        await TagService(tag_repo, session).update(tag.id, TagUpdate())

        assert tag.updated_at is not original
        session.commit.assert_awaited_once()

    async def test_rename_to_taken_name_conflicts(self, tag_repo, session):
        tag = TagFactory.build(name="api")
        tag_repo.get_by_id.return_value = tag
        tag_repo.get_by_name.return_value = TagFactory.build(name="security")

        with pytest.raises(ConflictError):
            await TagService(tag_repo, session).update(tag.id, TagUpdate(name="security"))
        session.commit.assert_not_awaited()

    async def test_delete(self, tag_repo, session):
        tag = TagFactory.build()
        tag_repo.get_by_id.return_value = tag

        await TagService(tag_repo, session).delete(tag.id)

        tag_repo.delete.assert_awaited_once_with(tag)
        session.commit.assert_awaited_once()


class TestEnvironmentService:
    async def test_create(self, environment_repo, session):
        service = EnvironmentService(environment_repo, session)

        env = await service.create(EnvironmentCreate(name="Development", slug="dev", priority=10))

        assert (env.name, env.slug, env.priority, env.active) == ("Development", "dev", 10, True)
        session.commit.assert_awaited_once()

    async def test_slug_taken(self, environment_repo, session):
        environment_repo.get_by_slug.return_value = EnvironmentFactory.build(slug="dev")

        with pytest.raises(ConflictError) as exc_info:
            await EnvironmentService(environment_repo, session).create(
                EnvironmentCreate(name="Dev 2", slug="dev")
            )
        assert exc_info.value.field == "slug"

    @pytest.mark.parametrize(
        ("constraint", "field"),
        [("environments_slug_key", "slug"), ("environments_name_key", "name")],
    )
    async def test_race_reports_violated_column(self, environment_repo, session, constraint, field):
        session.commit.side_effect = integrity_error("23505", constraint)

        with pytest.raises(ConflictError) as exc_info:
            await EnvironmentService(environment_repo, session).create(
                EnvironmentCreate(name="Dev", slug="dev")
            )
        assert exc_info.value.field == field

    async def test_update_same_slug_skips_uniqueness_lookup(self, environment_repo, session):
        env = EnvironmentFactory.build(slug="dev", priority=10)
        environment_repo.get_by_id.return_value = env

        await EnvironmentService(environment_repo, session).update(
            env.id, EnvironmentUpdate(slug="dev", priority=100)
        )

        environment_repo.get_by_slug.assert_not_called()
        assert env.priority == 100

    async def test_get_by_slug_missing(self, environment_repo, session):
        with pytest.raises(NotFoundError) as exc_info:
            await EnvironmentService(environment_repo, session).get_by_slug("qa")
        assert exc_info.value.message == "Environment qa not found"


class TestTemplateService:
    @pytest.fixture
    def service(self, template_repo, environment_repo, tag_repo, session) -> TemplateService:
        return TemplateService(template_repo, environment_repo, tag_repo, session)

    def _create(self, environment_id: int, **overrides) -> TemplateCreate:
        return TemplateCreate.model_validate(
            {
                "name": "db-config",
                "format": "yaml",
                "content": "a: 1",
                "version": "1.0.0",
                "environment_id": environment_id,
                "created_by": "alice",
                **overrides,
            }
        )

    async def test_create_resolves_references(self, service, environment_repo, tag_repo, session):
        env = EnvironmentFactory.build(slug="dev")
        tags = [TagFactory.build(), TagFactory.build()]
        environment_repo.get_by_id.return_value = env
        tag_repo.get_many.return_value = tags
        before = sample(
            "config_template_operations_total",
            operation="create",
            environment="dev",
            status="success",
        )

        template = await service.create(self._create(env.id, tag_ids=[t.id for t in tags]))

        assert isinstance(template, Template)
        assert template.environment is env
        assert template.tags == tags
        assert template.updated_by == "alice"
        assert template.format is ConfigFormat.YAML
        session.commit.assert_awaited_once()
        after = sample(
            "config_template_operations_total",
            operation="create",
            environment="dev",
            status="success",
        )
        assert after == before + 1

    async def test_create_in_missing_environment(self, service, environment_repo, tag_repo):
        environment_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await service.create(self._create(404))

        assert exc_info.value.message == "Environment 404 not found"
        tag_repo.get_many.assert_not_called()

    async def test_create_with_missing_tags_lists_them(self, service, environment_repo, tag_repo):
        environment_repo.get_by_id.return_value = EnvironmentFactory.build()
        existing = TagFactory.build()
        tag_repo.get_many.return_value = [existing]

        with pytest.raises(NotFoundError) as exc_info:
            await service.create(self._create(1, tag_ids=[existing.id, 999_999, 999_998]))

        assert exc_info.value.message == "Tag 999998, 999999 not found"

    async def test_create_name_taken_in_environment(self, service, environment_repo, template_repo):
        env = EnvironmentFactory.build()
        environment_repo.get_by_id.return_value = env
        template_repo.get_by_name.return_value = TemplateFactory.build(environment_id=env.id)

        with pytest.raises(ConflictError):
            await service.create(self._create(env.id))

    async def test_tag_deleted_concurrently(self, service, environment_repo, tag_repo, session):
        environment_repo.get_by_id.return_value = EnvironmentFactory.build()
        tag = TagFactory.build()
        tag_repo.get_many.return_value = [tag]
        session.commit.side_effect = integrity_error("23503", "template_tags_tag_id_fkey")

        with pytest.raises(NotFoundError) as exc_info:
            await service.create(self._create(1, tag_ids=[tag.id]))

        assert exc_info.value.entity == "Tag"

    async def test_environment_deleted_concurrently(self, service, environment_repo, session):
        env = EnvironmentFactory.build()
        environment_repo.get_by_id.return_value = env
        session.commit.side_effect = integrity_error("23503", "templates_environment_id_fkey")

        with pytest.raises(NotFoundError) as exc_info:
            await service.create(self._create(env.id))

        assert exc_info.value.entity == "Environment"

    async def test_update_description_leaves_other_fields(self, service, template_repo):
        env = EnvironmentFactory.build()
        template = TemplateFactory.build(
            environment_id=env.id,
            content="a: 1",
            format=ConfigFormat.YAML,
            version="1.0.0",
            default_values={"a": 1},
        )
        template.environment = env
        template.tags = [TagFactory.build()]
        template_repo.get_by_id.return_value = template

        await service.update(
            template.id, TemplateUpdate(description="Database settings", updated_by="bob")
        )

        assert template.description == "Database settings"
        assert template.updated_by == "bob"
        assert (template.content, template.format, template.version) == (
            "a: 1",
            ConfigFormat.YAML,
            "1.0.0",
        )
        assert template.default_values == {"a": 1}
        assert len(template.tags) == 1
        template_repo.get_by_name.assert_not_called()

    async def test_update_null_tag_ids_clears_tags(self, service, template_repo, tag_repo):
        template = TemplateFactory.build(environment_id=1)
        template.environment = EnvironmentFactory.build(id=1)
        template.tags = [TagFactory.build()]
        template_repo.get_by_id.return_value = template
        tag_repo.get_many.return_value = []

        await service.update(
            template.id, TemplateUpdate.model_validate({"tag_ids": None, "updated_by": "bob"})
        )

        assert template.tags == []

    async def test_move_to_environment_with_same_name(
        self, service, template_repo, environment_repo
    ):
        source = EnvironmentFactory.build()
        target = EnvironmentFactory.build()
        template = TemplateFactory.build(name="db-config", environment_id=source.id)
        template.environment = source
        template_repo.get_by_id.return_value = template
        environment_repo.get_by_id.return_value = target
        template_repo.get_by_name.return_value = TemplateFactory.build(
            name="db-config", environment_id=target.id
        )

        with pytest.raises(ConflictError):
            await service.update(
                template.id, TemplateUpdate(environment_id=target.id, updated_by="bob")
            )

    async def test_move_to_missing_environment(self, service, template_repo, environment_repo):
        template = TemplateFactory.build(environment_id=1)
        template.environment = EnvironmentFactory.build(id=1)
        template_repo.get_by_id.return_value = template
        environment_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.update(template.id, TemplateUpdate(environment_id=2, updated_by="bob"))

    async def test_delete_missing(self, service, template_repo):
        template_repo.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await service.delete(12345)
