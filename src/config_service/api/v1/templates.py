"""Template endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from src.config_service.api.dependencies import TemplateServiceDep
from src.config_service.core.validators import MAX_TEMPLATE_NAME_LENGTH
from src.config_service.models import ConfigFormat
from src.config_service.schemas.pagination import PaginatedResponse
from src.config_service.schemas.template import TemplateCreate, TemplateRead, TemplateUpdate

router = APIRouter(prefix="/templates", tags=["templates"])

TemplateId = Annotated[int, Path(ge=1, description="Template ID")]


@router.get(
    "",
    response_model=PaginatedResponse[TemplateRead],
    summary="List templates",
    description="List templates, newest first, with optional filters.",
)
async def list_templates(
    service: TemplateServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
    environment_id: Annotated[int | None, Query(ge=1)] = None,
    format: Annotated[ConfigFormat | None, Query()] = None,
    tag_id: Annotated[int | None, Query(ge=1)] = None,
    search: Annotated[
        str | None,
        Query(max_length=MAX_TEMPLATE_NAME_LENGTH, description="Match name or description"),
    ] = None,
) -> PaginatedResponse[TemplateRead]:
    templates, next_cursor, has_more = await service.list_templates(
        cursor,
        limit,
        active=active,
        environment_id=environment_id,
        format=format,
        tag_id=tag_id,
        search=search,
    )
    return PaginatedResponse(
        items=[TemplateRead.model_validate(t) for t in templates],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{template_id}",
    response_model=TemplateRead,
    summary="Get template",
    responses={404: {"description": "Template not found"}},
)
async def get_template(template_id: TemplateId, service: TemplateServiceDep) -> TemplateRead:
    return TemplateRead.model_validate(await service.get(template_id))


@router.post(
    "",
    response_model=TemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create template",
    responses={
        201: {"description": "Template created"},
        404: {"description": "Environment or tag not found"},
        409: {"description": "Name already used in this environment"},
        422: {"description": "Validation failed"},
    },
)
async def create_template(request: TemplateCreate, service: TemplateServiceDep) -> TemplateRead:
    return TemplateRead.model_validate(await service.create(request))


@router.patch(
    "/{template_id}",
    response_model=TemplateRead,
    summary="Update template",
    description=(
        "Partial update. Omitted fields are unchanged. Sending null for "
        "`description`, `schema`, `default_values` or `tag_ids` clears the field. "
        "`updated_by` is required."
    ),
    responses={
        404: {"description": "Template, environment or tag not found"},
        409: {"description": "Name already used in the target environment"},
    },
)
async def update_template(
    template_id: TemplateId, request: TemplateUpdate, service: TemplateServiceDep
) -> TemplateRead:
    return TemplateRead.model_validate(await service.update(template_id, request))


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete template",
    responses={404: {"description": "Template not found"}},
)
async def delete_template(template_id: TemplateId, service: TemplateServiceDep) -> None:
    await service.delete(template_id)
