"""Environment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from src.config_service.api.dependencies import EnvironmentServiceDep
from src.config_service.core.validators import MAX_ENVIRONMENT_SLUG_LENGTH
from src.config_service.schemas.environment import (
    EnvironmentCreate,
    EnvironmentRead,
    EnvironmentUpdate,
)
from src.config_service.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/environments", tags=["environments"])

EnvironmentId = Annotated[int, Path(ge=1, description="Environment ID")]


@router.get(
    "",
    response_model=PaginatedResponse[EnvironmentRead],
    summary="List environments",
    description="List environments, newest first, with cursor-based pagination.",
)
async def list_environments(
    service: EnvironmentServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
) -> PaginatedResponse[EnvironmentRead]:
    environments, next_cursor, has_more = await service.list_environments(
        cursor, limit, active
    )
    return PaginatedResponse(
        items=[EnvironmentRead.model_validate(e) for e in environments],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/slug/{slug}",
    response_model=EnvironmentRead,
    summary="Get environment by slug",
    responses={404: {"description": "Environment not found"}},
)
async def get_environment_by_slug(
    slug: Annotated[str, Path(min_length=1, max_length=MAX_ENVIRONMENT_SLUG_LENGTH)],
    service: EnvironmentServiceDep,
) -> EnvironmentRead:
    return EnvironmentRead.model_validate(await service.get_by_slug(slug))


@router.get(
    "/{environment_id}",
    response_model=EnvironmentRead,
    summary="Get environment",
    responses={404: {"description": "Environment not found"}},
)
async def get_environment(
    environment_id: EnvironmentId, service: EnvironmentServiceDep
) -> EnvironmentRead:
    return EnvironmentRead.model_validate(await service.get(environment_id))


@router.post(
    "",
    response_model=EnvironmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create environment",
    responses={
        201: {"description": "Environment created"},
        409: {"description": "Name or slug already in use"},
        422: {"description": "Validation failed"},
    },
)
async def create_environment(
    request: EnvironmentCreate, service: EnvironmentServiceDep
) -> EnvironmentRead:
    return EnvironmentRead.model_validate(await service.create(request))


@router.patch(
    "/{environment_id}",
    response_model=EnvironmentRead,
    summary="Update environment",
    description="Partial update. Omitted fields are unchanged; `description: null` clears it.",
    responses={
        404: {"description": "Environment not found"},
        409: {"description": "Name or slug already in use"},
    },
)
async def update_environment(
    environment_id: EnvironmentId,
    request: EnvironmentUpdate,
    service: EnvironmentServiceDep,
) -> EnvironmentRead:
    return EnvironmentRead.model_validate(await service.update(environment_id, request))


@router.delete(
    "/{environment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete environment",
    description="Delete an environment together with all of its templates.",
    responses={404: {"description": "Environment not found"}},
)
async def delete_environment(
    environment_id: EnvironmentId, service: EnvironmentServiceDep
) -> None:
    await service.delete(environment_id)
