"""Tag endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from src.config_service.api.dependencies import TagServiceDep
from src.config_service.schemas.pagination import PaginatedResponse
from src.config_service.schemas.tag import TagCreate, TagRead, TagUpdate

router = APIRouter(prefix="/tags", tags=["tags"])

TagId = Annotated[int, Path(ge=1, description="Tag ID")]


@router.get(
    "",
    response_model=PaginatedResponse[TagRead],
    summary="List tags",
    description="List tags, newest first, with cursor-based pagination.",
)
async def list_tags(
    service: TagServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[TagRead]:
    tags, next_cursor, has_more = await service.list_tags(cursor, limit)
    return PaginatedResponse(
        items=[TagRead.model_validate(t) for t in tags],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{tag_id}",
    response_model=TagRead,
    summary="Get tag",
    responses={404: {"description": "Tag not found"}},
)
async def get_tag(tag_id: TagId, service: TagServiceDep) -> TagRead:
    return TagRead.model_validate(await service.get(tag_id))


@router.post(
    "",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create tag",
    responses={
        201: {"description": "Tag created"},
        409: {"description": "Tag with this name already exists"},
        422: {"description": "Validation failed"},
    },
)
async def create_tag(request: TagCreate, service: TagServiceDep) -> TagRead:
    return TagRead.model_validate(await service.create(request))


@router.patch(
    "/{tag_id}",
    response_model=TagRead,
    summary="Update tag",
    description="Partial update. Omitted fields are unchanged; `description: null` clears it.",
    responses={
        404: {"description": "Tag not found"},
        409: {"description": "Tag with this name already exists"},
    },
)
async def update_tag(tag_id: TagId, request: TagUpdate, service: TagServiceDep) -> TagRead:
    return TagRead.model_validate(await service.update(tag_id, request))


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete tag",
    description="Delete a tag. Templates keep existing, minus this tag.",
    responses={404: {"description": "Tag not found"}},
)
async def delete_tag(tag_id: TagId, service: TagServiceDep) -> None:
    await service.delete(tag_id)
