"""Tests for cursor encoding and keyset pagination."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.config_service.models import Tag
from src.config_service.repositories import TagRepository
from src.config_service.schemas.pagination import decode_cursor, encode_cursor
from tests.factories import TagFactory

pytestmark = pytest.mark.unit


def test_cursor_roundtrip():
    assert decode_cursor(encode_cursor(42)) == 42


@pytest.mark.parametrize(
    "cursor",
    [
        "abc",
        encode_cursor(0),
        encode_cursor(2**63),  # past the BIGINT range
        "aWQ6eHl6",  # id:xyz
        "NDI=",  # 42 without the prefix
    ],
)
def test_invalid_cursor(cursor: str):
    with pytest.raises(ValueError):
        decode_cursor(cursor)


def result_with(rows: list[Tag]) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


@pytest.mark.asyncio
class TestPaginate:
    async def test_extra_row_means_more(self):
        rows = [TagFactory.build(id=i) for i in (30, 20, 10)]
        session = MagicMock(spec=AsyncSession)
        session.execute.return_value = result_with(rows)

        items, next_cursor, has_more = await TagRepository(session).paginate(
            select(Tag), None, 2
        )

        assert [t.id for t in items] == [30, 20]
        assert has_more is True
        assert decode_cursor(next_cursor) == 20

    async def test_last_page(self):
        session = MagicMock(spec=AsyncSession)
        session.execute.return_value = result_with([TagFactory.build(id=5)])

        items, next_cursor, has_more = await TagRepository(session).paginate(
            select(Tag), encode_cursor(10), 2
        )

        assert len(items) == 1
        assert (next_cursor, has_more) == (None, False)
        query = str(session.execute.call_args.args[0])
        assert "tags.id <" in query
        assert "ORDER BY tags.id DESC" in query

    async def test_garbage_cursor_starts_from_top(self):
        session = MagicMock(spec=AsyncSession)
        session.execute.return_value = result_with([])

        items, next_cursor, has_more = await TagRepository(session).paginate(
            select(Tag), "not-a-cursor", 2
        )

        assert (items, next_cursor, has_more) == ([], None, False)
        assert "tags.id <" not in str(session.execute.call_args.args[0])
