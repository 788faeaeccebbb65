"""Keyset pagination: the response envelope and its opaque cursor."""

import base64
import binascii
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

_CURSOR_PREFIX = "id:"
# Largest BIGINT primary key
_MAX_ID = 2**63 - 1


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results, newest first.

    ``next_cursor`` is opaque; clients pass it back unchanged to get the next page.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for the next page. Null on the last page.",
    )
    has_more: bool = Field(default=False, description="Whether another page follows.")


def encode_cursor(last_id: int) -> str:
    """Cursor pointing just past the row with primary key ``last_id``."""
    return base64.urlsafe_b64encode(f"{_CURSOR_PREFIX}{last_id}".encode()).decode()


def decode_cursor(cursor: str) -> int:
    """Primary key a cursor points past.

    Raises:
        ValueError: The cursor was not produced by :func:`encode_cursor`.
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError("Invalid cursor") from e
    if not raw.startswith(_CURSOR_PREFIX):
        raise ValueError("Invalid cursor")
    last_id = int(raw.removeprefix(_CURSOR_PREFIX))
    if not 1 <= last_id <= _MAX_ID:
        raise ValueError("Invalid cursor")
    return last_id
