"""Shared column helpers for models."""

from typing import Any

from sqlalchemy import BigInteger, DateTime, FetchedValue, func
from sqlmodel import Field


def id_field() -> Any:
    """Bigint surrogate key generated by the database (BIGSERIAL)."""
    return Field(default=None, primary_key=True, sa_type=BigInteger)


def created_at_field() -> Any:
    """Insert timestamp set by the database (DEFAULT now())."""
    return Field(
        default=None,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
    )


def updated_at_field() -> Any:
    """Update timestamp maintained server-side by the update_updated_at_column trigger.

    FetchedValue marks the column as changed by the database on UPDATE so the
    ORM expires it after every flush.
    """
    return Field(
        default=None,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "server_onupdate": FetchedValue()},
    )
