"""Database session dependency."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config_service.core.db import get_session


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Get a session from the factory created at startup."""
    async with get_session(request.app.state.session_factory) as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
