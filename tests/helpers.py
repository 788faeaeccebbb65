"""Test helper functions for common data creation patterns."""

import asyncio
from typing import Any

from httpx import AsyncClient

from tests.factories import unique_suffix


def tag_payload(**overrides: Any) -> dict[str, Any]:
    return {"name": f"tag-{unique_suffix()}", "color": "#3b82f6", **overrides}


def environment_payload(**overrides: Any) -> dict[str, Any]:
    suffix = unique_suffix()
    return {"name": f"Environment {suffix}", "slug": f"env{suffix}", "priority": 50, **overrides}


def template_payload(environment_id: int, **overrides: Any) -> dict[str, Any]:
    return {
        "name": f"template-{unique_suffix()}",
        "format": "yaml",
        "content": "a: 1",
        "version": "1.0.0",
        "environment_id": environment_id,
        "created_by": "tester",
        **overrides,
    }


async def create_tag(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    """Create a tag through the API.

    Args:
        client: HTTP client bound to the app
        **overrides: Fields replacing the generated defaults

    Returns:
        The created tag as returned by the API
    """
    response = await client.post("/api/v1/tags", json=tag_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def create_environment(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    """Create an environment through the API."""
    response = await client.post("/api/v1/environments", json=environment_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def create_template(
    client: AsyncClient, environment_id: int, **overrides: Any
) -> dict[str, Any]:
    """Create a template in ``environment_id`` through the API."""
    response = await client.post(
        "/api/v1/templates", json=template_payload(environment_id, **overrides)
    )
    assert response.status_code == 201, response.text
    return response.json()


class FakeConnection:
    """Async connection stand-in that answers ``SELECT 1`` after ``delay``."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.delay = delay
        self.error = error
        self.executed: list[str] = []

    async def __aenter__(self) -> "FakeConnection":
        if self.error is not None:
            raise self.error
        await asyncio.sleep(self.delay)
        return self

    async def __aexit__(self, *exc_info: object) -> bool:
        return False

    async def execute(self, statement: object) -> None:
        self.executed.append(str(statement))


class FakeEngine:
    """AsyncEngine stand-in for health probes."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.delay = delay
        self.error = error
        self.connections: list[FakeConnection] = []

    def connect(self) -> FakeConnection:
        conn = FakeConnection(self.delay, self.error)
        self.connections.append(conn)
        return conn
