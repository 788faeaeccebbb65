"""Health, readiness and liveness payloads."""

from typing import Literal

from pydantic import BaseModel, Field

HealthStatus = Literal["healthy", "unhealthy"]


class ServiceHealth(BaseModel):
    """Result of probing a single dependency."""

    status: HealthStatus
    message: str
    latency: float = Field(description="Probe latency in milliseconds")
    last_check: str = Field(description="ISO-8601 UTC timestamp of the probe")


class HealthReport(BaseModel):
    """Aggregated health. Unhealthy if any dependency is unhealthy."""

    status: HealthStatus
    version: str
    services: dict[str, ServiceHealth]


class MessageResponse(BaseModel):
    message: str


class PingResponse(BaseModel):
    message: str = "pong"
    version: str
    time: str
