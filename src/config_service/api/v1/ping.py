from datetime import UTC, datetime

from fastapi import APIRouter

from src.config_service.core.config import get_settings
from src.config_service.schemas.health import PingResponse

router = APIRouter(tags=["system"])


@router.get("/ping", response_model=PingResponse, summary="Ping")
async def ping() -> PingResponse:
    return PingResponse(
        version=get_settings().app_version,
        time=datetime.now(UTC).isoformat(timespec="seconds"),
    )
