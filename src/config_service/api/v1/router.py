from fastapi import APIRouter

from src.config_service.api.v1 import environments, ping, tags, templates

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(ping.router)
api_router.include_router(tags.router)
api_router.include_router(environments.router)
api_router.include_router(templates.router)
