from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from redis.exceptions import RedisError
import structlog

from .deps import get_app_settings, get_service
from ..config import Settings
from ..event_models import StudioEvent
from ..services.event_service import StudioEventService

log = structlog.get_logger()

BANNER = "Studio Event Service REST Server Started"

router = APIRouter(prefix="/api/2.0")
root_router = APIRouter()


@router.post("/resources/wstudio")
async def add_studio_event(
    event: StudioEvent,
    service: StudioEventService = Depends(get_service),
    settings: Settings = Depends(get_app_settings),
):
    result = service.stamp(event)
    try:
        await service.save(result)
    except RedisError:
        if settings.STRICT_ERRORS:
            raise
        # Answered with the record even though it was not stored
    return result.to_response()


@router.get("/resources/wstudio/ts/{id}")
async def list_studio_keys(
    id: str,
    request: Request,
    service: StudioEventService = Depends(get_service),
    settings: Settings = Depends(get_app_settings),
):
    log.info("studio.keys_requested", id=id, header_id=request.headers.get("id"))
    try:
        return await service.list_keys(id)
    except RedisError:
        if settings.STRICT_ERRORS:
            raise
        return None


@router.get("/resources/wstudio/{id}")
async def get_studio_event(
    id: str,
    request: Request,
    service: StudioEventService = Depends(get_service),
    settings: Settings = Depends(get_app_settings),
):
    log.info("studio.record_requested", id=id, header_id=request.headers.get("id"))
    try:
        return await service.read(id)
    except RedisError:
        if settings.STRICT_ERRORS:
            raise
        return None


@router.get("/")
async def api_status():
    return {"status": "started"}


@root_router.get("/", response_class=PlainTextResponse)
async def banner():
    return BANNER
