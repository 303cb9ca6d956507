from fastapi import Request

from ..config import Settings
from ..services.event_service import StudioEventService


def get_service(request: Request) -> StudioEventService:
    """Event service bound to the running app."""
    return request.app.state.service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
