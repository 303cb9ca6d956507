"""
Structured logging for the studio event service.

Every entry is one JSON object (or a console line in development):
{
    "event": "studio.write",
    "key": "ibm:watson-studio:s1:1760848200123",
    "event_name": "created",
    "correlation_id": "uuid-v4",
    "http_method": "POST",
    "http_path": "/api/2.0/resources/wstudio",
    "service": "studio-events",
    "ts": "2026-10-19T04:30:00.123456Z",
    "level": "info",
    "module": "event_service",
    "func_name": "save",
    "lineno": 116
}
"""
import logging
from typing import Any

import structlog
from structlog.processors import CallsiteParameter

SERVICE_NAME = "studio-events"

CALLSITE_PARAMETERS = {
    CallsiteParameter.MODULE,
    CallsiteParameter.FUNC_NAME,
    CallsiteParameter.LINENO,
}


def add_service_name(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Add service name to all log entries."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def build_processors(json_output: bool = True) -> list:
    """Processor chain shared by the service and its tests."""
    processors = [
        # Request context bound by CorrelationIdMiddleware
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(CALLSITE_PARAMETERS),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def setup_logging(json_output: bool = True, level: int = logging.INFO):
    """
    Configure structlog for the process.

    Args:
        json_output: JSON lines when True, colored console output otherwise.
        level: Minimum level that gets rendered.
    """
    structlog.configure(
        processors=build_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", level=level)

    # Request logging is done by MetricsMiddleware
    logging.getLogger("uvicorn.access").handlers = []


def get_logger():
    """Get a configured structlog logger."""
    return structlog.get_logger()
