"""
Studio Event Service - records studio lifecycle events in Redis hashes.

Features:
- REST surface for writing and reading studio events
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, ORJSONResponse
from prometheus_client import make_asgi_app

from .adapters.base import StoreAdapter
from .api.router import root_router, router
from .config import Settings, get_settings
from .health import HealthChecker
from .logging import SERVICE_NAME, get_logger, setup_logging
from .metrics import Metrics
from .middleware import CorrelationIdMiddleware, ErrorHandlerMiddleware, MetricsMiddleware
from .services.event_service import create_service

VERSION = "0.1.0"

logger = get_logger()


def create_app(settings: Settings | None = None, adapter: StoreAdapter | None = None) -> FastAPI:
    """
    Build the application with its own store handle, metrics and health checker.

    Args:
        settings: Configuration (defaults to get_settings())
        adapter: Store adapter to use (defaults to the configured adapter)
    """
    settings = settings or get_settings()
    setup_logging(json_output=settings.LOG_JSON)

    metrics = Metrics(service_name=SERVICE_NAME, version=VERSION)
    service = create_service(settings, adapter=adapter, metrics=metrics)
    health_checker = HealthChecker(service, service_name=SERVICE_NAME, version=VERSION)

    app = FastAPI(
        title="Studio Event Service",
        version=VERSION,
        description="Records studio lifecycle events into a Redis hash store",
        default_response_class=ORJSONResponse,
    )
    app.state.settings = settings
    app.state.service = service
    app.state.metrics = metrics

    # Last added runs first: CORS, correlation ID, metrics, error handler
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.include_router(root_router)
    app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    @app.get("/health")
    async def health():
        """Liveness probe - 200 while the process is serving."""
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    async def health_ready():
        """
        Readiness probe.

        Returns:
            200: Store reachable and resources available
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        result = await health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "service_starting",
            version=VERSION,
            env=settings.ENV,
            port=settings.PORT,
            store=service.adapter.name,
            redis_url=settings.masked_redis_url,
            database=settings.REDIS_DB_NUMBER,
            search_index=settings.REDIS_INDEX,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close the store connection."""
        logger.info("service_stopping")
        await service.close()
        metrics.app_up.labels(service=SERVICE_NAME, version=VERSION).set(0)

    return app


def run():
    """Serve the app built by create_app on the configured port."""
    import uvicorn

    uvicorn.run(
        "studio_events.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=get_settings().PORT,
    )


if __name__ == "__main__":
    run()
