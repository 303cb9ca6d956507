"""HTTP metrics and request logging middleware."""
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..metrics import Metrics

UNMATCHED_PATH = "unmatched"


def route_path(request: Request) -> str:
    """Route template of the matched endpoint, such as /api/2.0/resources/wstudio/{id}."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_PATH


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP metrics for Prometheus.

    - Records request count by method, path, status
    - Records request duration histogram
    - Tracks active requests
    - Refreshes process metrics before each scrape
    """

    def __init__(self, app, metrics: Metrics, metrics_path: str = "/metrics"):
        super().__init__(app)
        self.metrics = metrics
        self.metrics_path = metrics_path

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.metrics_path):
            self.metrics.update_system_metrics()
            return await call_next(request)

        service = self.metrics.service_name
        active = self.metrics.http_requests_active.labels(service=service)
        active.inc()
        start_time = time.time()
        logger = structlog.get_logger()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            self.metrics.http_requests_total.labels(
                service=service,
                method=request.method,
                path=route_path(request),
                status=response.status_code,
            ).inc()

            self.metrics.http_request_duration.labels(
                service=service,
                method=request.method,
                path=route_path(request),
            ).observe(duration)

            logger.info(
                "http_request",
                http_status=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )

            return response

        except Exception as e:
            duration = time.time() - start_time

            self.metrics.http_requests_total.labels(
                service=service,
                method=request.method,
                path=route_path(request),
                status=500,
            ).inc()

            logger.error(
                "http_request_error",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )

            raise

        finally:
            active.dec()
