"""Tests for middleware components."""
import pytest
from httpx import AsyncClient, ASGITransport

from studio_events.main import create_app
from conftest import make_settings


@pytest.mark.asyncio
async def test_correlation_id_injection(app):
    """Test that correlation ID is auto-generated if not provided."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/2.0/resources/wstudio",
            json={"studio_id": "s1", "user_id": "u1", "event": "created"},
        )
        assert response.status_code == 200
        assert len(response.headers["X-Correlation-ID"]) == 36


@pytest.mark.asyncio
async def test_correlation_id_preserved(app):
    """Test that provided correlation ID is preserved."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        correlation_id = "test-correlation-123"
        response = await client.get(
            "/api/2.0/resources/wstudio/ts/s1",
            headers={"X-Correlation-ID": correlation_id},
        )
        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == correlation_id


@pytest.mark.asyncio
async def test_cors_allows_any_origin_by_default(app):
    """Test CORS headers for the default wildcard configuration."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/2.0/", headers={"Origin": "http://studio.example"})
        assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_cors_preflight_restricted_origins(store):
    """Test preflight against a configured origin list."""
    app = create_app(settings=make_settings(CORS_ORIGINS="http://allowed.test"), adapter=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = {
            "Origin": "http://allowed.test",
            "Access-Control-Request-Method": "POST",
        }
        allowed = await client.options("/api/2.0/resources/wstudio", headers=headers)
        assert allowed.status_code == 200
        assert allowed.headers["access-control-allow-origin"] == "http://allowed.test"

        headers["Origin"] = "http://other.test"
        denied = await client.options("/api/2.0/resources/wstudio", headers=headers)
        assert denied.status_code == 400


@pytest.mark.asyncio
async def test_request_metrics_recorded(app):
    """Test HTTP requests are counted per method, path and status."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.get("/api/2.0/")
        await client.get("/api/2.0/")

    registry = app.state.metrics.registry
    assert registry.get_sample_value(
        "http_requests_total",
        {"service": "studio-events", "method": "GET", "path": "/api/2.0/", "status": "200"},
    ) == 2.0
    assert registry.get_sample_value(
        "http_requests_active", {"service": "studio-events"}
    ) == 0.0


@pytest.mark.asyncio
async def test_request_metrics_labelled_by_route(app):
    """Test reads of distinct record keys share one series per route."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        for i in range(25):
            await client.get(f"/api/2.0/resources/wstudio/ibm:watson-studio:s1:{i}")
        await client.get("/no/such/route")

    paths = {
        sample.labels["path"]
        for metric in app.state.metrics.registry.collect()
        if metric.name == "http_requests"
        for sample in metric.samples
        if sample.name == "http_requests_total"
    }
    assert paths == {"/api/2.0/resources/wstudio/{id}", "unmatched"}

    registry = app.state.metrics.registry
    assert registry.get_sample_value(
        "http_requests_total",
        {
            "service": "studio-events",
            "method": "GET",
            "path": "/api/2.0/resources/wstudio/{id}",
            "status": "200",
        },
    ) == 25.0
    assert registry.get_sample_value(
        "http_requests_total",
        {"service": "studio-events", "method": "GET", "path": "unmatched", "status": "404"},
    ) == 1.0
