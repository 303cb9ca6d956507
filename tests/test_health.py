"""
Tests for health check endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from studio_events.main import create_app
from conftest import BrokenStore, make_settings


def test_health_liveness(client):
    """Test liveness health check."""
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "studio-events"
    assert data["version"] == "0.1.0"
    assert data["timestamp"].endswith("Z")


def test_health_readiness(client):
    """Test readiness health check."""
    r = client.get("/health/ready")
    # Disk or memory pressure on the host can make this 503
    assert r.status_code in [200, 503]
    data = r.json()
    assert data["service"] == "studio-events"
    assert "timestamp" in data
    assert data["checks"]["store"] == {
        "status": "ok",
        "adapter": "memory",
        "latency_ms": data["checks"]["store"]["latency_ms"],
    }
    assert "disk_space" in data["checks"]
    assert "memory" in data["checks"]


def test_health_readiness_store_down():
    """Test readiness reports 503 when the store is unreachable."""
    app = create_app(settings=make_settings(), adapter=BrokenStore())
    with TestClient(app) as client:
        r = client.get("/health/ready")
    assert r.status_code == 503
    data = r.json()
    assert data["status"] == "not_ready"
    assert data["checks"]["store"]["status"] == "error"


def test_metrics_endpoint(client):
    """Test Prometheus metrics endpoint."""
    client.post("/api/2.0/resources/wstudio", json={"studio_id": "s1", "user_id": "u1", "event": "created"})
    r = client.get("/metrics/")
    assert r.status_code == 200
    content = r.text
    assert "http_requests_total" in content
    assert "http_request_duration_seconds" in content
    assert "app_up" in content
    assert "studio_events_recorded_total 1.0" in content
    assert "process_resident_memory_bytes" in content


@pytest.mark.parametrize("path", ["/health", "/api/2.0/"])
def test_correlation_id_in_response(client, path):
    """Test that correlation ID is added to response headers."""
    r = client.get(path)
    assert "x-correlation-id" in r.headers


def test_correlation_id_propagation(client):
    """Test that provided correlation ID is propagated."""
    correlation_id = "test-correlation-id-123"
    r = client.get("/health", headers={"x-correlation-id": correlation_id})
    assert r.headers["x-correlation-id"] == correlation_id
