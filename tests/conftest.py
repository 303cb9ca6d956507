import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from studio_events.adapters.memory import InMemoryStore
from studio_events.config import Settings
from studio_events.main import create_app


class BrokenStore(InMemoryStore):
    """Store whose every command fails like an unreachable Redis."""

    async def hgetall(self, key):
        raise RedisConnectionError("Connection refused")

    async def hset(self, key, mapping):
        raise RedisConnectionError("Connection refused")

    async def delete(self, key):
        raise RedisConnectionError("Connection refused")

    async def scan_keys(self, pattern):
        raise RedisConnectionError("Connection refused")

    async def health_check(self):
        return False


def make_settings(**overrides) -> Settings:
    values = {
        "STORE_ADAPTER": "memory",
        "LOG_JSON": False,
        "CONF_FILE": "/nonexistent/config.json",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def app(store):
    return create_app(settings=make_settings(), adapter=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
