"""Studio event service: key scheme and store operations."""
import re
import time
from typing import Any, Callable

import structlog
from redis.exceptions import RedisError

from ..adapters.base import StoreAdapter
from ..adapters.memory import InMemoryStore
from ..adapters.redis_hash import RedisHashStore
from ..config import Settings
from ..event_models import StudioEvent, WriteResult
from ..metrics import Metrics

log = structlog.get_logger()

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so text matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


def _timestamp_order(key: str):
    suffix = key.rsplit(":", 1)[-1]
    if suffix.isdigit():
        return (0, int(suffix), key)
    return (1, 0, key)


class StudioEventService:
    """
    Records studio events as Redis hashes keyed by
    ``<provider>:<resource>:<studio_id>:<timestamp_ms>``.

    Every operation issues exactly one store command. Store errors are
    logged, counted and re-raised unchanged; nothing is retried.
    """

    def __init__(
        self,
        adapter: StoreAdapter,
        provider_prefix: str = "ibm",
        resource_prefix: str = "watson-studio",
        metrics: Metrics | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._adapter = adapter
        self.provider_prefix = provider_prefix
        self.resource_prefix = resource_prefix
        self._metrics = metrics
        self._clock = clock
        self._last_ts = 0

    @property
    def adapter(self) -> StoreAdapter:
        return self._adapter

    def event_key(self, studio_id: str, ts: int) -> str:
        return f"{self.provider_prefix}:{self.resource_prefix}:{studio_id}:{ts}"

    def studio_pattern(self, studio_id: str) -> str:
        return f"{escape_glob(self.provider_prefix)}:{escape_glob(self.resource_prefix)}:{escape_glob(studio_id)}:*"

    def next_timestamp(self) -> int:
        """Current time in ms, bumped past the previous value if the clock stalled."""
        ts = self._clock()
        if ts <= self._last_ts:
            ts = self._last_ts + 1
        self._last_ts = ts
        return ts

    async def read(self, key: str) -> dict[str, str]:
        """All fields of the record at key; empty dict for unknown keys."""
        record = await self._call("read", self._adapter.hgetall(key))
        log.debug("studio.read", key=key, fields=len(record))
        return record

    async def list_keys(self, studio_id: str) -> list[str]:
        """Keys of every record stored for studio_id, oldest first."""
        pattern = self.studio_pattern(studio_id)
        keys = await self._call("list_keys", self._adapter.scan_keys(pattern))
        log.debug("studio.list_keys", pattern=pattern, count=len(keys))
        return sorted(keys, key=_timestamp_order)

    async def delete(self, key: str) -> int:
        removed = await self._call("delete", self._adapter.delete(key))
        log.info("studio.deleted", key=key, removed=removed)
        return removed

    async def write(self, event: StudioEvent) -> WriteResult:
        """
        Stamp event with the current time and store it as a new hash.

        The event is mutated: its ``timestamp`` is replaced. Missing fields
        are written as the text ``undefined``, in the key as well.
        """
        result = self.stamp(event)
        await self.save(result)
        return result

    def stamp(self, event: StudioEvent) -> WriteResult:
        """Assign the write timestamp and build the record key."""
        ts = self.next_timestamp()
        event.timestamp = ts
        return WriteResult(id=self.event_key(event.field_text("studio_id"), ts), event=event)

    async def save(self, result: WriteResult):
        event = result.event
        log.info("studio.write", key=result.id, event_name=event.field_text("event"))
        await self._call("write", self._adapter.hset(result.id, mapping=event.to_record()))
        if self._metrics:
            self._metrics.record_event()

    async def health_check(self) -> bool:
        return await self._adapter.health_check()

    async def close(self):
        await self._adapter.close()

    async def _call(self, operation: str, command) -> Any:
        try:
            return await command
        except RedisError as e:
            log.error("studio.store_failed", operation=operation, error=str(e), error_type=type(e).__name__)
            if self._metrics:
                self._metrics.record_store_error(operation)
            raise


def create_adapter(settings: Settings) -> StoreAdapter:
    """
    Create the store adapter based on configuration.

    Returns:
        StoreAdapter instance based on STORE_ADAPTER setting
    """
    if settings.STORE_ADAPTER == "redis":
        if not settings.redis_url:
            log.warning(
                "adapter.fallback",
                requested="redis",
                actual="memory",
                reason="REDIS_HOST not configured",
            )
            return InMemoryStore()

        log.info("adapter.selected", type="redis", url=settings.masked_redis_url)
        return RedisHashStore(settings.redis_url)

    log.info("adapter.selected", type="memory")
    return InMemoryStore()


def create_service(settings: Settings, adapter: StoreAdapter | None = None, metrics: Metrics | None = None) -> StudioEventService:
    if adapter is None:
        adapter = create_adapter(settings)
    return StudioEventService(
        adapter,
        provider_prefix=settings.REDIS_EVENTS_PREFIX,
        resource_prefix=settings.RESOURCE_PREFIX,
        metrics=metrics,
    )
