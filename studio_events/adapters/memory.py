"""In-memory key-value store adapter."""
import re

import structlog

from .base import StoreAdapter

log = structlog.get_logger()


def glob_to_regex(pattern: str) -> re.Pattern:
    """Translate a Redis glob pattern, honouring backslash escapes."""
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(ch))
            else:
                body = pattern[i + 1:end]
                if body.startswith("^"):
                    body = "^" + re.escape(body[1:])
                else:
                    body = re.escape(body)
                # Keep ranges like a-z working after escaping
                out.append("[" + body.replace("\\-", "-") + "]")
                i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


class InMemoryStore(StoreAdapter):
    """In-memory implementation of the store adapter.

    Hashes live in a plain dict, values are coerced to ``str`` the way
    Redis stores them.
    """

    name = "memory"

    def __init__(self):
        self._hashes: dict[str, dict[str, str]] = {}

    async def hgetall(self, key: str) -> dict[str, str]:
        return dict(self._hashes.get(key, {}))

    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        current = self._hashes.setdefault(key, {})
        added = sum(1 for field in mapping if field not in current)
        current.update({field: str(value) for field, value in mapping.items()})
        log.debug("store.hset", key=key, fields=len(mapping), adapter=self.name)
        return added

    async def delete(self, key: str) -> int:
        return 1 if self._hashes.pop(key, None) is not None else 0

    async def scan_keys(self, pattern: str) -> list[str]:
        regex = glob_to_regex(pattern)
        return [key for key in self._hashes if regex.fullmatch(key)]

    async def health_check(self) -> bool:
        """In-memory store is always healthy."""
        return True
