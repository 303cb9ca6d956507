"""Base adapter interface for key-value store backends."""
from abc import ABC, abstractmethod


class StoreAdapter(ABC):
    """Abstract interface for hash-oriented key-value store implementations.

    Every method maps to exactly one store command. Errors raised by the
    underlying client are propagated unchanged.
    """

    name: str = "base"

    @abstractmethod
    async def hgetall(self, key: str) -> dict[str, str]:
        """
        Read all fields of the hash stored at key.

        Returns:
            Field to value mapping, empty if the key does not exist
        """

    @abstractmethod
    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        """
        Write fields into the hash stored at key.

        Returns:
            Number of fields that were newly added
        """

    @abstractmethod
    async def delete(self, key: str) -> int:
        """
        Delete key.

        Returns:
            Number of keys removed (0 or 1)
        """

    @abstractmethod
    async def scan_keys(self, pattern: str) -> list[str]:
        """
        Enumerate keys matching a glob pattern.

        Args:
            pattern: Redis glob style pattern (``*``, ``?``, ``[...]``)

        Returns:
            Matching keys, in no particular order
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """

    async def close(self) -> None:
        """Release the connection, if the backend holds one."""
