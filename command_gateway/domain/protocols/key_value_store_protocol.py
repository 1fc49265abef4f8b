"""Key-value store port with per-key expiry.

Holds the rate limit windows. Adapters: ``InMemoryKeyValueStore`` (tests,
single process) and ``RedisKeyValueStore`` (shared across workers).

Error Handling:
    All operations return Result types. Callers treat Failure as "store
    unavailable" and fail open; a store outage never blocks a command.
"""

from typing import Any, Protocol

from command_gateway.core.result import Result
from command_gateway.domain.errors import StorageError


class KeyValueStoreProtocol(Protocol):
    """TTL key-value store (port)."""

    def get(self, key: str) -> Result[Any | None, StorageError]:
        """Read a value.

        Returns:
            Success(value), Success(None) when missing or expired, or
            Failure(StorageError) when the backend is unavailable.
        """
        ...

    def set(
        self, key: str, value: Any, ttl_seconds: int | None = None
    ) -> Result[None, StorageError]:
        """Write a JSON-serializable value, expiring after ``ttl_seconds``."""
        ...

    def delete(self, key: str) -> Result[bool, StorageError]:
        """Delete a key. Success(True) if it existed."""
        ...
