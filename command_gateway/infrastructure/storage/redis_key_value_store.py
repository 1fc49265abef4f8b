"""Redis adapter implementing KeyValueStoreProtocol.

Rate windows are shared by every worker through Redis. Values are stored as
JSON strings; expiry is delegated to Redis (``SETEX``).

Architecture:
- Implements KeyValueStoreProtocol without inheritance (structural typing)
- Maps Redis exceptions to StorageError
- Returns Result types for all operations (callers fail open)
"""

import json
from typing import Any

from redis import Redis
from redis.exceptions import RedisError

from command_gateway.core.enums import ErrorCode
from command_gateway.core.result import Failure, Result, Success
from command_gateway.domain.errors import StorageError


class RedisKeyValueStore:
    """Redis implementation of KeyValueStoreProtocol.

    Attributes:
        _redis: Synchronous Redis client instance.
    """

    def __init__(self, redis_client: Redis) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Synchronous Redis client instance.
        """
        self._redis = redis_client

    def get(self, key: str) -> Result[Any | None, StorageError]:
        """Get and decode a JSON value.

        Args:
            key: Store key.

        Returns:
            Result with the decoded value, None if not found, or StorageError.
        """
        try:
            raw = self._redis.get(key)
        except RedisError as e:
            return Failure(
                error=StorageError(
                    code=ErrorCode.STORE_READ_FAILED,
                    message=f"Failed to get key '{key}' from Redis",
                    details={"key": key, "error": str(e)},
                )
            )
        if raw is None:
            return Success(value=None)
        decoded = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        try:
            return Success(value=json.loads(decoded))
        except json.JSONDecodeError as e:
            return Failure(
                error=StorageError(
                    code=ErrorCode.STORE_READ_FAILED,
                    message=f"Failed to parse JSON for key '{key}'",
                    details={"key": key, "error": str(e)},
                )
            )

    def set(
        self, key: str, value: Any, ttl_seconds: int | None = None
    ) -> Result[None, StorageError]:
        """Encode and store a value.

        Args:
            key: Store key.
            value: JSON-serializable value.
            ttl_seconds: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or StorageError.
        """
        try:
            encoded = json.dumps(value)
            if ttl_seconds is not None:
                self._redis.setex(key, ttl_seconds, encoded)
            else:
                self._redis.set(key, encoded)
        except (RedisError, TypeError, ValueError) as e:
            return Failure(
                error=StorageError(
                    code=ErrorCode.STORE_WRITE_FAILED,
                    message=f"Failed to set key '{key}' in Redis",
                    details={"key": key, "error": str(e), "type": type(e).__name__},
                )
            )
        return Success(value=None)

    def delete(self, key: str) -> Result[bool, StorageError]:
        """Delete a key.

        Returns:
            Result with True if the key existed, or StorageError.
        """
        try:
            deleted = self._redis.delete(key)
        except RedisError as e:
            return Failure(
                error=StorageError(
                    code=ErrorCode.STORE_WRITE_FAILED,
                    message=f"Failed to delete key '{key}' from Redis",
                    details={"key": key, "error": str(e)},
                )
            )
        return Success(value=bool(deleted))

    def ping(self) -> bool:
        """Health check.

        Returns:
            bool: True if Redis answered.
        """
        try:
            return bool(self._redis.ping())
        except RedisError:
            return False
