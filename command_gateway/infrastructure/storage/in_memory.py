"""In-memory storage adapters.

Process-local implementations of KeyValueStoreProtocol and
OptionStoreProtocol. Used by tests and single-worker deployments.

Values are deep-copied on the way in and out, so callers can never mutate
stored state in place (same semantics as a serializing backend).

Expiry uses ``time.time()`` and is therefore controllable with freezegun.
Expired keys are dropped when read and swept on every write.
"""

import copy
import time
from typing import Any

from command_gateway.core.result import Result, Success
from command_gateway.domain.errors import StorageError


class InMemoryKeyValueStore:
    """Dict-backed TTL store.

    Note: Does NOT inherit from KeyValueStoreProtocol (structural typing).
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[Any, float | None]] = {}

    @property
    def size(self) -> int:
        """Keys currently held, expired ones included until swept."""
        return len(self._data)

    def get(self, key: str) -> Result[Any | None, StorageError]:
        entry = self._data.get(key)
        if entry is None:
            return Success(value=None)
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.time():
            del self._data[key]
            return Success(value=None)
        return Success(value=copy.deepcopy(value))

    def set(
        self, key: str, value: Any, ttl_seconds: int | None = None
    ) -> Result[None, StorageError]:
        now = time.time()
        self._purge_expired(now)
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        self._data[key] = (copy.deepcopy(value), expires_at)
        return Success(value=None)

    def delete(self, key: str) -> Result[bool, StorageError]:
        return Success(value=self._data.pop(key, None) is not None)

    def clear(self) -> None:
        """Drop every key (test helper)."""
        self._data.clear()

    def _purge_expired(self, now: float) -> None:
        expired = [
            key
            for key, (_, expires_at) in self._data.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._data[key]


class InMemoryOptionStore:
    """Dict-backed option store.

    Note: Does NOT inherit from OptionStoreProtocol (structural typing).
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._options: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, name: str, default: Any = None) -> Result[Any, StorageError]:
        if name not in self._options:
            return Success(value=default)
        return Success(value=copy.deepcopy(self._options[name]))

    def update(self, name: str, value: Any) -> Result[None, StorageError]:
        self._options[name] = copy.deepcopy(value)
        return Success(value=None)
