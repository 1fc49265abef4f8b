"""Sliding-window rate limiter.

One window per (user, action, client IP). The window is the list of event
timestamps stored under ``rate_window:{user_id}:{action}:{ip_hash}`` with a
TTL equal to the window length.

Algorithm (per check):
    1. Drop timestamps older than ``now - window``.
    2. ``count >= limit``: deny, without recording the attempt.
    3. Otherwise append ``now`` and rewrite the window with TTL = window.

Fail-Open Design:
    A store that cannot be read allows the command; a failed write is
    logged and the command still proceeds.

Concurrency:
    Read-modify-write without locking. Concurrent checks on the same key may
    both read the old window; the last write wins and an event is lost.
"""

import hashlib
import math
import time
from collections.abc import Callable
from typing import Any

from command_gateway.core.constants import (
    IP_HASH_LENGTH,
    RATE_LIMIT_WINDOW_SECONDS,
    RATE_WINDOW_KEY_PREFIX,
)
from command_gateway.core.result import Failure
from command_gateway.domain.protocols import KeyValueStoreProtocol, LoggerProtocol
from command_gateway.domain.value_objects import RateDecision


def hash_ip(ip_address: str) -> str:
    """Truncated SHA-256 of an IP address (raw IPs never appear in keys)."""
    return hashlib.sha256(ip_address.encode()).hexdigest()[:IP_HASH_LENGTH]


def _window_events(stored: Any, floor: float) -> list[float]:
    if not isinstance(stored, list):
        return []
    return [
        float(stamp)
        for stamp in stored
        if isinstance(stamp, (int, float)) and not isinstance(stamp, bool) and stamp > floor
    ]


class RateLimiter:
    """Sliding-window rate limiter over a TTL key-value store.

    Args:
        store: Window storage.
        logger: Structured logger for store failures.
        window_seconds: Window length.
        clock: Returns the current time in seconds. Defaults to ``time.time``.
    """

    def __init__(
        self,
        *,
        store: KeyValueStoreProtocol,
        logger: LoggerProtocol,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._store = store
        self._logger = logger
        self._window_seconds = window_seconds
        self._clock = clock

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    @staticmethod
    def build_key(user_id: int | str, action: str, ip_address: str) -> str:
        """Store key of one window.

        Example:
            >>> RateLimiter.build_key(1, "save_settings", "203.0.113.9")
            'rate_window:1:save_settings:...'
        """
        return f"{RATE_WINDOW_KEY_PREFIX}:{user_id}:{action}:{hash_ip(ip_address)}"

    def _now(self) -> float:
        return self._clock() if self._clock is not None else time.time()

    def check(
        self,
        *,
        user_id: int | str,
        action: str,
        ip_address: str,
        limit: int,
    ) -> RateDecision:
        """Check the window and record the event when allowed.

        Returns:
            RateDecision: Denied once ``limit`` events exist within the
            window; ``retry_after`` is the time until the oldest leaves it.
        """
        key = self.build_key(user_id, action, ip_address)
        now = self._now()

        read = self._store.get(key)
        if isinstance(read, Failure):
            self._logger.warning(
                "Rate limit store unavailable, allowing command",
                key=key,
                reason=read.error.message,
            )
            return RateDecision(
                allowed=True, count=0, limit=limit, window_seconds=self._window_seconds
            )

        events = _window_events(read.value, now - self._window_seconds)
        if len(events) >= limit:
            retry_after = max(1, math.ceil(events[0] + self._window_seconds - now))
            return RateDecision(
                allowed=False,
                count=len(events),
                limit=limit,
                window_seconds=self._window_seconds,
                retry_after=retry_after,
            )

        events.append(now)
        write = self._store.set(key, events, ttl_seconds=self._window_seconds)
        if isinstance(write, Failure):
            self._logger.warning(
                "Rate window write failed", key=key, reason=write.error.message
            )
        return RateDecision(
            allowed=True,
            count=len(events),
            limit=limit,
            window_seconds=self._window_seconds,
        )

    def reset(self, *, user_id: int | str, action: str, ip_address: str) -> None:
        """Forget one window."""
        key = self.build_key(user_id, action, ip_address)
        result = self._store.delete(key)
        if isinstance(result, Failure):
            self._logger.error("Rate window reset failed", key=key, reason=result.error.message)
