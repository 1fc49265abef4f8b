"""Per-request start mark used for envelope execution timing.

The host marks the start of a request as early as possible (see
``RequestStartMiddleware``). Envelopes measure ``execution_time_ms`` from that
mark and fall back to their own construction time when no mark exists, for
example when the gateway is driven directly from a script or a test.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from time import perf_counter

request_start_context: ContextVar[float | None] = ContextVar(
    "request_start", default=None
)


def mark_request_start(started_at: float | None = None) -> Token[float | None]:
    """Record the start of the current request.

    Args:
        started_at: ``perf_counter()`` reading to record. Defaults to now.

    Returns:
        Token: Pass to ``clear_request_start`` to restore the previous mark.
    """
    return request_start_context.set(
        perf_counter() if started_at is None else started_at
    )


def get_request_start() -> float | None:
    """Return the start mark of the current request, or None outside a request."""
    return request_start_context.get()


def clear_request_start(token: Token[float | None]) -> None:
    """Restore the mark that was active before ``mark_request_start``."""
    request_start_context.reset(token)
