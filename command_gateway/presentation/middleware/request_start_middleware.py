"""Request start middleware.

Marks the start of every request as early as possible so response envelopes
report ``execution_time_ms`` for the whole request, not just the handler.

- Sets the per-request mark (``core.request_clock``)
- Stores the same reading on ``request.state.started_at``
- Adds an ``X-Response-Time-Ms`` header
"""

from __future__ import annotations

from time import perf_counter
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from command_gateway.core.request_clock import clear_request_start, mark_request_start


class RequestStartMiddleware(BaseHTTPMiddleware):
    """Starlette middleware recording the request start time."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Mark the request start, then hand over to the next handler.

        Args:
            request (Request): Incoming request.
            call_next (Callable[[Request], Awaitable[Response]]): Next handler.

        Returns:
            Response: Response with X-Response-Time-Ms header added.
        """
        started_at = perf_counter()
        request.state.started_at = started_at
        token = mark_request_start(started_at)
        try:
            response = await call_next(request)
            elapsed_ms = (perf_counter() - started_at) * 1000
            response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
            return response
        finally:
            # Clear the mark so it never leaks into another request
            clear_request_start(token)
