"""HTTP middleware."""

from command_gateway.presentation.middleware.request_start_middleware import (
    RequestStartMiddleware,
)

__all__ = ["RequestStartMiddleware"]
