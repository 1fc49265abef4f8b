"""Canonical response codes carried in every envelope.

The vocabulary is fixed: clients branch on these strings, so new members
must not be added casually.
"""

from enum import Enum


class ResponseCode(str, Enum):
    """Machine-readable `code` values of a response envelope."""

    SUCCESS = "success"
    ERROR = "error"
    VALIDATION_ERROR = "validation_error"
    SECURITY_ERROR = "security_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    PERFORMANCE_ERROR = "performance_error"
    DATABASE_ERROR = "database_error"

    @property
    def http_status(self) -> int:
        """HTTP status used when transmitting an envelope with this code.

        Returns:
            int: Status code (200 for success, 4xx/5xx otherwise).
        """
        return _HTTP_STATUS[self]


_HTTP_STATUS: dict[ResponseCode, int] = {
    ResponseCode.SUCCESS: 200,
    ResponseCode.ERROR: 500,
    ResponseCode.VALIDATION_ERROR: 400,
    ResponseCode.SECURITY_ERROR: 403,
    ResponseCode.RATE_LIMIT_EXCEEDED: 429,
    ResponseCode.PERFORMANCE_ERROR: 503,
    ResponseCode.DATABASE_ERROR: 500,
}
