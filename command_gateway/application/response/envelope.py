"""Response envelope: exactly one standardized response per request.

Every transmitting method checks the ``sent`` flag first. The flag flips to
True on the first transmit attempt, before the channel is called, and never
resets; later calls log a diagnostic and return without emitting.

Envelope shape:
    {
        "success": bool,
        "message": str,
        "code": "success" | "error" | "validation_error" | "security_error"
                | "rate_limit_exceeded" | "performance_error" | "database_error",
        "data": Any,
        "meta": {timestamp, version, execution_time_ms, memory_usage,
                 memory_peak, request_id, ...added metadata},
        "debug": {...}   # only when the host debug flag is on
    }

Usage:
    envelope = ResponseEnvelope(channel=channel, logger=logger)
    envelope.add_metadata("endpoint", "save_settings")
    envelope.success({"saved": 3}, "Settings saved")
    envelope.error("ignored")  # no-op, already sent
"""

import platform
from collections.abc import Mapping
from datetime import UTC, datetime
from time import perf_counter
from typing import Any

from command_gateway.core.constants import DEFAULT_CAPABILITY, RESPONSE_VERSION
from command_gateway.core.enums import ResponseCode
from command_gateway.core.identifiers import generate_id
from command_gateway.core.process_metrics import memory_peak, memory_usage
from command_gateway.core.request_clock import get_request_start
from command_gateway.domain.protocols import LoggerProtocol, ResponseChannelProtocol
from command_gateway.domain.value_objects import Identity, RequestInfo


class ResponseEnvelope:
    """Builds and transmits one response for one request.

    Args:
        channel: Host response channel.
        logger: Structured logger (diagnostics for repeated transmits).
        debug: Host debug flag; adds the ``debug`` block.
        request_id_prefix: Stable prefix of ``meta.request_id``.
        app_version: Reported in the debug block.
        identity: Caller, reported in the debug block.
        request: Request metadata, reported in the debug block.
        started_at: ``perf_counter()`` reading of the request start. Defaults
            to the per-request mark, then to construction time.
    """

    def __init__(
        self,
        *,
        channel: ResponseChannelProtocol,
        logger: LoggerProtocol,
        debug: bool = False,
        request_id_prefix: str = "gw_",
        app_version: str = "unknown",
        identity: Identity | None = None,
        request: RequestInfo | None = None,
        started_at: float | None = None,
    ) -> None:
        self._channel = channel
        self._logger = logger
        self._debug = debug
        self._request_id_prefix = request_id_prefix
        self._app_version = app_version
        self._identity = identity
        self._request = request
        if started_at is None:
            started_at = get_request_start()
        self._started_at = started_at if started_at is not None else perf_counter()
        self._metadata: dict[str, Any] = {}
        self._sent = False
        self._sent_code: str | None = None
        self._request_id = generate_id(request_id_prefix)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def is_sent(self) -> bool:
        """True once any transmit was attempted."""
        return self._sent

    @property
    def request_id(self) -> str:
        """Identifier reported in ``meta.request_id``."""
        return self._request_id

    @property
    def sent_code(self) -> str | None:
        """Code of the transmitted envelope (None before sending or for raw bodies)."""
        return self._sent_code

    def add_metadata(self, key: str, value: Any) -> None:
        """Add one entry to ``meta`` of the response."""
        self._metadata[key] = value

    def add_metadata_map(self, metadata: Mapping[str, Any]) -> None:
        """Merge entries into ``meta`` of the response."""
        self._metadata.update(metadata)

    def execution_time_ms(self) -> float:
        """Milliseconds since the request start mark."""
        return round((perf_counter() - self._started_at) * 1000, 2)

    def stats(self) -> dict[str, Any]:
        """Diagnostic snapshot of this envelope."""
        return {
            "response_sent": self._sent,
            "execution_time_ms": self.execution_time_ms(),
            "memory_usage": memory_usage(),
            "memory_peak": memory_peak(),
            "metadata_count": len(self._metadata),
        }

    # =========================================================================
    # Transmitting
    # =========================================================================

    def success(
        self,
        data: Any = None,
        message: str = "",
        code: ResponseCode | str = ResponseCode.SUCCESS,
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        """Transmit a success envelope.

        Returns:
            bool: True if this call transmitted, False if a response was
            already sent.
        """
        return self._transmit(True, data, message, code, metadata, None)

    def error(
        self,
        message: str,
        code: ResponseCode | str = ResponseCode.ERROR,
        data: Any = None,
        metadata: Mapping[str, Any] | None = None,
        http_status: int | None = None,
    ) -> bool:
        """Transmit an error envelope.

        Args:
            message: Client-facing message.
            code: Response code (``error`` by default).
            data: Error payload.
            metadata: Extra ``meta`` entries for this response.
            http_status: Overrides the status derived from ``code``.

        Returns:
            bool: True if this call transmitted.
        """
        return self._transmit(False, data, message, code, metadata, http_status)

    def validation_error(
        self,
        field_errors: Mapping[str, str],
        message: str = "Validation failed",
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        """Transmit ``validation_error`` with a field-level error map."""
        data = {"validation_errors": dict(field_errors), "field_count": len(field_errors)}
        return self.error(message, ResponseCode.VALIDATION_ERROR, data, metadata)

    def security_error(
        self,
        violation_type: str,
        message: str = "Security check failed",
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        """Transmit ``security_error`` naming the violation type."""
        data = {"violation_type": violation_type, "security_level": "high"}
        return self.error(message, ResponseCode.SECURITY_ERROR, data, metadata)

    def rate_limit_error(
        self,
        limit: int,
        window_seconds: int = 60,
        message: str = "Rate limit exceeded",
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        """Transmit ``rate_limit_exceeded``; ``retry_after`` equals the window."""
        data = {
            "rate_limit": limit,
            "window_seconds": window_seconds,
            "retry_after": window_seconds,
        }
        return self.error(message, ResponseCode.RATE_LIMIT_EXCEEDED, data, metadata)

    def performance_error(
        self,
        execution_time_ms: float,
        threshold_ms: float = 500,
        message: str = "Operation exceeded its time limit",
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        data = {
            "execution_time_ms": execution_time_ms,
            "threshold_ms": threshold_ms,
            "performance_impact": "high",
        }
        return self.error(message, ResponseCode.PERFORMANCE_ERROR, data, metadata)

    def database_error(
        self,
        operation: str = "unknown",
        message: str = "Database operation failed",
        metadata: Mapping[str, Any] | None = None,
    ) -> bool:
        data = {"database_operation": operation, "error_type": "database"}
        return self.error(message, ResponseCode.DATABASE_ERROR, data, metadata)

    def raw(self, body: Any, http_status: int = 200) -> bool:
        """Transmit a non-enveloped body (still at most once per request)."""
        if self._refuse_repeat("raw"):
            return False
        self._sent = True
        self._channel.emit(body, http_status)
        return True

    # =========================================================================
    # Formatting
    # =========================================================================

    def build(
        self,
        success: bool,
        data: Any,
        message: str,
        code: ResponseCode,
        metadata: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Envelope body without transmitting it."""
        body: dict[str, Any] = {
            "success": success,
            "message": message,
            "code": code.value,
            "data": data if data is not None else {},
            "meta": {
                "timestamp": datetime.now(UTC).isoformat(),
                "version": RESPONSE_VERSION,
                "execution_time_ms": self.execution_time_ms(),
                "memory_usage": memory_usage(),
                "memory_peak": memory_peak(),
                "request_id": self._request_id,
                **self._metadata,
                **dict(metadata or {}),
            },
        }
        if self._debug:
            body["debug"] = self._debug_info()
        return body

    def _debug_info(self) -> dict[str, Any]:
        identity = self._identity
        request = self._request
        return {
            "python_version": platform.python_version(),
            "app_version": self._app_version,
            "user_id": identity.user_id if identity else 0,
            "user_capability": (
                "admin" if identity and identity.has_capability(DEFAULT_CAPABILITY) else "limited"
            ),
            "request_method": request.method if request else "unknown",
            "user_agent": identity.user_agent if identity else "unknown",
            "ip_address": identity.ip_address if identity else "unknown",
        }

    def _refuse_repeat(self, attempted: str) -> bool:
        if not self._sent:
            return False
        self._logger.warning(
            "Response already sent, transmit ignored",
            attempted=attempted,
            sent_code=self._sent_code,
            request_id=self._request_id,
        )
        return True

    def _transmit(
        self,
        success: bool,
        data: Any,
        message: str,
        code: ResponseCode | str,
        metadata: Mapping[str, Any] | None,
        http_status: int | None,
    ) -> bool:
        if self._refuse_repeat(code.value if isinstance(code, ResponseCode) else str(code)):
            return False
        response_code = ResponseCode(code)
        body = self.build(success, data, message, response_code, metadata)
        self._sent = True
        self._sent_code = response_code.value
        self._channel.emit(body, http_status or response_code.http_status)
        return True
