"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging port. Implementations MUST emit
structured records (message + key-value context) and MUST NOT raise.

Log Levels:
    - DEBUG: Detailed diagnostic info (dev only)
    - INFO: Normal operational events
    - WARNING: Refused commands, degraded stores, repeated transmits
    - ERROR: Handler or adapter failure, the command still gets a response
    - CRITICAL: Critical violations and errors (operator alert sent)

Security:
    - NEVER log tokens, passwords or session identifiers
    - Context passed in by the error logger is already redacted

Usage:
    from command_gateway.core.container import get_logger

    logger = get_logger()
    logger.info("Command dispatched", action=action, user_id=user_id)
    request_logger = logger.bind(request_id=request_id)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementations add
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message with optional exception details."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        The original logger instance remains unchanged.
        """
        ...
