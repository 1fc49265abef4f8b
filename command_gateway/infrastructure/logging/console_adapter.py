"""Console logging adapter for the gateway's host log.

Writes one structured line per call to stdout through structlog:
- ``log_json=True``: JSON lines (CI, production, log shippers)
- ``log_json=False``: colored console output (local development)

Every event passes through ``redact_event`` before rendering, so a token or
password handed to the logger by mistake is replaced with ``[REDACTED]``.

Implementation intentionally does NOT inherit from LoggerProtocol (PEP 544
structural subtyping).
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from command_gateway.domain.validators.redaction import redact

_PASSTHROUGH_KEYS = frozenset({"event", "level", "timestamp"})


def redact_event(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """structlog processor replacing sensitive context values."""
    return {
        key: value if key in _PASSTHROUGH_KEYS else redact({key: value})[key]
        for key, value in event_dict.items()
    }


class ConsoleAdapter:
    """structlog-backed logger writing to stdout.

    Args:
        use_json (bool): Render JSON lines instead of colored console output.
        level (str): Minimum level name; unknown names mean INFO.
        component (str): Bound to every line as ``component``.
    """

    def __init__(
        self,
        *,
        use_json: bool = False,
        level: str = "INFO",
        component: str = "command_gateway",
    ) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_event,
        ]
        if use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=True))

        min_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(min_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=False,
        )
        self._logger = structlog.get_logger().bind(component=component)

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log at ERROR; ``error`` adds error_type and error_message fields."""
        self._logger.error(message, **self._with_error(error, context))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log at CRITICAL; ``error`` adds error_type and error_message fields."""
        self._logger.critical(message, **self._with_error(error, context))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return a new adapter with ``context`` bound to every line.

        The original adapter is unchanged.
        """
        bound_adapter = ConsoleAdapter.__new__(ConsoleAdapter)
        bound_adapter._logger = self._logger.bind(**context)
        return bound_adapter

    @staticmethod
    def _with_error(error: Exception | None, context: dict[str, Any]) -> dict[str, Any]:
        if error is None:
            return context
        return {**context, "error_type": type(error).__name__, "error_message": str(error)}
