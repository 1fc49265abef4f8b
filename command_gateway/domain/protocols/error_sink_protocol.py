"""Error sink port: append-only structured error log.

Implemented by ``RotatingErrorFile`` (JSON lines, size-based rotation).
Unlike the other ports a sink MAY raise; the error logger guards every
write and degrades to its fallback logger.
"""

from typing import Any, Protocol


class ErrorSinkProtocol(Protocol):
    """Append-only error log (port)."""

    def write(self, entry: dict[str, Any]) -> None:
        """Append one entry.

        Raises:
            OSError: If the entry could not be written.
        """
        ...
