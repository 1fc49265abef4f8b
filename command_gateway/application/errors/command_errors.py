"""Exceptions business handlers raise at the handler seam.

Everything below the handler returns Result values. Handlers are external
collaborators, so they report failures by raising one of these (or anything
else); the command gateway is the single place that catches them and turns
each into exactly one envelope.

Exception Hierarchy:
    CommandError (client-facing message, ``error`` envelope)
    ├── CommandValidationError (``validation_error`` envelope)
    └── CommandDatabaseError (``database_error`` envelope)

Any other exception is treated as an unexpected system failure.
"""

from collections.abc import Mapping
from typing import Any


class CommandError(Exception):
    """Handler failure whose message is safe to show to the client.

    Attributes:
        message: Client-facing message.
        data: Optional envelope data.
    """

    def __init__(self, message: str, *, data: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = dict(data or {})


class CommandValidationError(CommandError):
    """A payload field failed a check only the handler can make."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(reason)
        self.field = field
        self.reason = reason


class CommandDatabaseError(CommandError):
    """Persistence failed while handling the command.

    Attributes:
        operation: Name of the failed operation (``update_option``...).
        query: SQL text, scrubbed of password literals before logging.
    """

    def __init__(
        self,
        operation: str,
        message: str = "Database operation failed",
        *,
        query: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.query = query
