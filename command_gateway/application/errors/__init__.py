"""Application layer errors.

Exports:
    CommandError: Handler failure with a client-facing message
    CommandValidationError: Handler-side field validation failure
    CommandDatabaseError: Handler-side persistence failure
"""

from command_gateway.application.errors.command_errors import (
    CommandDatabaseError,
    CommandError,
    CommandValidationError,
)

__all__ = [
    "CommandDatabaseError",
    "CommandError",
    "CommandValidationError",
]
