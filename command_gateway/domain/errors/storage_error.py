"""Storage and delivery adapter error types.

Adapters for the key-value store, option store and notification channel
return these inside ``Failure`` instead of raising. Callers log them and
carry on; none of them ever blocks a command.
"""

from dataclasses import dataclass

from command_gateway.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class StorageError(DomainError):
    """Key-value or option store operation failed.

    Attributes:
        code: STORE_READ_FAILED or STORE_WRITE_FAILED.
        message: Human-readable message.
        details: Store key/option name and backend error.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationError(DomainError):
    """Operator alert could not be delivered."""

    pass
