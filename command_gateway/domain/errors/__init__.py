"""Domain errors package.

Usage:
    from command_gateway.domain.errors import SecurityViolation, StorageError
"""

from command_gateway.domain.errors.security_violation import SecurityViolation
from command_gateway.domain.errors.storage_error import NotificationError, StorageError

__all__ = [
    "NotificationError",
    "SecurityViolation",
    "StorageError",
]
