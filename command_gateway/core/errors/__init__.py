"""Core error types.

Usage:
    from command_gateway.core.errors import DomainError, ValidationError
"""

from command_gateway.core.enums import ErrorCode
from command_gateway.core.errors.domain_error import DomainError, ValidationError

__all__ = ["DomainError", "ErrorCode", "ValidationError"]
