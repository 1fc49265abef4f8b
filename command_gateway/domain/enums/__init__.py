"""Domain enums.

Usage:
    from command_gateway.domain.enums import FieldType, Severity, ViolationType
"""

from command_gateway.domain.enums.endpoint_priority import EndpointPriority
from command_gateway.domain.enums.error_category import ErrorCategory
from command_gateway.domain.enums.escape_context import EscapeContext
from command_gateway.domain.enums.field_type import FieldType
from command_gateway.domain.enums.severity import Severity
from command_gateway.domain.enums.violation_type import ViolationType

__all__ = [
    "EndpointPriority",
    "ErrorCategory",
    "EscapeContext",
    "FieldType",
    "Severity",
    "ViolationType",
]
