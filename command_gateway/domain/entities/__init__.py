"""Domain entities.

Usage:
    from command_gateway.domain.entities import ErrorRecord, ViolationRecord
"""

from command_gateway.domain.entities.error_record import ErrorRecord
from command_gateway.domain.entities.violation_record import ViolationRecord

__all__ = ["ErrorRecord", "ViolationRecord"]
