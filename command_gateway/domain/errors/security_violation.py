"""Security violation error type.

Returned by the security gate when a command is refused. The violation has
already been logged (once) when it reaches the caller; ``error_id`` points at
the persisted record.

Usage:
    from command_gateway.domain.errors import SecurityViolation
    from command_gateway.domain.enums import ViolationType

    violation = SecurityViolation(
        code=ErrorCode.TOKEN_MISSING,
        message="Security token is required",
        violation_type=ViolationType.MISSING_NONCE,
    )
    violation.severity  # Severity.HIGH
"""

from dataclasses import dataclass

from command_gateway.core.errors import DomainError
from command_gateway.domain.enums import Severity, ViolationType


@dataclass(frozen=True, slots=True, kw_only=True)
class SecurityViolation(DomainError):
    """A command was refused by a security check.

    Attributes:
        code: ErrorCode of the failed check.
        message: Client-facing message.
        details: Check-specific context (limit, window, pattern...).
        violation_type: Violation vocabulary entry.
        error_id: Identifier of the logged violation record, when logged.
    """

    violation_type: ViolationType
    error_id: str | None = None

    @property
    def severity(self) -> Severity:
        """Severity from the fixed violation table."""
        return self.violation_type.severity

    @property
    def action_taken(self) -> str:
        """Description of the gateway's reaction."""
        return self.violation_type.action_taken
