"""Security violation types and their fixed classification tables.

Usage:
    from command_gateway.domain.enums import ViolationType

    ViolationType.INVALID_NONCE.severity      # Severity.HIGH
    ViolationType.classify("unheard_of")      # Severity.LOW
"""

from enum import Enum

from command_gateway.domain.enums.severity import Severity


class ViolationType(str, Enum):
    """Reasons a command can be refused by the security gate."""

    MISSING_NONCE = "missing_nonce"
    """No anti-forgery token was supplied."""

    INVALID_NONCE = "invalid_nonce"
    """A token was supplied but failed verification."""

    INSUFFICIENT_CAPABILITY = "insufficient_capability"
    """The identity lacks the capability the endpoint requires."""

    INVALID_REFERER = "invalid_referer"
    """Origin/Referer does not match the site host."""

    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    """Too many commands inside the sliding window."""

    MALICIOUS_INPUT = "malicious_input"
    """Payload matched a traversal or scanner signature."""

    SQL_INJECTION_ATTEMPT = "sql_injection_attempt"
    """Payload matched an SQL injection signature."""

    XSS_ATTEMPT = "xss_attempt"
    """Payload matched a script injection signature."""

    @property
    def severity(self) -> Severity:
        """Fixed severity of this violation type."""
        return VIOLATION_SEVERITY[self]

    @property
    def action_taken(self) -> str:
        """Human-readable description of the gateway's reaction."""
        return VIOLATION_ACTION_TAKEN[self]

    @classmethod
    def classify(cls, violation_type: str) -> Severity:
        """Severity for a raw violation type string.

        Args:
            violation_type: Violation type, possibly one the gateway does not know.

        Returns:
            Severity: Table value, or LOW for unknown types.
        """
        try:
            return cls(violation_type).severity
        except ValueError:
            return Severity.LOW

    @classmethod
    def describe_action(cls, violation_type: str) -> str:
        """Action-taken description for a raw violation type string."""
        try:
            return cls(violation_type).action_taken
        except ValueError:
            return "Request logged"


VIOLATION_SEVERITY: dict[ViolationType, Severity] = {
    ViolationType.INVALID_NONCE: Severity.HIGH,
    ViolationType.MISSING_NONCE: Severity.HIGH,
    ViolationType.INVALID_REFERER: Severity.HIGH,
    ViolationType.INSUFFICIENT_CAPABILITY: Severity.MEDIUM,
    ViolationType.RATE_LIMIT_EXCEEDED: Severity.MEDIUM,
    ViolationType.MALICIOUS_INPUT: Severity.CRITICAL,
    ViolationType.SQL_INJECTION_ATTEMPT: Severity.CRITICAL,
    ViolationType.XSS_ATTEMPT: Severity.CRITICAL,
}

VIOLATION_ACTION_TAKEN: dict[ViolationType, str] = {
    ViolationType.INVALID_NONCE: "Request blocked, error logged",
    ViolationType.MISSING_NONCE: "Request blocked, error logged",
    ViolationType.INSUFFICIENT_CAPABILITY: "Request blocked, user logged",
    ViolationType.RATE_LIMIT_EXCEEDED: "Request blocked, IP tracked",
    ViolationType.INVALID_REFERER: "Request blocked, origin logged",
    ViolationType.MALICIOUS_INPUT: "Request blocked, admin notified",
    ViolationType.SQL_INJECTION_ATTEMPT: "Request blocked, admin notified",
    ViolationType.XSS_ATTEMPT: "Request blocked, admin notified",
}
