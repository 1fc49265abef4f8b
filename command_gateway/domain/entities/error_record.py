"""Error record entity.

One classified error or violation as persisted by the error logger. The
full record goes to the host log and the rotating file; a summary goes to
the bounded error history.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from command_gateway.domain.enums import ErrorCategory, Severity


@dataclass(slots=True, kw_only=True)
class ErrorRecord:
    """Classified error.

    Attributes:
        id: Unique identifier (``gw_err_...``).
        category: Logging entry point that produced the record.
        severity: Severity from the category's table.
        message: Human-readable message.
        context: Redacted structured context (user, system, request,
            category-specific fields).
        timestamp: Creation time (UTC).
    """

    id: str
    category: ErrorCategory
    severity: Severity
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        """Full JSON-safe representation."""
        return {
            "id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "context": self.context,
        }

    def summary(self) -> dict[str, Any]:
        """Compact entry kept in the bounded error history."""
        user = self.context.get("user", {})
        request = self.context.get("request", {})
        return {
            "id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "user_id": user.get("user_id", 0),
            "context_summary": {
                "action": self.context.get("action"),
                "operation": self.context.get("operation"),
                "violation_type": self.context.get("violation_type"),
                "ip_address": request.get("ip_address", user.get("ip_address")),
            },
        }
