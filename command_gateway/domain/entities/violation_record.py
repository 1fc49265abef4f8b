"""Security violation record entity.

Entries of the bounded violation history. Stored as plain mappings in the
option store; ``to_dict``/``from_dict`` convert at that boundary.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from command_gateway.domain.enums import Severity


@dataclass(slots=True, kw_only=True)
class ViolationRecord:
    """One refused command.

    Attributes:
        id: Unique identifier (``gw_vio_...``).
        violation_type: Violation vocabulary entry (unknown types are kept
            verbatim).
        severity: Severity from the violation table.
        context: Redacted context: user_id, ip_address, user_agent, action
            and check-specific fields.
        request_uri: URI of the refused request.
        http_method: HTTP method of the refused request.
        action_taken: Description of the gateway's reaction.
        timestamp: Creation time (UTC).
    """

    id: str
    violation_type: str
    severity: Severity
    context: dict[str, Any] = field(default_factory=dict)
    request_uri: str = ""
    http_method: str = ""
    action_taken: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def ip_address(self) -> str:
        return str(self.context.get("ip_address", "unknown"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.violation_type,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "request_uri": self.request_uri,
            "http_method": self.http_method,
            "action_taken": self.action_taken,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ViolationRecord":
        """Rebuild a record read back from the option store.

        Raises:
            KeyError: If a mandatory key is missing.
            ValueError: If severity or timestamp cannot be parsed.
        """
        return cls(
            id=data["id"],
            violation_type=data["type"],
            severity=Severity(data["severity"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            context=dict(data.get("context") or {}),
            request_uri=data.get("request_uri", ""),
            http_method=data.get("http_method", ""),
            action_taken=data.get("action_taken", ""),
        )
