"""Threat signature scanning of raw payload strings.

Runs before sanitation so that injection attempts are reported as security
violations instead of being silently cleaned. Keys and string leaves of
nested containers are scanned; other scalars cannot carry a payload.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from command_gateway.domain.enums import ViolationType
from command_gateway.domain.validators import match_threat


@dataclass(frozen=True, slots=True, kw_only=True)
class ThreatMatch:
    """First signature found in a payload.

    Attributes:
        violation_type: SQL_INJECTION_ATTEMPT, XSS_ATTEMPT or MALICIOUS_INPUT.
        field: Dotted path of the offending value.
        pattern: Source of the matched signature.
    """

    violation_type: ViolationType
    field: str
    pattern: str


class ThreatScanner:
    """Depth-first scan for injection and probing signatures."""

    def scan(self, payload: Any, path: str = "") -> ThreatMatch | None:
        """Return the first match in ``payload``, or None when it is clean."""
        if isinstance(payload, str):
            found = match_threat(payload)
            if found is None:
                return None
            violation_type, pattern = found
            return ThreatMatch(violation_type=violation_type, field=path, pattern=pattern)

        if isinstance(payload, Mapping):
            for key, value in payload.items():
                child = f"{path}.{key}" if path else str(key)
                match = self.scan(str(key), child) or self.scan(value, child)
                if match is not None:
                    return match
            return None

        if isinstance(payload, (list, tuple)):
            for index, item in enumerate(payload):
                match = self.scan(item, f"{path}.{index}" if path else str(index))
                if match is not None:
                    return match
        return None
