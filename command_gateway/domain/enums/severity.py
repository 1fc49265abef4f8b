"""Severity levels shared by error and violation records."""

from enum import Enum


class Severity(str, Enum):
    """Severity of an error or security violation.

    CRITICAL records trigger an operator alert; every other level is only
    logged and persisted.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
