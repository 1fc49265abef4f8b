"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming. They travel inside
DomainError values returned through Result types and never reach clients
directly; clients only see the ResponseCode vocabulary.

Categories:
- Input validation (FIELD_*, JSON_*, VALUE_*)
- Security checks (TOKEN_*, CAPABILITY_*, ORIGIN_*, RATE_LIMIT_*, THREAT_*)
- Storage adapters (STORE_*)
- Operator alerts (NOTIFICATION_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes."""

    # Input validation
    FIELD_REQUIRED = "field_required"
    FIELD_TOO_LONG = "field_too_long"
    VALUE_NOT_ALLOWED = "value_not_allowed"
    VALUE_BELOW_MINIMUM = "value_below_minimum"
    VALUE_ABOVE_MAXIMUM = "value_above_maximum"
    JSON_DECODE_FAILED = "json_decode_failed"
    VALIDATION_FAILED = "validation_failed"

    # Security checks
    TOKEN_MISSING = "token_missing"
    TOKEN_INVALID = "token_invalid"
    CAPABILITY_MISSING = "capability_missing"
    ORIGIN_MISMATCH = "origin_mismatch"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    THREAT_DETECTED = "threat_detected"

    # Storage adapters
    STORE_READ_FAILED = "store_read_failed"
    STORE_WRITE_FAILED = "store_write_failed"

    # Notifications
    NOTIFICATION_FAILED = "notification_failed"
