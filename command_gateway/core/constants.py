"""Centralized constants for internal implementation details.

These are fixed parts of the gateway contract, NOT environment-specific
configuration. Tunable values (limits, capacities, paths) live in
``command_gateway/core/config.py``.

Categories:
- Anti-forgery token: the single shared action name
- Envelope: format version, identifier prefixes
- Rate limiting: key prefix, default limit and window
- Persistence: option names for the bounded histories
- Redaction: sensitive key fragments and placeholder
"""

# =============================================================================
# Anti-forgery Token
# =============================================================================

TOKEN_ACTION: str = "command_gateway_token"
"""Action every anti-forgery token is bound to (one for all endpoints)."""

TOKEN_ALGORITHM: str = "HS256"
"""JWT signing algorithm for anti-forgery tokens."""

MIN_SECRET_KEY_LENGTH: int = 32
"""Minimum signing key length in bytes (256 bits)."""


# =============================================================================
# Envelope
# =============================================================================

RESPONSE_VERSION: str = "2.4.0"
"""Envelope format version reported in ``meta.version``."""

ERROR_ID_PREFIX: str = "gw_err_"
"""Prefix of error record identifiers."""

VIOLATION_ID_PREFIX: str = "gw_vio_"
"""Prefix of violation record identifiers."""

GENERIC_ERROR_MESSAGE: str = "An unexpected error occurred while processing the request."
"""Client-facing message for unexpected failures outside debug mode."""


# =============================================================================
# Rate Limiting
# =============================================================================

RATE_WINDOW_KEY_PREFIX: str = "rate_window"
"""Prefix of key-value store keys holding rate windows."""

DEFAULT_RATE_LIMIT: int = 10
"""Requests allowed per window when an endpoint declares no limit."""

RATE_LIMIT_WINDOW_SECONDS: int = 60
"""Sliding window length in seconds."""

IP_HASH_LENGTH: int = 16
"""Hex characters of the IP digest kept in rate window keys."""


# =============================================================================
# Security
# =============================================================================

DEFAULT_CAPABILITY: str = "admin"
"""Capability required when an endpoint declares none."""

LOCAL_DEVELOPMENT_HOSTS: tuple[str, ...] = ("localhost", "127.0.0.1")
"""Hosts for which the origin check is skipped while debug is on."""

TRUTHY_STRINGS: frozenset[str] = frozenset({"1", "true", "yes", "on"})
"""Strings coerced to True by the boolean sanitizer (case-insensitive)."""


# =============================================================================
# Persistence
# =============================================================================

VIOLATIONS_OPTION: str = "command_gateway_security_violations"
"""Option name of the bounded security violation history."""

ERRORS_OPTION: str = "command_gateway_errors"
"""Option name of the bounded error history."""


# =============================================================================
# Redaction
# =============================================================================

REDACTED: str = "[REDACTED]"
"""Placeholder written in place of sensitive values."""

SENSITIVE_KEY_FRAGMENTS: tuple[str, ...] = (
    "password",
    "passwd",
    "pwd",
    "pass",
    "token",
    "key",
    "secret",
    "auth",
    "nonce",
    "csrf",
    "session",
    "credit_card",
    "cc_number",
    "cvv",
    "ssn",
    "social_security",
)
"""Case-insensitive key fragments whose values are never persisted."""
