"""Runtime environments for the gateway.

Used by Settings to switch environment-specific behaviour (secret checks,
log rendering, local-development origin bypass).
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
