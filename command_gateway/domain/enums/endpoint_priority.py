"""Priority tags of registered command endpoints."""

from enum import Enum


class EndpointPriority(str, Enum):
    """Informational priority used by registry statistics."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
