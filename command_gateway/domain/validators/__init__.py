"""Pure validation building blocks: sanitizers, rule table, threat signatures.

Usage:
    from command_gateway.domain.validators import build_default_registry, DEFAULT_FIELD_RULES
"""

from command_gateway.domain.validators.field_rules import DEFAULT_FIELD_RULES
from command_gateway.domain.validators.registry import (
    DEFAULT_SANITIZERS,
    Sanitizer,
    SanitizerMetadata,
    SanitizerRegistry,
    build_default_registry,
)
from command_gateway.domain.validators.sanitizers import (
    is_numeric,
    sanitize_boolean,
    sanitize_key,
    unslash,
)
from command_gateway.domain.validators.threat_patterns import match_threat

__all__ = [
    "DEFAULT_FIELD_RULES",
    "DEFAULT_SANITIZERS",
    "Sanitizer",
    "SanitizerMetadata",
    "SanitizerRegistry",
    "build_default_registry",
    "is_numeric",
    "match_threat",
    "sanitize_boolean",
    "sanitize_key",
    "unslash",
]
