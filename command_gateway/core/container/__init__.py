"""Container module - Centralized dependency injection (composition root).

Every gateway component receives its collaborators through ``__init__``.
This package is the one place that decides which adapter backs each
protocol and builds application-scoped singletons with ``lru_cache``.

    from command_gateway.core.container import get_command_gateway, get_logger

Modules:
- infrastructure: logger, stores, error file, alert channel, token service
- gateway: error logger, rate limiter, validator, security gate, registry,
  dispatcher, per-request envelopes
"""

from command_gateway.core.container.gateway import (
    build_envelope,
    get_command_gateway,
    get_command_registry,
    get_error_logger,
    get_input_validator,
    get_output_escaper,
    get_rate_limiter,
    get_security_gate,
    get_threat_scanner,
)
from command_gateway.core.container.infrastructure import (
    get_error_sink,
    get_key_value_store,
    get_logger,
    get_notifier,
    get_option_store,
    get_token_service,
)

_CACHED_FACTORIES = (
    get_command_gateway,
    get_command_registry,
    get_error_logger,
    get_input_validator,
    get_output_escaper,
    get_rate_limiter,
    get_security_gate,
    get_threat_scanner,
    get_error_sink,
    get_key_value_store,
    get_logger,
    get_notifier,
    get_option_store,
    get_token_service,
)


def clear_container_cache() -> None:
    """Drop every cached singleton (tests, settings reload)."""
    for factory in _CACHED_FACTORIES:
        factory.cache_clear()


__all__ = [
    "build_envelope",
    "clear_container_cache",
    "get_command_gateway",
    "get_command_registry",
    "get_error_logger",
    "get_error_sink",
    "get_input_validator",
    "get_key_value_store",
    "get_logger",
    "get_notifier",
    "get_option_store",
    "get_output_escaper",
    "get_rate_limiter",
    "get_security_gate",
    "get_threat_scanner",
    "get_token_service",
]
