"""Gateway dependency factories.

Application-scoped singletons for the command pipeline, wired from the
infrastructure factories. Envelopes are per request and are built by
``build_envelope``.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from command_gateway.core.config import get_settings
from command_gateway.core.container.infrastructure import (
    get_error_sink,
    get_key_value_store,
    get_logger,
    get_notifier,
    get_option_store,
    get_token_service,
)

if TYPE_CHECKING:
    from command_gateway.application.gateway import CommandGateway, CommandRegistry
    from command_gateway.application.response import ResponseEnvelope
    from command_gateway.application.services import (
        ErrorLogger,
        InputValidator,
        OutputEscaper,
        RateLimiter,
        SecurityGate,
        ThreatScanner,
    )
    from command_gateway.domain.protocols import ResponseChannelProtocol
    from command_gateway.domain.value_objects import Identity, RequestInfo


@lru_cache()
def get_error_logger() -> "ErrorLogger":
    """Get the error logger singleton."""
    from command_gateway.application.services import ErrorLogger

    settings = get_settings()
    return ErrorLogger(
        logger=get_logger(),
        option_store=get_option_store(),
        error_sink=get_error_sink(),
        notifier=get_notifier(),
        admin_email=settings.admin_email,
        app_name=settings.app_name,
        app_version=settings.app_version,
        environment=settings.environment.value,
        max_stored_errors=settings.max_stored_errors,
        max_stored_violations=settings.max_stored_violations,
    )


@lru_cache()
def get_rate_limiter() -> "RateLimiter":
    """Get the sliding-window rate limiter singleton."""
    from command_gateway.application.services import RateLimiter

    return RateLimiter(
        store=get_key_value_store(),
        logger=get_logger(),
        window_seconds=get_settings().rate_limit_window_seconds,
    )


@lru_cache()
def get_input_validator() -> "InputValidator":
    """Get the input validator singleton (default rule table, built-in sanitizers)."""
    from command_gateway.application.services import InputValidator

    return InputValidator(
        error_logger=get_error_logger(),
        unescape_host_input=get_settings().unescape_host_input,
    )


@lru_cache()
def get_threat_scanner() -> "ThreatScanner | None":
    """Get the threat scanner, or None when THREAT_SCAN_ENABLED is false."""
    from command_gateway.application.services import ThreatScanner

    return ThreatScanner() if get_settings().threat_scan_enabled else None


@lru_cache()
def get_output_escaper() -> "OutputEscaper":
    from command_gateway.application.services import OutputEscaper

    return OutputEscaper()


@lru_cache()
def get_security_gate() -> "SecurityGate":
    """Get the security gate singleton."""
    from command_gateway.application.services import SecurityGate

    settings = get_settings()
    return SecurityGate(
        token_service=get_token_service(),
        rate_limiter=get_rate_limiter(),
        input_validator=get_input_validator(),
        error_logger=get_error_logger(),
        logger=get_logger(),
        expected_host=settings.expected_host,
        threat_scanner=get_threat_scanner(),
        debug=settings.debug,
        default_capability=settings.default_capability,
        default_rate_limit=settings.default_rate_limit,
        token_field_names=settings.token_field_names,
    )


@lru_cache()
def get_command_registry() -> "CommandRegistry":
    """Get the endpoint registry singleton.

    Business handlers register themselves on this instance at startup.
    """
    from command_gateway.application.gateway import CommandRegistry

    settings = get_settings()
    return CommandRegistry(
        default_capability=settings.default_capability,
        default_rate_limit=settings.default_rate_limit,
    )


@lru_cache()
def get_command_gateway() -> "CommandGateway":
    """Get the command gateway singleton."""
    from command_gateway.application.gateway import CommandGateway

    settings = get_settings()
    return CommandGateway(
        registry=get_command_registry(),
        security_gate=get_security_gate(),
        error_logger=get_error_logger(),
        logger=get_logger(),
        debug=settings.debug,
        performance_threshold_ms=settings.performance_threshold_ms,
    )


def build_envelope(
    channel: "ResponseChannelProtocol",
    *,
    identity: "Identity | None" = None,
    request: "RequestInfo | None" = None,
    started_at: float | None = None,
) -> "ResponseEnvelope":
    """Build a fresh response envelope for one request (not cached).

    Args:
        channel: Host response channel for this request.
        identity: Caller (debug block).
        request: Request metadata (debug block).
        started_at: ``perf_counter()`` request start; defaults to the
            per-request mark.
    """
    from command_gateway.application.response import ResponseEnvelope

    settings = get_settings()
    return ResponseEnvelope(
        channel=channel,
        logger=get_logger(),
        debug=settings.debug,
        request_id_prefix=settings.request_id_prefix,
        app_version=settings.app_version,
        identity=identity,
        request=request,
        started_at=started_at,
    )
