"""Security gate: the fixed sequence of checks every privileged command passes.

Check order (each failure short-circuits):
    1. Anti-forgery token present and valid for the shared token action
    2. Caller holds the endpoint's capability
    3. Payload free of threat signatures, then sanitized against field rules
    4. Origin (or Referer) matches the site host
    5. Sliding-window rate limit not exceeded

Every refusal is logged exactly once through the ErrorLogger and returned
as data. The business handler runs only after ``validate`` returns
``Success``, and it receives the sanitized payload, never the raw one.

Usage:
    match gate.validate("save_settings", config, command):
        case Success(value=payload):
            handler(payload)
        case Failure(error=SecurityViolation() as violation):
            envelope.security_error(violation.violation_type.value, violation.message)
        case Failure(error=error):
            envelope.validation_error(error.as_field_errors())
"""

from collections.abc import Sequence
from typing import Any
from urllib.parse import urlparse

from command_gateway.application.services.error_logger import ErrorLogger
from command_gateway.application.services.input_validator import InputValidator
from command_gateway.application.services.threat_scanner import ThreatScanner
from command_gateway.core.constants import (
    DEFAULT_CAPABILITY,
    DEFAULT_RATE_LIMIT,
    LOCAL_DEVELOPMENT_HOSTS,
    TOKEN_ACTION,
)
from command_gateway.core.errors import ErrorCode, ValidationError
from command_gateway.core.result import Failure, Result
from command_gateway.domain.enums import ViolationType
from command_gateway.domain.errors import SecurityViolation
from command_gateway.domain.protocols import (
    LoggerProtocol,
    RateLimitProtocol,
    TokenServiceProtocol,
)
from command_gateway.domain.value_objects import EndpointConfig, Identity, InboundCommand

type GateResult = Result[dict[str, Any], SecurityViolation | ValidationError]


class SecurityGate:
    """Orchestrates token, capability, sanitation, origin and rate limit checks.

    Dependencies (injected via constructor):
        - TokenServiceProtocol: anti-forgery token verification
        - RateLimitProtocol: sliding-window limiter
        - InputValidator: payload sanitation
        - ErrorLogger: single logging point for refusals
        - ThreatScanner (optional): None disables signature scanning
    """

    def __init__(
        self,
        *,
        token_service: TokenServiceProtocol,
        rate_limiter: RateLimitProtocol,
        input_validator: InputValidator,
        error_logger: ErrorLogger,
        logger: LoggerProtocol,
        expected_host: str,
        threat_scanner: ThreatScanner | None = None,
        debug: bool = False,
        default_capability: str = DEFAULT_CAPABILITY,
        default_rate_limit: int = DEFAULT_RATE_LIMIT,
        token_field_names: Sequence[str] = ("nonce", "_token"),
    ) -> None:
        """Initialize the gate.

        Args:
            token_service: Verifies anti-forgery tokens.
            rate_limiter: Rate limit checks.
            input_validator: Payload sanitation.
            error_logger: Receives every refusal.
            logger: Structured logger.
            expected_host: Host (``netloc``) requests must originate from.
            threat_scanner: Signature scanner; None skips scanning.
            debug: Host debug flag (enables the local development origin bypass).
            default_capability: Capability when the endpoint declares none.
            default_rate_limit: Limit when the endpoint declares none.
            token_field_names: Payload fields searched, in order, for the token.
        """
        self._token_service = token_service
        self._rate_limiter = rate_limiter
        self._input_validator = input_validator
        self._error_logger = error_logger
        self._logger = logger
        self._expected_host = expected_host.lower()
        self._threat_scanner = threat_scanner
        self._debug = debug
        self._default_capability = default_capability
        self._default_rate_limit = default_rate_limit
        self._token_field_names = tuple(token_field_names)

    @staticmethod
    def token_action_name() -> str:
        """The single action name every anti-forgery token is bound to."""
        return TOKEN_ACTION

    def issue_token(self, identity: Identity) -> str:
        """Mint the canonical anti-forgery token for ``identity``."""
        return self._token_service.issue(identity, TOKEN_ACTION)

    def validate(
        self, action_name: str, config: EndpointConfig, command: InboundCommand
    ) -> GateResult:
        """Run every check in order.

        Args:
            action_name: Endpoint name (rate limit key, log context).
            config: Endpoint configuration.
            command: Inbound command. Its payload is not modified.

        Returns:
            Success(dict): Sanitized payload without token fields.
            Failure(SecurityViolation): A security check refused the command.
            Failure(ValidationError): A payload field violated its rule.
        """
        refused = self._check_token(action_name, config, command) or self._check_capability(
            action_name, config, command
        )
        if refused is not None:
            return refused

        sanitized = self._sanitize(action_name, config, command)
        if isinstance(sanitized, Failure):
            return sanitized

        refused = self._check_origin(action_name, config, command) or self._check_rate_limit(
            action_name, config, command
        )
        if refused is not None:
            return refused

        self._logger.debug(
            "Command passed security gate",
            action=action_name,
            user_id=command.identity.user_id,
        )
        return sanitized

    # =========================================================================
    # Checks
    # =========================================================================

    def _extract_token(self, command: InboundCommand) -> str:
        if command.token:
            return command.token
        for name in self._token_field_names:
            value = command.payload.get(name)
            if isinstance(value, str) and value:
                return value
        return ""

    def _check_token(
        self, action_name: str, config: EndpointConfig, command: InboundCommand
    ) -> Failure[SecurityViolation] | None:
        token = self._extract_token(command)
        if not token:
            return self._refuse(
                ViolationType.MISSING_NONCE,
                ErrorCode.TOKEN_MISSING,
                "Security token missing",
                action_name,
                command,
            )
        if not self._token_service.verify(token, command.identity, TOKEN_ACTION):
            return self._refuse(
                ViolationType.INVALID_NONCE,
                ErrorCode.TOKEN_INVALID,
                "Security verification failed",
                action_name,
                command,
                token_prefix=f"{token[:10]}...",
                expected_action=TOKEN_ACTION,
            )
        return None

    def _check_capability(
        self, action_name: str, config: EndpointConfig, command: InboundCommand
    ) -> Failure[SecurityViolation] | None:
        required = command.capability or config.capability or self._default_capability
        if command.identity.has_capability(required):
            return None
        return self._refuse(
            ViolationType.INSUFFICIENT_CAPABILITY,
            ErrorCode.CAPABILITY_MISSING,
            "Insufficient permissions",
            action_name,
            command,
            required_capability=required,
            user_login=command.identity.user_login,
        )

    def _sanitize(
        self, action_name: str, config: EndpointConfig, command: InboundCommand
    ) -> GateResult:
        payload = {
            key: value
            for key, value in command.payload.items()
            if key not in self._token_field_names
        }

        if self._threat_scanner is not None:
            match = self._threat_scanner.scan(payload)
            if match is not None:
                return self._refuse(
                    match.violation_type,
                    ErrorCode.THREAT_DETECTED,
                    "Malicious input detected",
                    action_name,
                    command,
                    field=match.field,
                    pattern=match.pattern,
                )

        result = self._input_validator.sanitize(
            payload,
            config.field_rules,
            action=action_name,
            identity=command.identity,
            request=command.request,
        )
        if isinstance(result, Failure):
            self._error_logger.log_validation_error(
                result.error.field,
                result.error.message,
                action=action_name,
                identity=command.identity,
                request=command.request,
            )
        return result

    def _check_origin(
        self, action_name: str, config: EndpointConfig, command: InboundCommand
    ) -> Failure[SecurityViolation] | None:
        request = command.request
        request_host = (urlparse(f"//{request.host}").hostname or "").lower()
        if self._debug and request_host in LOCAL_DEVELOPMENT_HOSTS:
            return None

        source = request.origin or request.referer or ""
        origin_host = urlparse(source).netloc.lower() if source else ""
        if origin_host and origin_host == self._expected_host:
            return None
        return self._refuse(
            ViolationType.INVALID_REFERER,
            ErrorCode.ORIGIN_MISMATCH,
            "Invalid request origin",
            action_name,
            command,
            referer=source or "none",
            expected_host=self._expected_host,
        )

    def _check_rate_limit(
        self, action_name: str, config: EndpointConfig, command: InboundCommand
    ) -> Failure[SecurityViolation] | None:
        limit = config.rate_limit or self._default_rate_limit
        decision = self._rate_limiter.check(
            user_id=command.identity.user_id,
            action=action_name,
            ip_address=command.identity.ip_address,
            limit=limit,
        )
        if decision.allowed:
            return None
        return self._refuse(
            ViolationType.RATE_LIMIT_EXCEEDED,
            ErrorCode.RATE_LIMIT_EXCEEDED,
            f"Rate limit exceeded. Maximum {limit} requests per "
            f"{decision.window_seconds} seconds allowed. Please wait before "
            "making more requests.",
            action_name,
            command,
            request_count=decision.count,
            limit=decision.limit,
            window_seconds=decision.window_seconds,
            retry_after=decision.retry_after,
        )

    # =========================================================================
    # Refusal
    # =========================================================================

    def _refuse(
        self,
        violation_type: ViolationType,
        code: ErrorCode,
        message: str,
        action_name: str,
        command: InboundCommand,
        **details: Any,
    ) -> Failure[SecurityViolation]:
        error_id = self._error_logger.log_security_violation(
            violation_type,
            context={"action": action_name, "error_message": message, **details},
            identity=command.identity,
            request=command.request,
        )
        return Failure(
            error=SecurityViolation(
                code=code,
                message=message,
                details=details,
                violation_type=violation_type,
                error_id=error_id,
            )
        )
