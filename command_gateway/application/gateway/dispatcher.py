"""Command gateway: the outermost boundary of command processing.

Pipeline for one inbound command:
    1. Resolve the endpoint (deprecated aliases add a ``deprecation_warning``)
    2. SecurityGate.validate (token, capability, sanitation, origin, rate limit)
    3. Run the business handler with the sanitized payload
    4. Observe execution time (slow commands are logged, never refused)

Whatever happens, exactly one envelope is transmitted. Refusals were
already logged by the gate; handler failures are logged here.

Usage:
    gateway = CommandGateway(registry=registry, security_gate=gate,
                             error_logger=error_logger, logger=logger)
    envelope = ResponseEnvelope(channel=channel, logger=logger)
    gateway.dispatch(command, envelope)
"""

from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from command_gateway.application.errors import (
    CommandDatabaseError,
    CommandError,
    CommandValidationError,
)
from command_gateway.application.gateway.registry import CommandRegistry, ResolvedEndpoint
from command_gateway.application.response.envelope import ResponseEnvelope
from command_gateway.application.services.error_logger import ErrorLogger
from command_gateway.application.services.security_gate import SecurityGate
from command_gateway.core.constants import GENERIC_ERROR_MESSAGE
from command_gateway.core.errors import ValidationError
from command_gateway.core.result import Failure, Success
from command_gateway.domain.enums import ViolationType
from command_gateway.domain.errors import SecurityViolation
from command_gateway.domain.protocols import LoggerProtocol
from command_gateway.domain.value_objects import (
    ANONYMOUS,
    EndpointConfig,
    Identity,
    InboundCommand,
    RequestInfo,
)


@dataclass(slots=True, kw_only=True)
class CommandContext:
    """What a business handler receives.

    Attributes:
        action: Canonical endpoint name.
        payload: Sanitized payload (token fields removed).
        config: Endpoint configuration.
        envelope: Response envelope; handlers may transmit through it directly.
        logger: Logger bound to the action and user.
        identity: Caller.
        request: Request metadata.
    """

    action: str
    payload: dict[str, Any]
    config: EndpointConfig
    envelope: ResponseEnvelope
    logger: LoggerProtocol
    identity: Identity = ANONYMOUS
    request: RequestInfo = field(default_factory=RequestInfo)


class CommandGateway:
    """Dispatches inbound commands to registered handlers.

    Dependencies (injected via constructor):
        - CommandRegistry: endpoint lookup
        - SecurityGate: every check before the handler runs
        - ErrorLogger: handler failures and slow commands
        - LoggerProtocol: operational logging
    """

    def __init__(
        self,
        *,
        registry: CommandRegistry,
        security_gate: SecurityGate,
        error_logger: ErrorLogger,
        logger: LoggerProtocol,
        debug: bool = False,
        performance_threshold_ms: float = 500.0,
    ) -> None:
        """Initialize the gateway.

        Args:
            registry: Endpoint registry.
            security_gate: Security checks.
            error_logger: Receives handler failures and slow commands.
            logger: Structured logger.
            debug: Host debug flag (exposes exception details to clients).
            performance_threshold_ms: Commands slower than this are logged.
        """
        self._registry = registry
        self._security_gate = security_gate
        self._error_logger = error_logger
        self._logger = logger
        self._debug = debug
        self._performance_threshold_ms = performance_threshold_ms

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    def dispatch(self, command: InboundCommand, envelope: ResponseEnvelope) -> None:
        """Process one command and transmit exactly one response.

        Exceptions raised outside the handler (endpoint resolution, security
        gate, performance observation) are logged as system errors and
        answered with a generic error envelope.

        Args:
            command: Inbound command.
            envelope: Fresh envelope for this request.
        """
        try:
            self._process(command, envelope)
        except Exception as e:
            error_id = self._error_logger.log_system_error(
                f"Command processing failed for {command.action}: {e}",
                error=e,
                identity=command.identity,
                request=command.request,
                context={"action": command.action},
            )
            if not envelope.is_sent:
                envelope.error(self._client_message(e), data={"error_id": error_id})

    def _process(self, command: InboundCommand, envelope: ResponseEnvelope) -> None:
        started = perf_counter()
        endpoint = self._registry.resolve(command.action)
        if endpoint is None:
            self._reject_unknown(command, envelope)
            return

        if endpoint.is_deprecated:
            self._logger.warning(
                "Deprecated command endpoint used",
                old_endpoint=endpoint.requested,
                new_endpoint=endpoint.action,
            )
            envelope.add_metadata("deprecation_warning", endpoint.deprecation_warning())

        match self._security_gate.validate(endpoint.action, endpoint.config, command):
            case Success(value=payload):
                self._run_handler(endpoint, command, payload, envelope)
            case Failure(error=SecurityViolation() as violation):
                self._send_refusal(violation, envelope)
            case Failure(error=ValidationError() as error):
                envelope.validation_error(error.as_field_errors(), error.message)

        self._observe(endpoint.action, command, perf_counter() - started)

    # =========================================================================
    # Stages
    # =========================================================================

    def _reject_unknown(self, command: InboundCommand, envelope: ResponseEnvelope) -> None:
        message = f"Unknown command endpoint: {command.action}"
        error_id = self._error_logger.log_system_error(
            message,
            identity=command.identity,
            request=command.request,
            context={"action": command.action},
        )
        envelope.error(message, data={"action": command.action, "error_id": error_id})

    def _send_refusal(self, violation: SecurityViolation, envelope: ResponseEnvelope) -> None:
        metadata = {"error_id": violation.error_id}
        if violation.violation_type == ViolationType.RATE_LIMIT_EXCEEDED:
            details = violation.details or {}
            envelope.rate_limit_error(
                details.get("limit", 0),
                details.get("window_seconds", 60),
                violation.message,
                metadata=metadata,
            )
            return
        envelope.security_error(violation.violation_type.value, violation.message, metadata)

    def _run_handler(
        self,
        endpoint: ResolvedEndpoint,
        command: InboundCommand,
        payload: dict[str, Any],
        envelope: ResponseEnvelope,
    ) -> None:
        handler = endpoint.config.handler
        if handler is None:
            envelope.success(payload, "Command accepted")
            return

        context = CommandContext(
            action=endpoint.action,
            payload=payload,
            config=endpoint.config,
            envelope=envelope,
            logger=self._logger.bind(action=endpoint.action, user_id=command.identity.user_id),
            identity=command.identity,
            request=command.request,
        )
        try:
            result = handler(context)
        except CommandValidationError as e:
            self._error_logger.log_validation_error(
                e.field,
                e.reason,
                action=endpoint.action,
                identity=command.identity,
                request=command.request,
            )
            envelope.validation_error({e.field: e.reason})
        except CommandDatabaseError as e:
            error_id = self._error_logger.log_database_error(
                e.operation,
                e.message,
                query=e.query,
                identity=command.identity,
                request=command.request,
                context={"action": endpoint.action},
            )
            envelope.database_error(e.operation, e.message, metadata={"error_id": error_id})
        except CommandError as e:
            error_id = self._error_logger.log_command_error(
                endpoint.action,
                e,
                request_data=payload,
                identity=command.identity,
                request=command.request,
            )
            envelope.error(e.message, data={**e.data, "error_id": error_id})
        except Exception as e:
            error_id = self._error_logger.log_system_error(
                f"Unhandled exception in {endpoint.action}: {e}",
                error=e,
                identity=command.identity,
                request=command.request,
                context={"action": endpoint.action, "request_data": payload},
            )
            envelope.error(self._client_message(e), data={"error_id": error_id})
        else:
            if envelope.is_sent:
                return
            if result is not None:
                envelope.success(result)
                return
            self._logger.warning("Handler did not send a response", action=endpoint.action)
            envelope.error("Handler did not send a response", data={"action": endpoint.action})

    def _client_message(self, error: Exception) -> str:
        return f"{type(error).__name__}: {error}" if self._debug else GENERIC_ERROR_MESSAGE

    def _observe(self, action: str, command: InboundCommand, elapsed_seconds: float) -> None:
        execution_time_ms = elapsed_seconds * 1000
        if execution_time_ms <= self._performance_threshold_ms:
            return
        self._error_logger.log_performance_issue(
            action,
            execution_time_ms,
            self._performance_threshold_ms,
            identity=command.identity,
            request=command.request,
        )
