"""Built-in command endpoints served by the gateway itself.

    report_client_error   browser error reports (capability ``read``)
    security_stats        error and violation statistics
    cleanup_logs          drop history entries older than N days

Usage:
    register_builtin_commands(registry, error_logger)
"""

from typing import Any

from command_gateway.application.gateway.dispatcher import CommandContext
from command_gateway.application.gateway.registry import CommandRegistry
from command_gateway.application.services.error_logger import ErrorLogger
from command_gateway.domain.enums import EndpointPriority, FieldType
from command_gateway.domain.value_objects import FieldRule

CLIENT_ERROR_RULES: dict[str, FieldRule] = {
    "message": FieldRule(field_type=FieldType.TEXT, required=True, max_length=1000),
    "name": FieldRule(field_type=FieldType.TEXT, max_length=100),
    "stack": FieldRule(field_type=FieldType.TEXTAREA, max_length=10000),
    "filename": FieldRule(field_type=FieldType.URL),
    "url": FieldRule(field_type=FieldType.URL),
    "lineno": FieldRule(field_type=FieldType.INTEGER, min_value=0),
    "colno": FieldRule(field_type=FieldType.INTEGER, min_value=0),
}

CLEANUP_RULES: dict[str, FieldRule] = {
    "days": FieldRule(field_type=FieldType.INTEGER, min_value=1, max_value=365),
}


def register_builtin_commands(registry: CommandRegistry, error_logger: ErrorLogger) -> None:
    """Register the gateway's own endpoints on ``registry``."""

    def report_client_error(context: CommandContext) -> dict[str, Any]:
        error_id = error_logger.log_client_error(
            context.payload, identity=context.identity, request=context.request
        )
        return {"error_id": error_id}

    def security_stats(context: CommandContext) -> dict[str, Any]:
        return {
            "errors": error_logger.error_stats(),
            "violations": error_logger.violation_stats(),
        }

    def cleanup_logs(context: CommandContext) -> None:
        days = context.payload.get("days") or 30
        removed_errors = error_logger.cleanup_old_errors(days)
        removed_violations = error_logger.cleanup_old_violations(days)
        context.envelope.success(
            {"removed_errors": removed_errors, "removed_violations": removed_violations},
            f"Removed entries older than {days} days",
        )

    registry.register(
        "report_client_error",
        handler=report_client_error,
        capability="read",
        rate_limit=50,
        description="Record an error reported by the browser",
        priority=EndpointPriority.MEDIUM,
        field_rules=CLIENT_ERROR_RULES,
    )
    registry.register(
        "security_stats",
        handler=security_stats,
        rate_limit=10,
        description="Error and security violation statistics",
        priority=EndpointPriority.LOW,
    )
    registry.register(
        "cleanup_logs",
        handler=cleanup_logs,
        rate_limit=2,
        description="Remove old error and violation history entries",
        priority=EndpointPriority.LOW,
        field_rules=CLEANUP_RULES,
    )
