"""Error classifier and logger.

Single place where gateway failures are classified, redacted and persisted.
Every entry point builds an ``ErrorRecord`` and hands it to the same four
side effects, in order, each guarded on its own:

    (a) one structured line through the host logger
    (b) one JSON line in the rotating error file
    (c) a summary in the bounded error history (option store)
    (d) one alert through the notification channel (critical severity only)

A failing side effect never prevents the next one and never reaches the
caller; it is reported through the stdlib fallback logger.

Severity tables:
    - command errors: by exception class (MRO walk), default MEDIUM
    - security violations: fixed violation table, unknown types LOW
    - performance: HIGH above twice the threshold, MEDIUM otherwise
    - database, system: HIGH
    - validation, input events: LOW
    - client errors: by message keywords, default MEDIUM

Usage:
    error_logger = ErrorLogger(logger=logger, option_store=store, error_sink=sink,
                               notifier=notifier, admin_email="ops@example.com")
    error_id = error_logger.log_command_error("save_settings", exc, identity=identity)
"""

import logging
import platform
from collections import Counter, deque
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from command_gateway.core.constants import (
    ERROR_ID_PREFIX,
    ERRORS_OPTION,
    VIOLATION_ID_PREFIX,
    VIOLATIONS_OPTION,
)
from command_gateway.core.identifiers import generate_id
from command_gateway.core.process_metrics import memory_peak, memory_usage
from command_gateway.core.result import Failure
from command_gateway.domain.entities import ErrorRecord, ViolationRecord
from command_gateway.domain.enums import ErrorCategory, Severity, ViolationType
from command_gateway.domain.protocols import (
    ErrorSinkProtocol,
    LoggerProtocol,
    NotificationProtocol,
    OptionStoreProtocol,
)
from command_gateway.domain.validators.redaction import redact, scrub_query
from command_gateway.domain.value_objects import ANONYMOUS, Identity, RequestInfo

_fallback_logger = logging.getLogger("command_gateway.error_logger")

EXCEPTION_SEVERITY: dict[str, Severity] = {
    "CommandValidationError": Severity.LOW,
    "CommandDatabaseError": Severity.HIGH,
    "PermissionError": Severity.HIGH,
    "TimeoutError": Severity.MEDIUM,
    "TypeError": Severity.HIGH,
    "AttributeError": Severity.HIGH,
    "NameError": Severity.HIGH,
    "MemoryError": Severity.CRITICAL,
    "RecursionError": Severity.CRITICAL,
    "SyntaxError": Severity.CRITICAL,
    "SystemError": Severity.CRITICAL,
}
"""Severity by exception class name; the first class in the MRO found wins."""

CLIENT_CRITICAL_KEYWORDS: tuple[str, ...] = ("script error", "network error", "out of memory")
CLIENT_HIGH_KEYWORDS: tuple[str, ...] = ("uncaught", "reference", "type")

_LOG_METHOD_BY_SEVERITY: dict[Severity, str] = {
    Severity.LOW: "info",
    Severity.MEDIUM: "warning",
    Severity.HIGH: "error",
    Severity.CRITICAL: "critical",
}

RECENT_WINDOW = timedelta(hours=24)
TOP_IP_COUNT = 5


def classify_exception(error: BaseException) -> Severity:
    """Severity of an exception from ``EXCEPTION_SEVERITY``.

    Example:
        >>> classify_exception(RecursionError())
        <Severity.CRITICAL: 'critical'>
        >>> classify_exception(ValueError())
        <Severity.MEDIUM: 'medium'>
    """
    for cls in type(error).__mro__:
        severity = EXCEPTION_SEVERITY.get(cls.__name__)
        if severity is not None:
            return severity
    return Severity.MEDIUM


def classify_client_error(message: str) -> Severity:
    """Severity of a client-reported error from keywords in its message."""
    lowered = message.lower()
    if any(keyword in lowered for keyword in CLIENT_CRITICAL_KEYWORDS):
        return Severity.CRITICAL
    if any(keyword in lowered for keyword in CLIENT_HIGH_KEYWORDS):
        return Severity.HIGH
    return Severity.MEDIUM


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


class ErrorLogger:
    """Categorizes, redacts and persists errors and security violations.

    Dependencies (injected via constructor):
        - LoggerProtocol: host structured log
        - ErrorSinkProtocol: rotating JSON-lines file
        - OptionStoreProtocol: bounded error and violation histories
        - NotificationProtocol: operator alerts

    Concurrency:
        History updates are unprotected read-modify-write on the option
        store. Concurrent loggers may lose entries (last writer wins).
    """

    def __init__(
        self,
        *,
        logger: LoggerProtocol,
        option_store: OptionStoreProtocol,
        error_sink: ErrorSinkProtocol | None = None,
        notifier: NotificationProtocol | None = None,
        admin_email: str | None = None,
        app_name: str = "Command Gateway",
        app_version: str = "0.1.0",
        environment: str = "development",
        max_stored_errors: int = 50,
        max_stored_violations: int = 100,
    ) -> None:
        """Initialize error logger with dependencies.

        Args:
            logger: Host structured logger.
            option_store: Store for the bounded histories.
            error_sink: Rotating error file. None disables side effect (b).
            notifier: Alert channel. None disables alerts.
            admin_email: Alert recipient. None disables alerts.
            app_name: Name used in alert subjects.
            app_version: Reported in system context.
            environment: Reported in system context.
            max_stored_errors: Capacity of the error history.
            max_stored_violations: Capacity of the violation history.
        """
        self._logger = logger
        self._option_store = option_store
        self._error_sink = error_sink
        self._notifier = notifier
        self._admin_email = admin_email
        self._app_name = app_name
        self._app_version = app_version
        self._environment = environment
        self._max_stored_errors = max_stored_errors
        self._max_stored_violations = max_stored_violations
        self._session_violations: deque[ViolationRecord] = deque(maxlen=max_stored_violations)

    # =========================================================================
    # Entry points
    # =========================================================================

    def log_command_error(
        self,
        action: str,
        error: BaseException,
        *,
        request_data: Mapping[str, Any] | None = None,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Log an exception raised while handling a command.

        Args:
            action: Command action name.
            error: The exception.
            request_data: Payload of the failed command (redacted before storage).
            identity: Caller.
            request: Request metadata.
            context: Additional context.

        Returns:
            str: Error record id.
        """
        record = self._build_record(
            ErrorCategory.COMMAND,
            classify_exception(error),
            str(error) or type(error).__name__,
            identity=identity,
            request=request,
            fields={
                "action": action,
                "error_type": type(error).__name__,
                "error_module": type(error).__module__,
                "request_data": dict(request_data or {}),
                "additional_context": dict(context or {}),
                "memory_usage": memory_usage(),
                "memory_peak": memory_peak(),
            },
        )
        return self._persist(record)

    def log_validation_error(
        self,
        field: str,
        reason: str,
        *,
        action: str | None = None,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Log a payload field that failed its rule (LOW)."""
        record = self._build_record(
            ErrorCategory.VALIDATION,
            Severity.LOW,
            reason,
            identity=identity,
            request=request,
            fields={
                "action": action,
                "field": field,
                "additional_context": dict(context or {}),
            },
        )
        return self._persist(record)

    def log_input_event(
        self,
        message: str,
        *,
        modifications: Mapping[str, Any],
        action: str | None = None,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
    ) -> str:
        """Log values that sanitation changed (LOW).

        Args:
            message: Event description.
            modifications: ``{path: {"original": ..., "sanitized": ...}}``.
        """
        record = self._build_record(
            ErrorCategory.INPUT,
            Severity.LOW,
            message,
            identity=identity,
            request=request,
            fields={"action": action, "modifications": dict(modifications)},
        )
        return self._persist(record)

    def log_database_error(
        self,
        operation: str,
        message: str,
        *,
        query: str = "",
        identity: Identity | None = None,
        request: RequestInfo | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Log a persistence failure (HIGH). SQL text is scrubbed of password literals."""
        record = self._build_record(
            ErrorCategory.DATABASE,
            Severity.HIGH,
            message,
            identity=identity,
            request=request,
            fields={
                "operation": operation,
                "query": scrub_query(query),
                "additional_context": dict(context or {}),
            },
        )
        return self._persist(record)

    def log_security_violation(
        self,
        violation_type: ViolationType | str,
        *,
        context: Mapping[str, Any] | None = None,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
    ) -> str:
        """Log a refused command.

        Writes a ``ViolationRecord`` to the violation history and the
        session list, then persists a SECURITY error record through the
        regular side effects (one alert when the type is critical).

        Args:
            violation_type: Violation vocabulary entry (unknown strings allowed).
            context: Check-specific context.
            identity: Caller.
            request: Request metadata.

        Returns:
            str: Violation id (shared by the violation and error records).
        """
        type_name = (
            violation_type.value
            if isinstance(violation_type, ViolationType)
            else str(violation_type)
        )
        severity = ViolationType.classify(type_name)
        identity = identity or ANONYMOUS
        request = request or RequestInfo()
        violation_context = redact(
            {
                "user_id": identity.user_id,
                "ip_address": identity.ip_address,
                "user_agent": identity.user_agent,
                **dict(context or {}),
            }
        )
        violation = ViolationRecord(
            id=generate_id(VIOLATION_ID_PREFIX),
            violation_type=type_name,
            severity=severity,
            context=violation_context,
            request_uri=request.uri,
            http_method=request.method,
            action_taken=ViolationType.describe_action(type_name),
        )
        self._session_violations.append(violation)
        self._guarded("violation history", self._store_violation, violation)

        record = self._build_record(
            ErrorCategory.SECURITY,
            severity,
            type_name,
            identity=identity,
            request=request,
            record_id=violation.id,
            fields={
                "violation_type": type_name,
                "violation_context": violation_context,
                "action_taken": violation.action_taken,
            },
        )
        return self._persist(record)

    def log_performance_issue(
        self,
        operation: str,
        execution_time_ms: float,
        threshold_ms: float,
        *,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Log a slow operation. HIGH above twice the threshold, MEDIUM otherwise."""
        severity = (
            Severity.HIGH if execution_time_ms > threshold_ms * 2 else Severity.MEDIUM
        )
        record = self._build_record(
            ErrorCategory.PERFORMANCE,
            severity,
            f"{operation} took {execution_time_ms:.2f}ms (threshold {threshold_ms:.2f}ms)",
            identity=identity,
            request=request,
            fields={
                "operation": operation,
                "execution_time_ms": round(execution_time_ms, 2),
                "threshold_ms": threshold_ms,
                "performance_ratio": round(execution_time_ms / threshold_ms, 2)
                if threshold_ms
                else None,
                "memory_usage": memory_usage(),
                "memory_peak": memory_peak(),
                "additional_context": dict(context or {}),
            },
        )
        return self._persist(record)

    def log_client_error(
        self,
        error_data: Mapping[str, Any],
        *,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
    ) -> str:
        """Log an error reported by a browser client.

        Args:
            error_data: Client report (message, name, stack, filename, lineno,
                colno, url, viewport, screen, timestamp).
        """
        message = str(error_data.get("message") or "Unknown client error")
        record = self._build_record(
            ErrorCategory.CLIENT,
            classify_client_error(message),
            message,
            identity=identity,
            request=request,
            fields={
                "error_type": error_data.get("name", "Error"),
                "stack_trace": error_data.get("stack", ""),
                "file": error_data.get("filename") or error_data.get("source") or "unknown",
                "line": error_data.get("lineno") or error_data.get("line") or 0,
                "column": error_data.get("colno") or error_data.get("column") or 0,
                "url": error_data.get("url", "unknown"),
                "browser_context": {
                    "viewport": error_data.get("viewport"),
                    "screen": error_data.get("screen"),
                    "client_timestamp": error_data.get("timestamp"),
                },
            },
        )
        return self._persist(record)

    def log_system_error(
        self,
        message: str,
        *,
        error: BaseException | None = None,
        identity: Identity | None = None,
        request: RequestInfo | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Log a failure nothing else classified.

        HIGH, or CRITICAL when ``error`` is an exception class the severity
        table marks critical (``MemoryError``, ``RecursionError``...).

        Args:
            message: Failure description.
            error: Uncaught exception, when there is one.
        """
        fields: dict[str, Any] = {"additional_context": dict(context or {})}
        severity = Severity.HIGH
        if error is not None:
            fields["error_type"] = type(error).__name__
            fields["error_module"] = type(error).__module__
            if classify_exception(error) == Severity.CRITICAL:
                severity = Severity.CRITICAL
        record = self._build_record(
            ErrorCategory.SYSTEM,
            severity,
            message,
            identity=identity,
            request=request,
            fields=fields,
        )
        return self._persist(record)

    # =========================================================================
    # Statistics and maintenance
    # =========================================================================

    def error_stats(self) -> dict[str, Any]:
        """Summary of the error history.

        Returns:
            dict: total_errors, recent_errors (24h), error_categories,
            severity_breakdown, error_rate (recent per hour), last_error.
        """
        errors = self._read_history(ERRORS_OPTION)
        if not errors:
            return {
                "total_errors": 0,
                "recent_errors": 0,
                "error_categories": {},
                "severity_breakdown": {},
                "error_rate": 0.0,
                "last_error": None,
            }
        recent = self._recent(errors)
        return {
            "total_errors": len(errors),
            "recent_errors": len(recent),
            "error_categories": dict(Counter(e.get("category", "unknown") for e in errors)),
            "severity_breakdown": dict(Counter(e.get("severity", "unknown") for e in errors)),
            "error_rate": round(len(recent) / 24, 2),
            "last_error": errors[-1].get("timestamp"),
        }

    def violation_stats(self) -> dict[str, Any]:
        """Summary of the violation history.

        Returns:
            dict: total_violations, recent_violations (24h), violation_types,
            severity_breakdown, top_violating_ips (5), security_score
            (``max(0, 100 - recent_violations)``), last_violation.
        """
        violations = self._read_history(VIOLATIONS_OPTION)
        if not violations:
            return {
                "total_violations": 0,
                "recent_violations": 0,
                "violation_types": {},
                "severity_breakdown": {},
                "top_violating_ips": {},
                "security_score": 100,
                "last_violation": None,
            }
        recent = self._recent(violations)
        ip_counts = Counter(
            (v.get("context") or {}).get("ip_address", "unknown") for v in violations
        )
        return {
            "total_violations": len(violations),
            "recent_violations": len(recent),
            "violation_types": dict(Counter(v.get("type", "unknown") for v in violations)),
            "severity_breakdown": dict(Counter(v.get("severity", "unknown") for v in violations)),
            "top_violating_ips": dict(ip_counts.most_common(TOP_IP_COUNT)),
            "security_score": max(0, 100 - len(recent)),
            "last_violation": violations[-1].get("timestamp"),
        }

    def cleanup_old_errors(self, days_to_keep: int = 30) -> int:
        """Drop error summaries older than ``days_to_keep`` days.

        Returns:
            int: Number of entries removed.
        """
        return self._cleanup(ERRORS_OPTION, days_to_keep)

    def cleanup_old_violations(self, days_to_keep: int = 30) -> int:
        """Drop violations older than ``days_to_keep`` days.

        Returns:
            int: Number of entries removed.
        """
        return self._cleanup(VIOLATIONS_OPTION, days_to_keep)

    def session_violations(self) -> list[ViolationRecord]:
        """Most recent violations recorded by this logger instance, oldest first.

        Holds at most ``max_stored_violations`` entries.
        """
        return list(self._session_violations)

    # =========================================================================
    # Record construction
    # =========================================================================

    def _build_record(
        self,
        category: ErrorCategory,
        severity: Severity,
        message: str,
        *,
        identity: Identity | None,
        request: RequestInfo | None,
        fields: Mapping[str, Any],
        record_id: str | None = None,
    ) -> ErrorRecord:
        identity = identity or ANONYMOUS
        context: dict[str, Any] = {
            **dict(fields),
            "user": {
                "user_id": identity.user_id,
                "user_login": identity.user_login,
                "ip_address": identity.ip_address,
                "user_agent": identity.user_agent,
            },
            "system": {
                "python_version": platform.python_version(),
                "app_name": self._app_name,
                "app_version": self._app_version,
                "environment": self._environment,
            },
        }
        if request is not None:
            context["request"] = {**request.to_dict(), "ip_address": identity.ip_address}
        return ErrorRecord(
            id=record_id or generate_id(ERROR_ID_PREFIX),
            category=category,
            severity=severity,
            message=message,
            context=redact(context),
        )

    # =========================================================================
    # Side effects
    # =========================================================================

    def _persist(self, record: ErrorRecord) -> str:
        self._guarded("host log", self._write_host_log, record)
        self._guarded("error file", self._write_error_file, record)
        self._guarded("error history", self._store_error, record)
        if record.is_critical:
            self._guarded("operator alert", self._send_alert, record)
        return record.id

    def _guarded(self, step: str, operation: Callable[[Any], None], record: Any) -> None:
        try:
            operation(record)
        except Exception:
            _fallback_logger.exception(
                "Error logger step failed: %s (record %s)", step, getattr(record, "id", "?")
            )

    def _write_host_log(self, record: ErrorRecord) -> None:
        log = getattr(self._logger, _LOG_METHOD_BY_SEVERITY[record.severity])
        user = record.context.get("user", {})
        log(
            "Command gateway error",
            error_id=record.id,
            category=record.category.value,
            severity=record.severity.value,
            error_message=record.message,
            user_id=user.get("user_id"),
            ip_address=user.get("ip_address"),
        )

    def _write_error_file(self, record: ErrorRecord) -> None:
        if self._error_sink is None:
            return
        self._error_sink.write(
            {
                "timestamp": record.timestamp.isoformat(),
                "level": record.severity.value.upper(),
                "category": record.category.value.upper(),
                "id": record.id,
                "data": record.to_dict(),
            }
        )

    def _store_error(self, record: ErrorRecord) -> None:
        self._append_history(ERRORS_OPTION, record.summary(), self._max_stored_errors)

    def _store_violation(self, violation: ViolationRecord) -> None:
        self._append_history(
            VIOLATIONS_OPTION, violation.to_dict(), self._max_stored_violations
        )

    def _append_history(self, option: str, entry: dict[str, Any], capacity: int) -> None:
        read = self._option_store.get(option, [])
        if isinstance(read, Failure):
            _fallback_logger.warning("History read failed for %s: %s", option, read.error)
            return
        history = list(read.value or [])
        history.append(entry)
        result = self._option_store.update(option, history[-capacity:])
        if isinstance(result, Failure):
            _fallback_logger.warning("History write failed for %s: %s", option, result.error)

    def _send_alert(self, record: ErrorRecord) -> None:
        if self._notifier is None or not self._admin_email:
            return
        subject, body = self._format_alert(record)
        result = self._notifier.send(self._admin_email, subject, body)
        if isinstance(result, Failure):
            _fallback_logger.warning("Alert delivery failed for %s: %s", record.id, result.error)

    def _format_alert(self, record: ErrorRecord) -> tuple[str, str]:
        user = record.context.get("user", {})
        request = record.context.get("request", {})
        if record.category == ErrorCategory.SECURITY:
            subject = f"[{self._app_name}] CRITICAL Security Alert - {record.message}"
            body = (
                "CRITICAL security violation detected:\n\n"
                f"Violation ID: {record.id}\n"
                f"Violation Type: {record.message}\n"
                f"Severity: {record.severity.value}\n"
                f"Timestamp: {record.timestamp.isoformat()}\n"
                f"User: {user.get('user_login', 'guest')} (ID: {user.get('user_id', 0)})\n"
                f"IP Address: {user.get('ip_address', 'unknown')}\n"
                f"User Agent: {user.get('user_agent', 'unknown')}\n"
                f"Request URI: {request.get('uri', 'unknown')}\n"
                f"Action Taken: {record.context.get('action_taken', 'Request logged')}\n\n"
                "Review the security logs and consider additional measures.\n"
            )
        else:
            subject = (
                f"[{self._app_name}] {record.category.value.capitalize()} Error Alert"
                f" - {record.severity.value}"
            )
            body = (
                f"{record.category.value.capitalize()} error detected:\n\n"
                f"Error ID: {record.id}\n"
                f"Category: {record.category.value}\n"
                f"Severity: {record.severity.value}\n"
                f"Timestamp: {record.timestamp.isoformat()}\n"
                f"Message: {record.message}\n"
                f"User: {user.get('user_login', 'guest')} (ID: {user.get('user_id', 0)})\n"
                f"IP Address: {user.get('ip_address', 'unknown')}\n\n"
                "Check the error logs for details.\n"
            )
        return subject, body

    # =========================================================================
    # History helpers
    # =========================================================================

    def _read_history(self, option: str) -> list[dict[str, Any]]:
        result = self._option_store.get(option, [])
        if isinstance(result, Failure):
            self._logger.warning(
                "History unavailable", option=option, reason=result.error.message
            )
            return []
        return [entry for entry in (result.value or []) if isinstance(entry, dict)]

    @staticmethod
    def _recent(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
        threshold = datetime.now(UTC) - RECENT_WINDOW
        return [
            entry
            for entry in entries
            if (stamp := _parse_timestamp(entry.get("timestamp"))) and stamp > threshold
        ]

    def _cleanup(self, option: str, days_to_keep: int) -> int:
        entries = self._read_history(option)
        cutoff = datetime.now(UTC) - timedelta(days=days_to_keep)
        kept = [
            entry
            for entry in entries
            if (stamp := _parse_timestamp(entry.get("timestamp"))) and stamp > cutoff
        ]
        if len(kept) != len(entries):
            result = self._option_store.update(option, kept)
            if isinstance(result, Failure):
                self._logger.error(
                    "History cleanup failed", option=option, reason=result.error.message
                )
                return 0
        return len(entries) - len(kept)
