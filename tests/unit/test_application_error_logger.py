"""Unit tests for ErrorLogger (classification, redaction, persistence).

Tests cover:
- Redaction of sensitive keys in every persisted form
- Severity tables (exceptions, violations, performance, client errors)
- Alerts for critical records only
- Bounded histories
- Guarded side effects (one failing step never blocks the others)
- Statistics and cleanup
"""

import logging
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from command_gateway.application.errors import CommandDatabaseError, CommandValidationError
from command_gateway.application.services import ErrorLogger
from command_gateway.application.services.error_logger import (
    classify_client_error,
    classify_exception,
)
from command_gateway.core.constants import ERRORS_OPTION, REDACTED, VIOLATIONS_OPTION
from command_gateway.core.enums import ErrorCode
from command_gateway.core.result import Failure, Success
from command_gateway.domain.enums import Severity, ViolationType
from command_gateway.domain.errors import StorageError
from command_gateway.domain.value_objects import RequestInfo


def _history(option_store, option=ERRORS_OPTION):
    return option_store.get(option, []).value


@pytest.fixture
def error_sink():
    return MagicMock()


@pytest.fixture
def logger_with_sink(mock_logger, option_store, notifier, error_sink):
    return ErrorLogger(
        logger=mock_logger,
        option_store=option_store,
        error_sink=error_sink,
        notifier=notifier,
        admin_email="ops@example.com",
        app_name="Test Gateway",
    )


@pytest.mark.unit
class TestRedaction:
    """Sensitive values never reach a persisted form."""

    def test_password_redacted_everywhere(
        self, logger_with_sink, error_sink, option_store, mock_logger, admin_identity
    ):
        error_id = logger_with_sink.log_command_error(
            "save_settings",
            ValueError("bad input"),
            request_data={"user_password": "hunter2", "title": "ok"},
            identity=admin_identity,
        )

        line = error_sink.write.call_args.args[0]
        request_data = line["data"]["context"]["request_data"]
        assert request_data == {"user_password": REDACTED, "title": "ok"}
        assert line["id"] == error_id
        assert line["level"] == "MEDIUM"
        assert line["category"] == "COMMAND"
        assert "hunter2" not in str(_history(option_store))
        assert "hunter2" not in str(mock_logger.mock_calls)

    def test_violation_context_redacted(self, error_logger, option_store):
        error_logger.log_security_violation(
            "invalid_nonce", context={"nonce": "abc", "api_key": "k", "action": "export"}
        )

        stored = _history(option_store, VIOLATIONS_OPTION)[0]["context"]
        assert stored["nonce"] == REDACTED
        assert stored["api_key"] == REDACTED
        assert stored["action"] == "export"

    def test_database_query_scrubbed(self, logger_with_sink, error_sink):
        logger_with_sink.log_database_error(
            "update_user",
            "Write failed",
            query="UPDATE users SET password = 'hunter2' WHERE id = 1",
        )

        query = error_sink.write.call_args.args[0]["data"]["context"]["query"]
        assert "hunter2" not in query
        assert REDACTED in query


@pytest.mark.unit
class TestSeverityTables:
    """Test the fixed classification tables."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (RecursionError(), Severity.CRITICAL),
            (MemoryError(), Severity.CRITICAL),
            (TypeError(), Severity.HIGH),
            (PermissionError(), Severity.HIGH),
            (TimeoutError(), Severity.MEDIUM),
            (ValueError(), Severity.MEDIUM),
            (CommandValidationError("title", "too long"), Severity.LOW),
            (CommandDatabaseError("update_option"), Severity.HIGH),
        ],
    )
    def test_classify_exception(self, error, expected):
        assert classify_exception(error) == expected

    def test_subclass_uses_nearest_table_entry(self):
        class SlowResponse(TimeoutError):
            pass

        assert classify_exception(SlowResponse()) == Severity.MEDIUM

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("Script error.", Severity.CRITICAL),
            ("Network Error while fetching", Severity.CRITICAL),
            ("Uncaught exception", Severity.HIGH),
            ("TypeError: x is undefined", Severity.HIGH),
            ("Something odd", Severity.MEDIUM),
        ],
    )
    def test_classify_client_error(self, message, expected):
        assert classify_client_error(message) == expected

    def test_unknown_violation_type_is_low(self, error_logger, option_store, notifier):
        error_logger.log_security_violation("made_up_violation")

        stored = _history(option_store, VIOLATIONS_OPTION)[0]
        assert stored["type"] == "made_up_violation"
        assert stored["severity"] == "low"
        assert stored["action_taken"] == "Request logged"
        assert notifier.sent == []

    @pytest.mark.parametrize(("elapsed", "expected"), [(1200.0, "high"), (700.0, "medium")])
    def test_performance_severity(self, error_logger, option_store, elapsed, expected):
        error_logger.log_performance_issue("export_settings", elapsed, 500)

        assert _history(option_store)[0]["severity"] == expected

    def test_system_error_escalates_for_critical_exception(
        self, error_logger, option_store, notifier
    ):
        error_logger.log_system_error("Handler crashed", error=RecursionError("deep"))

        assert _history(option_store)[0]["severity"] == "critical"
        assert len(notifier.sent) == 1
        assert notifier.sent[0].subject == "[Test Gateway] System Error Alert - critical"

    def test_system_error_without_exception_is_high(self, error_logger, option_store):
        error_logger.log_system_error("Unknown endpoint")

        assert _history(option_store)[0]["severity"] == "high"


@pytest.mark.unit
class TestAlerts:
    """One alert per critical record, none otherwise."""

    def test_critical_violation_alerts_once(self, error_logger, notifier, admin_identity):
        request = RequestInfo(uri="/commands/save_settings")

        violation_id = error_logger.log_security_violation(
            ViolationType.SQL_INJECTION_ATTEMPT, identity=admin_identity, request=request
        )

        assert len(notifier.sent) == 1
        alert = notifier.sent[0]
        assert alert.to == "ops@example.com"
        assert alert.subject == "[Test Gateway] CRITICAL Security Alert - sql_injection_attempt"
        assert f"Violation ID: {violation_id}" in alert.body
        assert "IP Address: 203.0.113.9" in alert.body
        assert "Request URI: /commands/save_settings" in alert.body
        assert "Action Taken: Request blocked, admin notified" in alert.body

    def test_high_violation_does_not_alert(self, error_logger, notifier):
        error_logger.log_security_violation(ViolationType.INVALID_NONCE)

        assert notifier.sent == []

    def test_no_alert_without_admin_email(self, mock_logger, option_store, notifier):
        error_logger = ErrorLogger(logger=mock_logger, option_store=option_store, notifier=notifier)

        error_logger.log_security_violation(ViolationType.XSS_ATTEMPT)

        assert notifier.sent == []

    def test_critical_client_error_alerts(self, error_logger, notifier):
        error_logger.log_client_error({"message": "Script error.", "lineno": 3})

        assert len(notifier.sent) == 1
        assert "Client Error Alert" in notifier.sent[0].subject


@pytest.mark.unit
class TestHistories:
    """Test the bounded histories."""

    def test_error_history_keeps_most_recent(self, mock_logger, option_store):
        error_logger = ErrorLogger(logger=mock_logger, option_store=option_store, max_stored_errors=3)

        for index in range(5):
            error_logger.log_validation_error("field", f"reason {index}")

        assert [e["message"] for e in _history(option_store)] == [
            "reason 2",
            "reason 3",
            "reason 4",
        ]

    def test_violation_history_keeps_most_recent(self, mock_logger, option_store):
        error_logger = ErrorLogger(
            logger=mock_logger, option_store=option_store, max_stored_violations=2
        )

        ids = [error_logger.log_security_violation("invalid_nonce") for _ in range(4)]

        assert [v["id"] for v in _history(option_store, VIOLATIONS_OPTION)] == ids[-2:]

    def test_violation_and_error_records_share_id(self, error_logger, option_store):
        violation_id = error_logger.log_security_violation("rate_limit_exceeded")

        assert violation_id.startswith("gw_vio_")
        assert _history(option_store, VIOLATIONS_OPTION)[0]["id"] == violation_id
        error_entry = _history(option_store)[0]
        assert error_entry["id"] == violation_id
        assert error_entry["category"] == "security"
        assert error_entry["context_summary"]["violation_type"] == "rate_limit_exceeded"

    def test_session_violations(self, error_logger):
        error_logger.log_security_violation("missing_nonce")
        error_logger.log_security_violation("invalid_referer")

        assert [v.violation_type for v in error_logger.session_violations()] == [
            "missing_nonce",
            "invalid_referer",
        ]

    def test_session_violations_are_bounded(self, mock_logger, option_store):
        error_logger = ErrorLogger(
            logger=mock_logger, option_store=option_store, max_stored_violations=3
        )

        ids = [error_logger.log_security_violation("invalid_nonce") for _ in range(10)]

        assert [v.id for v in error_logger.session_violations()] == ids[-3:]


@pytest.mark.unit
class TestGuardedSideEffects:
    """A failing side effect never blocks the next one or reaches the caller."""

    def test_sink_failure(self, logger_with_sink, error_sink, option_store, caplog):
        error_sink.write.side_effect = OSError("disk full")

        with caplog.at_level(logging.ERROR, logger="command_gateway.error_logger"):
            error_id = logger_with_sink.log_validation_error("title", "Too long")

        assert error_id.startswith("gw_err_")
        assert len(_history(option_store)) == 1
        assert "error file" in caplog.text

    def test_notifier_exception(self, mock_logger, option_store):
        notifier = MagicMock()
        notifier.send.side_effect = RuntimeError("SES down")
        error_logger = ErrorLogger(
            logger=mock_logger,
            option_store=option_store,
            notifier=notifier,
            admin_email="ops@example.com",
        )

        error_logger.log_security_violation("xss_attempt")

        notifier.send.assert_called_once()
        assert len(_history(option_store, VIOLATIONS_OPTION)) == 1

    def test_history_write_failure(self, mock_logger, caplog):
        store = MagicMock()
        store.get.return_value = Success(value=[])
        store.update.return_value = Failure(
            error=StorageError(code=ErrorCode.STORE_WRITE_FAILED, message="locked")
        )
        error_logger = ErrorLogger(logger=mock_logger, option_store=store)

        with caplog.at_level(logging.WARNING, logger="command_gateway.error_logger"):
            error_logger.log_system_error("boom")

        mock_logger.error.assert_called_once()
        assert "History write failed" in caplog.text

    def test_host_log_failure(self, mock_logger, option_store):
        mock_logger.critical.side_effect = RuntimeError("log pipe closed")
        error_logger = ErrorLogger(logger=mock_logger, option_store=option_store)

        error_logger.log_system_error("boom", error=MemoryError())

        assert _history(option_store)[0]["severity"] == "critical"

    def test_log_method_follows_severity(self, error_logger, mock_logger):
        error_logger.log_validation_error("title", "Too long")
        error_logger.log_database_error("insert", "Constraint failed")

        mock_logger.info.assert_called_once()
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["category"] == "database"


@pytest.mark.unit
class TestStatistics:
    """Test statistics and cleanup."""

    def test_empty_stats(self, error_logger):
        assert error_logger.error_stats()["total_errors"] == 0
        assert error_logger.violation_stats()["security_score"] == 100

    def test_violation_stats(self, error_logger, admin_identity, reader_identity):
        error_logger.log_security_violation("invalid_nonce", identity=admin_identity)
        error_logger.log_security_violation("invalid_nonce", identity=admin_identity)
        error_logger.log_security_violation("rate_limit_exceeded", identity=reader_identity)

        stats = error_logger.violation_stats()

        assert stats["total_violations"] == 3
        assert stats["recent_violations"] == 3
        assert stats["security_score"] == 97
        assert stats["violation_types"] == {"invalid_nonce": 2, "rate_limit_exceeded": 1}
        assert stats["severity_breakdown"] == {"high": 2, "medium": 1}
        assert stats["top_violating_ips"] == {"203.0.113.9": 2, "198.51.100.20": 1}

    def test_error_stats(self, error_logger):
        error_logger.log_validation_error("a", "bad")
        error_logger.log_database_error("select", "timeout")

        stats = error_logger.error_stats()

        assert stats["total_errors"] == 2
        assert stats["error_categories"] == {"validation": 1, "database": 1}
        assert stats["severity_breakdown"] == {"low": 1, "high": 1}
        assert stats["last_error"] is not None

    def test_cleanup_drops_old_entries(self, error_logger, option_store):
        start = datetime(2026, 1, 1, 9, 0, 0)
        with freeze_time(start):
            error_logger.log_validation_error("old", "old entry")
            error_logger.log_security_violation("invalid_nonce")
        with freeze_time(start + timedelta(days=20)):
            error_logger.log_validation_error("new", "new entry")

        with freeze_time(start + timedelta(days=35)):
            assert error_logger.violation_stats()["security_score"] == 100
            removed_errors = error_logger.cleanup_old_errors(30)
            removed_violations = error_logger.cleanup_old_violations(30)

        # the violation also wrote one security record to the error history
        assert removed_errors == 2
        assert removed_violations == 1
        assert [e["message"] for e in _history(option_store)] == ["new entry"]
        assert _history(option_store, VIOLATIONS_OPTION) == []

    def test_cleanup_without_old_entries_is_noop(self, error_logger):
        error_logger.log_validation_error("a", "bad")

        assert error_logger.cleanup_old_errors(30) == 0
