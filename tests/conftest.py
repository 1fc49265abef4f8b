"""Pytest configuration and shared fixtures.

The environment is pinned before the package is imported so that module
level ``settings`` and the container factories never touch the working
directory (error file) or a production configuration.

Fixtures build every gateway component with in-memory adapters:
- InMemoryKeyValueStore for rate windows
- InMemoryOptionStore for bounded histories
- StubNotifier for operator alerts
- MagicMock host logger (``bind`` returns the same mock)
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault(
    "ERROR_LOG_PATH",
    str(Path(tempfile.gettempdir()) / "command-gateway-tests" / "command-errors.log"),
)
os.environ.setdefault("SITE_URL", "http://localhost:8000")

import pytest  # noqa: E402

from command_gateway.application.gateway import CommandGateway, CommandRegistry  # noqa: E402
from command_gateway.application.response import ResponseEnvelope  # noqa: E402
from command_gateway.application.services import (  # noqa: E402
    ErrorLogger,
    InputValidator,
    RateLimiter,
    SecurityGate,
    ThreatScanner,
)
from command_gateway.core.constants import TOKEN_ACTION  # noqa: E402
from command_gateway.domain.value_objects import (  # noqa: E402
    Identity,
    InboundCommand,
    RequestInfo,
)
from command_gateway.infrastructure.notifications import StubNotifier  # noqa: E402
from command_gateway.infrastructure.response import BufferedResponseChannel  # noqa: E402
from command_gateway.infrastructure.security import JWTTokenService  # noqa: E402
from command_gateway.infrastructure.storage import (  # noqa: E402
    InMemoryKeyValueStore,
    InMemoryOptionStore,
)

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-characters"
SITE_HOST = "example.com"
ADMIN_EMAIL = "ops@example.com"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with in-memory or mocked dependencies")
    config.addinivalue_line("markers", "integration: Tests against real adapters (SQLite, files)")
    config.addinivalue_line("markers", "api: HTTP tests through the FastAPI TestClient")


# =============================================================================
# Infrastructure doubles
# =============================================================================


@pytest.fixture
def mock_logger():
    """Host logger mock; ``bind`` returns the same mock."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def key_value_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def option_store():
    return InMemoryOptionStore()


@pytest.fixture
def notifier(mock_logger):
    return StubNotifier(mock_logger)


@pytest.fixture
def token_service():
    return JWTTokenService(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def channel():
    return BufferedResponseChannel()


# =============================================================================
# Identities and requests
# =============================================================================


@pytest.fixture
def admin_identity():
    """Logged-in administrator with a host session."""
    return Identity(
        user_id=1,
        user_login="admin",
        capabilities=frozenset({"admin", "read"}),
        ip_address="203.0.113.9",
        user_agent="pytest-agent/1.0",
        session_token="session-abc-123",
    )


@pytest.fixture
def reader_identity():
    """Logged-in user without the admin capability."""
    return Identity(
        user_id=2,
        user_login="reader",
        capabilities=frozenset({"read"}),
        ip_address="198.51.100.20",
        user_agent="pytest-agent/1.0",
        session_token="session-reader-456",
    )


@pytest.fixture
def site_request():
    """Request metadata of a same-origin command."""
    return RequestInfo(
        method="POST",
        uri="/commands/save_settings",
        host=SITE_HOST,
        origin=f"https://{SITE_HOST}",
    )


# =============================================================================
# Gateway components
# =============================================================================


@pytest.fixture
def error_logger(mock_logger, option_store, notifier):
    return ErrorLogger(
        logger=mock_logger,
        option_store=option_store,
        notifier=notifier,
        admin_email=ADMIN_EMAIL,
        app_name="Test Gateway",
    )


@pytest.fixture
def rate_limiter(key_value_store, mock_logger):
    return RateLimiter(store=key_value_store, logger=mock_logger)


@pytest.fixture
def input_validator(error_logger):
    return InputValidator(error_logger=error_logger)


@pytest.fixture
def security_gate(token_service, rate_limiter, input_validator, error_logger, mock_logger):
    return SecurityGate(
        token_service=token_service,
        rate_limiter=rate_limiter,
        input_validator=input_validator,
        error_logger=error_logger,
        logger=mock_logger,
        expected_host=SITE_HOST,
        threat_scanner=ThreatScanner(),
    )


@pytest.fixture
def registry():
    return CommandRegistry()


@pytest.fixture
def gateway(registry, security_gate, error_logger, mock_logger):
    return CommandGateway(
        registry=registry,
        security_gate=security_gate,
        error_logger=error_logger,
        logger=mock_logger,
    )


@pytest.fixture
def envelope(channel, mock_logger, admin_identity, site_request):
    return ResponseEnvelope(
        channel=channel,
        logger=mock_logger,
        identity=admin_identity,
        request=site_request,
    )


@pytest.fixture
def make_command(token_service, admin_identity, site_request):
    """Factory for inbound commands carrying a valid header token.

    Usage:
        command = make_command("save_settings", {"title": "Hi"})
        command = make_command("save_settings", identity=reader, token=None)
    """
    _unset = object()

    def _make(action, payload=None, *, identity=None, request=None, token=_unset, capability=None):
        identity = identity or admin_identity
        if token is _unset:
            token = token_service.issue(identity, TOKEN_ACTION)
        return InboundCommand(
            action=action,
            payload=payload or {},
            identity=identity,
            request=request or site_request,
            token=token,
            capability=capability,
        )

    return _make
