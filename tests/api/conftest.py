"""API test fixtures.

The identity resolver stands in for host authentication: every request is
an administrator with a fixed session, seen from the TestClient address.
"""

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from command_gateway.core.container import clear_container_cache
from command_gateway.domain.value_objects import Identity
from command_gateway.main import create_app
from command_gateway.presentation.dependencies import client_ip

# Host of the default SITE_URL pinned in tests/conftest.py
SITE_ORIGIN = "http://localhost:8000"


def admin_resolver(request: Request) -> Identity:
    return Identity(
        user_id=1,
        user_login="admin",
        capabilities=frozenset({"admin", "read"}),
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
        session_token="api-session-1",
    )


@pytest.fixture
def client():
    clear_container_cache()
    app = create_app(identity_resolver=admin_resolver)
    with TestClient(app, headers={"Origin": SITE_ORIGIN}) as test_client:
        yield test_client
    clear_container_cache()


@pytest.fixture
def token(client):
    """Anti-forgery token of the admin identity."""
    return client.get("/commands/token").json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"X-Command-Token": token}
