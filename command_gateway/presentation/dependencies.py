"""Request-scoped FastAPI dependencies.

``resolve_identity`` is the seam between the host's authentication and the
gateway. The default resolver knows nothing about users: every caller is
anonymous and only the client address, user agent and session cookie are
taken from the request. Hosts replace it through ``create_app``.
"""

from fastapi import Request

from command_gateway.core.config import get_settings
from command_gateway.domain.value_objects import Identity, RequestInfo

SESSION_COOKIE = "session_id"


def client_ip(request: Request, *, trust_forwarded: bool | None = None) -> str:
    """Client address of the connection.

    The first ``X-Forwarded-For`` hop is used only when ``TRUST_FORWARDED_IP``
    is set (or ``trust_forwarded`` is passed).
    """
    if trust_forwarded is None:
        trust_forwarded = get_settings().trust_forwarded_ip
    forwarded = request.headers.get("x-forwarded-for")
    if trust_forwarded and forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def resolve_identity(request: Request) -> Identity:
    """Anonymous identity carrying the caller's network details."""
    return Identity(
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
        session_token=request.cookies.get(SESSION_COOKIE, ""),
    )


def request_info(request: Request) -> RequestInfo:
    """Transport metadata of ``request``."""
    uri = request.url.path
    if request.url.query:
        uri = f"{uri}?{request.url.query}"
    return RequestInfo(
        method=request.method,
        uri=uri,
        host=request.headers.get("host", ""),
        origin=request.headers.get("origin"),
        referer=request.headers.get("referer"),
        forwarded_for=request.headers.get("x-forwarded-for"),
    )
