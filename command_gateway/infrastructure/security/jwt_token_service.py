"""Anti-forgery token service (adapter).

Implements TokenServiceProtocol using PyJWT with HMAC-SHA256. A token proves
that a request was built by a page served to this user in this session.

Claims:
    sub: user id
    sid: SHA-256 of the host session token (never the token itself)
    act: action the token is bound to (one shared action for all endpoints)
    iat / exp: issue and expiry time
    jti: unique token id (UUIDv7)

Security:
    - HMAC-SHA256 (HS256), 256-bit secret key minimum
    - Stateless verification (no store lookup)
"""

import hashlib
from datetime import UTC, datetime, timedelta

import jwt
from jwt.exceptions import InvalidTokenError
from uuid_extensions import uuid7

from command_gateway.core.constants import MIN_SECRET_KEY_LENGTH, TOKEN_ALGORITHM
from command_gateway.domain.value_objects import Identity


def _session_digest(identity: Identity) -> str:
    return hashlib.sha256(identity.session_token.encode("utf-8")).hexdigest()


class JWTTokenService:
    """Mints and verifies action-scoped anti-forgery tokens.

    Usage:
        service = JWTTokenService(secret_key=settings.secret_key)
        token = service.issue(identity, "command_gateway_token")
        service.verify(token, identity, "command_gateway_token")  # True
    """

    def __init__(self, secret_key: str, lifetime_seconds: int = 86400) -> None:
        """Initialize the service.

        Args:
            secret_key: HMAC signing key (at least 32 bytes).
            lifetime_seconds: Token lifetime.

        Raises:
            ValueError: If secret_key is too short.
        """
        if len(secret_key) < MIN_SECRET_KEY_LENGTH:
            msg = f"Token secret key must be at least {MIN_SECRET_KEY_LENGTH} bytes"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._lifetime = timedelta(seconds=lifetime_seconds)

    def issue(self, identity: Identity, action: str) -> str:
        """Mint a token for ``identity`` bound to ``action``."""
        now = datetime.now(UTC)
        payload = {
            "sub": str(identity.user_id),
            "sid": _session_digest(identity),
            "act": action,
            "iat": int(now.timestamp()),
            "exp": int((now + self._lifetime).timestamp()),
            "jti": str(uuid7()),
        }
        token: str = jwt.encode(payload, self._secret_key, algorithm=TOKEN_ALGORITHM)
        return token

    def verify(self, token: str, identity: Identity, action: str) -> bool:
        """Check signature, expiry, user, session and action.

        Returns:
            bool: False for malformed, tampered, expired or foreign tokens.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["sub", "sid", "act", "exp"]},
            )
        except InvalidTokenError:
            return False

        return (
            payload["sub"] == str(identity.user_id)
            and payload["sid"] == _session_digest(identity)
            and payload["act"] == action
        )
