"""Anti-forgery token service port.

Tokens are bound to a single action name shared by every endpoint, to the
user and to the user's session.
"""

from typing import Protocol

from command_gateway.domain.value_objects import Identity


class TokenServiceProtocol(Protocol):
    """Mints and verifies anti-forgery tokens (port)."""

    def issue(self, identity: Identity, action: str) -> str:
        """Mint a token for ``identity`` bound to ``action``."""
        ...

    def verify(self, token: str, identity: Identity, action: str) -> bool:
        """True when ``token`` was minted for this identity and action and has not expired."""
        ...
