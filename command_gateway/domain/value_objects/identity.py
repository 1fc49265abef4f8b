"""Identity of the caller issuing a command.

Resolved by the host for every request and never persisted; the logger
stores only derived fields (user id, IP, user agent).
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class Identity:
    """Authenticated (or anonymous) caller.

    Attributes:
        user_id: Host user identifier. 0 means anonymous.
        user_login: Display login, used in operator alerts.
        capabilities: Capabilities granted to the user.
        ip_address: Client IP as seen by the host.
        user_agent: Client user agent string.
        session_token: Opaque host session token the anti-forgery token is bound to.
    """

    user_id: int | str = 0
    user_login: str = "guest"
    capabilities: frozenset[str] = field(default_factory=frozenset)
    ip_address: str = "unknown"
    user_agent: str = "unknown"
    session_token: str = ""

    def has_capability(self, capability: str) -> bool:
        """Check whether the caller holds a capability."""
        return capability in self.capabilities

    @property
    def is_anonymous(self) -> bool:
        """True when no user is logged in."""
        return self.user_id in (0, "", "0")


ANONYMOUS = Identity()
