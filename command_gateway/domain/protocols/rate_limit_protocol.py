"""Rate limit port.

Sliding-window limiter keyed by (user, action, client IP). The application
``RateLimiter`` implements it over any ``KeyValueStoreProtocol``.

Fail-Open Design:
    Store failures MUST produce an allowed decision. A broken store never
    causes denial of service.
"""

from typing import Protocol

from command_gateway.domain.value_objects import RateDecision


class RateLimitProtocol(Protocol):
    """Protocol for rate limiting."""

    def check(
        self,
        *,
        user_id: int | str,
        action: str,
        ip_address: str,
        limit: int,
    ) -> RateDecision:
        """Check the window and record the event when allowed.

        Args:
            user_id: Caller's user id.
            action: Command action name.
            ip_address: Client IP (hashed into the key).
            limit: Events allowed per window.

        Returns:
            RateDecision: ``allowed=False`` once ``limit`` events exist
            within the window. Denied checks are not recorded.
        """
        ...

    def reset(self, *, user_id: int | str, action: str, ip_address: str) -> None:
        """Forget the window for one key."""
        ...
