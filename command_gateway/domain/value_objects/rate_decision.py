"""Outcome of one rate limit check."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RateDecision:
    """Rate limit decision (value object).

    A denied request is NOT an error: the check succeeded and said no.

    Attributes:
        allowed: Whether the command may proceed.
        count: Events inside the window, including this one when allowed.
        limit: Events allowed per window.
        window_seconds: Sliding window length.
        retry_after: Seconds until the oldest event leaves the window
            (0 when allowed).
    """

    allowed: bool
    count: int
    limit: int
    window_seconds: int
    retry_after: int = 0

    @property
    def remaining(self) -> int:
        """Events still allowed in the current window."""
        return max(0, self.limit - self.count)
