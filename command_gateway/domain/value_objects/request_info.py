"""Transport metadata of an inbound command."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestInfo:
    """Request metadata supplied by the host.

    Attributes:
        method: HTTP method.
        uri: Request URI (path and query).
        host: Host the request was addressed to (``Host`` header).
        origin: ``Origin`` header, if any.
        referer: ``Referer`` header, if any.
        forwarded_for: ``X-Forwarded-For`` header, if any.
    """

    method: str = "POST"
    uri: str = ""
    host: str = ""
    origin: str | None = None
    referer: str | None = None
    forwarded_for: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "method": self.method,
            "uri": self.uri,
            "host": self.host,
            "origin": self.origin,
            "referer": self.referer,
            "forwarded_for": self.forwarded_for,
        }
