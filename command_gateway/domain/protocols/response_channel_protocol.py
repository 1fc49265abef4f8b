"""Response channel port.

The host side of the response envelope. ``emit`` is called at most once
per request; the envelope enforces that, the channel does not need to.
"""

from typing import Any, Protocol


class ResponseChannelProtocol(Protocol):
    """One-shot response transmitter (port)."""

    def emit(self, body: Any, status: int) -> None:
        """Transmit the response body with an HTTP status.

        Args:
            body: Envelope mapping, or an arbitrary body for raw responses.
            status: HTTP status code.
        """
        ...
