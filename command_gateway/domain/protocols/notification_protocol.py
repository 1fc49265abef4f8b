"""NotificationProtocol - port for operator alert delivery.

Infrastructure provides ``StubNotifier`` (logs the alert) and
``SESNotifier``. Delivery is best-effort: failures come back as
``Failure(NotificationError)`` and are only logged.
"""

from typing import Protocol

from command_gateway.core.result import Result
from command_gateway.domain.errors import NotificationError


class NotificationProtocol(Protocol):
    """Operator alert channel (port).

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.
    """

    def send(self, to: str, subject: str, body: str) -> Result[None, NotificationError]:
        """Deliver one plain-text alert.

        Args:
            to: Recipient address.
            subject: Alert subject line.
            body: Alert body.
        """
        ...
