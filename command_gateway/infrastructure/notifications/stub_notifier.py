"""Stub alert channel for development and tests.

Logs each alert through the host logger and keeps it in ``sent`` so tests
can assert on delivery count and content.
"""

from dataclasses import dataclass

from command_gateway.core.result import Result, Success
from command_gateway.domain.errors import NotificationError
from command_gateway.domain.protocols import LoggerProtocol


@dataclass(frozen=True, slots=True)
class SentAlert:
    to: str
    subject: str
    body: str


class StubNotifier:
    """NotificationProtocol implementation that never leaves the process."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger
        self.sent: list[SentAlert] = []

    def send(self, to: str, subject: str, body: str) -> Result[None, NotificationError]:
        self.sent.append(SentAlert(to=to, subject=subject, body=body))
        self._logger.info(
            "Operator alert (stub, not sent)",
            to=to,
            subject=subject,
            body_preview=body[:500],
        )
        return Success(value=None)
