"""Operator alert channels.

Exports:
    StubNotifier: Logs alerts instead of sending them (development, tests)
    SESNotifier: Sends alerts through AWS SES
"""

from command_gateway.infrastructure.notifications.ses_notifier import SESNotifier
from command_gateway.infrastructure.notifications.stub_notifier import StubNotifier

__all__ = ["SESNotifier", "StubNotifier"]
