"""Domain protocols (ports).

Usage:
    from command_gateway.domain.protocols import KeyValueStoreProtocol, LoggerProtocol
"""

from command_gateway.domain.protocols.error_sink_protocol import ErrorSinkProtocol
from command_gateway.domain.protocols.key_value_store_protocol import (
    KeyValueStoreProtocol,
)
from command_gateway.domain.protocols.logger_protocol import LoggerProtocol
from command_gateway.domain.protocols.notification_protocol import NotificationProtocol
from command_gateway.domain.protocols.option_store_protocol import OptionStoreProtocol
from command_gateway.domain.protocols.rate_limit_protocol import RateLimitProtocol
from command_gateway.domain.protocols.response_channel_protocol import (
    ResponseChannelProtocol,
)
from command_gateway.domain.protocols.token_service_protocol import (
    TokenServiceProtocol,
)

__all__ = [
    "ErrorSinkProtocol",
    "KeyValueStoreProtocol",
    "LoggerProtocol",
    "NotificationProtocol",
    "OptionStoreProtocol",
    "RateLimitProtocol",
    "ResponseChannelProtocol",
    "TokenServiceProtocol",
]
