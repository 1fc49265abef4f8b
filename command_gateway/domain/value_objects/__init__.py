"""Domain value objects.

Usage:
    from command_gateway.domain.value_objects import EndpointConfig, FieldRule, Identity
"""

from command_gateway.domain.value_objects.endpoint_config import EndpointConfig
from command_gateway.domain.value_objects.field_rule import TEXT_RULE, FieldRule
from command_gateway.domain.value_objects.identity import ANONYMOUS, Identity
from command_gateway.domain.value_objects.inbound_command import InboundCommand
from command_gateway.domain.value_objects.rate_decision import RateDecision
from command_gateway.domain.value_objects.request_info import RequestInfo

__all__ = [
    "ANONYMOUS",
    "EndpointConfig",
    "FieldRule",
    "Identity",
    "InboundCommand",
    "RateDecision",
    "RequestInfo",
    "TEXT_RULE",
]
