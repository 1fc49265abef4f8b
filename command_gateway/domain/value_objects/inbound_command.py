"""Inbound command as handed to the gateway by the host."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from command_gateway.domain.value_objects.identity import ANONYMOUS, Identity
from command_gateway.domain.value_objects.request_info import RequestInfo


@dataclass(frozen=True, slots=True, kw_only=True)
class InboundCommand:
    """One privileged command.

    Attributes:
        action: Endpoint (action) name.
        payload: Raw nested payload. Never modified by the gateway.
        identity: Caller.
        request: Transport metadata.
        token: Anti-forgery token supplied out of band (header). When None
            the payload token fields are searched.
        capability: Host-side override of the endpoint's required capability.
    """

    action: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    identity: Identity = ANONYMOUS
    request: RequestInfo = field(default_factory=RequestInfo)
    token: str | None = None
    capability: str | None = None
