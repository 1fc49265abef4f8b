"""Response envelope."""

from command_gateway.application.response.envelope import ResponseEnvelope

__all__ = ["ResponseEnvelope"]
