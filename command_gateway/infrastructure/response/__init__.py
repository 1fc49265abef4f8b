"""Response channel adapters."""

from command_gateway.infrastructure.response.buffered_channel import BufferedResponseChannel

__all__ = ["BufferedResponseChannel"]
