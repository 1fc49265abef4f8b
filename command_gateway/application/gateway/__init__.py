"""Endpoint registry and command dispatcher.

Usage:
    from command_gateway.application.gateway import CommandGateway, CommandRegistry
"""

from command_gateway.application.gateway.builtin import register_builtin_commands
from command_gateway.application.gateway.dispatcher import CommandContext, CommandGateway
from command_gateway.application.gateway.registry import CommandRegistry, ResolvedEndpoint

__all__ = [
    "CommandContext",
    "CommandGateway",
    "CommandRegistry",
    "ResolvedEndpoint",
    "register_builtin_commands",
]
