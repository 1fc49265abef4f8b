"""HTTP routers."""

from command_gateway.presentation.routers.commands import commands_router
from command_gateway.presentation.routers.system import system_router

__all__ = ["commands_router", "system_router"]
