"""
FastAPI application factory.

Binds the command gateway to HTTP: request start middleware, the command
router and a health check. Business handlers are registered on the
container's ``CommandRegistry`` before or after the app is created.

Usage:
    uvicorn command_gateway.main:app

    # Host with its own authentication
    app = create_app(identity_resolver=resolve_wordpress_user)
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from command_gateway.application.gateway import register_builtin_commands
from command_gateway.core.config import get_settings
from command_gateway.core.container import (
    get_command_registry,
    get_error_logger,
    get_logger,
)
from command_gateway.domain.value_objects import Identity
from command_gateway.presentation.dependencies import resolve_identity
from command_gateway.presentation.middleware import RequestStartMiddleware
from command_gateway.presentation.routers import commands_router, system_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Startup registers the built-in endpoints (once per registry).

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    registry = get_command_registry()
    if "security_stats" not in registry:
        register_builtin_commands(registry, get_error_logger())
    get_logger().info("Command gateway started", endpoints=len(registry))

    yield


def create_app(
    *, identity_resolver: Callable[[Request], Identity] | None = None
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        identity_resolver: Replaces the default (anonymous) identity
            resolver with the host's authentication.

    Returns:
        FastAPI: Configured application.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Security and response gateway for privileged commands",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Wire request start middleware (envelope execution timing)
    app.add_middleware(RequestStartMiddleware)

    app.include_router(system_router)
    app.include_router(commands_router)

    if identity_resolver is not None:
        app.dependency_overrides[resolve_identity] = identity_resolver

    return app


app = create_app()
