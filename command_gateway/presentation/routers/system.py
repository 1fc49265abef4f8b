"""System router: health check for monitoring and load balancers."""

from fastapi import APIRouter

from command_gateway.core.config import get_settings

system_router = APIRouter(tags=["System"])


@system_router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        dict[str, str]: Health status and application version.
    """
    return {"status": "healthy", "version": get_settings().app_version}
