"""Security adapters."""

from command_gateway.infrastructure.security.jwt_token_service import JWTTokenService

__all__ = ["JWTTokenService"]
