"""
Configuration management using Pydantic Settings.

Type-safe configuration loaded from environment variables (or a .env file
chosen by the deployment). Every tunable of the gateway lives here; fixed
contract values live in ``command_gateway.core.constants``.

Architecture:
- Flat Settings structure (no nesting)
- Defaults safe for development and tests
- Production refuses to start with the development signing key

Usage:
    from command_gateway.core.config import settings

    if settings.debug:
        ...
    limit = settings.default_rate_limit
"""

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from command_gateway.core.constants import (
    DEFAULT_CAPABILITY,
    DEFAULT_RATE_LIMIT,
    MIN_SECRET_KEY_LENGTH,
    RATE_LIMIT_WINDOW_SECONDS,
)
from command_gateway.core.enums import Environment

_DEVELOPMENT_SECRET = "development-only-secret-key-change-me-0000"


class Settings(BaseSettings):
    """
    Main gateway settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (development-safe)
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    debug: bool = Field(
        default=False,
        description="Host debug flag: adds envelope debug blocks and detailed errors",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=True,
        description="Render host log lines as JSON (False = colored console output)",
    )

    # Application metadata
    app_name: str = Field(default="Command Gateway", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    site_url: str = Field(
        default="http://localhost:8000",
        description="Canonical site URL; its host is the expected request origin",
    )

    # Anti-forgery token
    secret_key: str = Field(
        default=_DEVELOPMENT_SECRET,
        description="Signing key for anti-forgery tokens (>= 32 bytes)",
    )
    token_lifetime_seconds: int = Field(
        default=86400,
        description="Lifetime of an anti-forgery token in seconds",
    )
    token_field_names: list[str] = Field(
        default=["nonce", "_token"],
        description="Payload fields searched (in order) for the anti-forgery token",
    )

    # Endpoint defaults
    default_capability: str = Field(
        default=DEFAULT_CAPABILITY,
        description="Capability required when an endpoint declares none",
    )
    default_rate_limit: int = Field(
        default=DEFAULT_RATE_LIMIT,
        description="Requests per window when an endpoint declares no limit",
    )
    rate_limit_window_seconds: int = Field(
        default=RATE_LIMIT_WINDOW_SECONDS,
        description="Sliding rate limit window in seconds",
    )
    threat_scan_enabled: bool = Field(
        default=True,
        description="Reject payloads matching injection or traversal patterns",
    )
    performance_threshold_ms: float = Field(
        default=500.0,
        description="Commands slower than this are logged as performance issues",
    )
    trust_forwarded_ip: bool = Field(
        default=False,
        description="Use the first X-Forwarded-For hop as client IP (only behind a trusted proxy)",
    )
    unescape_host_input: bool = Field(
        default=False,
        description="Remove host-added backslash escaping (\\' \\\" \\\\) before sanitation",
    )

    # Storage backends
    key_value_backend: str = Field(
        default="memory",
        description="Rate window store: 'memory' or 'redis'",
    )
    option_backend: str = Field(
        default="memory",
        description="Bounded history store: 'memory' or 'database'",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for rate windows",
    )
    database_url: str = Field(
        default="sqlite:///./command_gateway.db",
        description="SQLAlchemy URL for the option store",
    )

    # Error logging
    error_log_path: str = Field(
        default="./logs/command-errors.log",
        description="Path of the rotating JSON-lines error log",
    )
    error_log_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Rotate the error log once it reaches this size",
    )
    error_log_backup_count: int = Field(
        default=5,
        description="Rotated error log files to keep",
    )
    max_stored_errors: int = Field(
        default=50,
        description="Capacity of the error history ring buffer",
    )
    max_stored_violations: int = Field(
        default=100,
        description="Capacity of the security violation ring buffer",
    )

    # Operator alerts
    admin_email: str | None = Field(
        default=None,
        description="Recipient of critical alerts (None disables alerts)",
    )
    notifier_backend: str = Field(
        default="log",
        description="Alert channel: 'log' (stub) or 'ses' (AWS SES)",
    )
    aws_region: str = Field(default="us-east-1", description="AWS region of SES")
    ses_from_email: str = Field(
        default="command-gateway@localhost",
        description="Verified SES sender address of alert emails",
    )
    ses_from_name: str = Field(
        default="Command Gateway",
        description="Sender display name of alert emails",
    )

    # Envelope
    request_id_prefix: str = Field(
        default="gw_",
        description="Stable prefix of envelope request identifiers",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("site_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("default_rate_limit", "rate_limit_window_seconds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Reject non-positive limits and windows."""
        if v <= 0:
            raise ValueError("rate limit values must be positive")
        return v

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """
        Enforce signing key length and forbid the development key in production.

        Raises:
            ValueError: If the key is too short or is the development default
                while running in production.
        """
        if len(self.secret_key) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(
                f"secret_key must be at least {MIN_SECRET_KEY_LENGTH} characters"
            )
        if self.is_production and self.secret_key == _DEVELOPMENT_SECRET:
            raise ValueError("secret_key must be set explicitly in production")
        return self

    @property
    def expected_host(self) -> str:
        """Host name requests must originate from.

        Returns:
            str: Lower-cased host of ``site_url`` (port included when present).
        """
        return urlparse(self.site_url).netloc.lower()

    @property
    def is_development(self) -> bool:
        """True when running in the development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """True when running in the testing environment."""
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """True when running in the production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application configuration.
    """
    return Settings()


settings = get_settings()
