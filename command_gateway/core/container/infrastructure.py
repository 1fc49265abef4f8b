"""Infrastructure dependency factories.

Application-scoped singletons for the adapters behind the domain protocols:
- Logging (structlog console)
- Key-value store for rate windows (memory/Redis)
- Option store for bounded histories (memory/SQLAlchemy)
- Rotating error file
- Operator alerts (stub/AWS SES)
- Anti-forgery tokens (JWT)

The adapter for each port is chosen from settings here and nowhere else.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from command_gateway.core.config import get_settings

if TYPE_CHECKING:
    from command_gateway.domain.protocols import (
        ErrorSinkProtocol,
        KeyValueStoreProtocol,
        LoggerProtocol,
        NotificationProtocol,
        OptionStoreProtocol,
        TokenServiceProtocol,
    )


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Returns:
        LoggerProtocol: ConsoleAdapter rendering JSON or console output per
        ``settings.log_json``.
    """
    from command_gateway.infrastructure.logging import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(use_json=settings.log_json, level=settings.log_level)


@lru_cache()
def get_key_value_store() -> "KeyValueStoreProtocol":
    """Get the rate window store singleton.

    Returns the adapter selected by KEY_VALUE_BACKEND:
        - 'memory': InMemoryKeyValueStore (single process)
        - 'redis': RedisKeyValueStore (shared across workers)

    Raises:
        ValueError: If the backend is unsupported.
    """
    settings = get_settings()
    backend = settings.key_value_backend

    if backend == "redis":
        from redis import Redis

        from command_gateway.infrastructure.storage import RedisKeyValueStore

        client = Redis.from_url(
            settings.redis_url,
            max_connections=50,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        return RedisKeyValueStore(redis_client=client)

    elif backend == "memory":
        from command_gateway.infrastructure.storage import InMemoryKeyValueStore

        return InMemoryKeyValueStore()

    else:
        raise ValueError(
            f"Unsupported KEY_VALUE_BACKEND: {backend}. Supported: 'memory', 'redis'"
        )


@lru_cache()
def get_option_store() -> "OptionStoreProtocol":
    """Get the option store singleton.

    Returns the adapter selected by OPTION_BACKEND:
        - 'memory': InMemoryOptionStore
        - 'database': DatabaseOptionStore on DATABASE_URL (table created on first use)

    Raises:
        ValueError: If the backend is unsupported.
    """
    settings = get_settings()
    backend = settings.option_backend

    if backend == "database":
        from sqlalchemy import create_engine

        from command_gateway.infrastructure.storage import DatabaseOptionStore

        engine = create_engine(settings.database_url, pool_pre_ping=True)
        store = DatabaseOptionStore(engine)
        store.create_schema()
        return store

    elif backend == "memory":
        from command_gateway.infrastructure.storage import InMemoryOptionStore

        return InMemoryOptionStore()

    else:
        raise ValueError(
            f"Unsupported OPTION_BACKEND: {backend}. Supported: 'memory', 'database'"
        )


@lru_cache()
def get_error_sink() -> "ErrorSinkProtocol":
    """Get the rotating error file singleton."""
    from command_gateway.infrastructure.logging import RotatingErrorFile

    settings = get_settings()
    return RotatingErrorFile(
        settings.error_log_path,
        max_bytes=settings.error_log_max_bytes,
        backup_count=settings.error_log_backup_count,
    )


@lru_cache()
def get_notifier() -> "NotificationProtocol":
    """Get the operator alert channel singleton.

    Returns the adapter selected by NOTIFIER_BACKEND:
        - 'log': StubNotifier (alerts are logged, not sent)
        - 'ses': SESNotifier (AWS SES)

    Raises:
        ValueError: If the backend is unsupported.
    """
    settings = get_settings()
    backend = settings.notifier_backend

    if backend == "ses":
        import boto3

        from command_gateway.infrastructure.notifications import SESNotifier

        return SESNotifier(
            ses_client=boto3.client("ses", region_name=settings.aws_region),
            from_email=settings.ses_from_email,
            from_name=settings.ses_from_name,
            logger=get_logger(),
        )

    elif backend == "log":
        from command_gateway.infrastructure.notifications import StubNotifier

        return StubNotifier(get_logger())

    else:
        raise ValueError(
            f"Unsupported NOTIFIER_BACKEND: {backend}. Supported: 'log', 'ses'"
        )


@lru_cache()
def get_token_service() -> "TokenServiceProtocol":
    """Get the anti-forgery token service singleton (JWT, HS256)."""
    from command_gateway.infrastructure.security import JWTTokenService

    settings = get_settings()
    return JWTTokenService(
        secret_key=settings.secret_key,
        lifetime_seconds=settings.token_lifetime_seconds,
    )
