"""Storage adapters for rate windows and bounded histories.

Exports:
    InMemoryKeyValueStore: Process-local TTL store (tests, single worker)
    InMemoryOptionStore: Process-local option store
    RedisKeyValueStore: Redis-backed TTL store
    DatabaseOptionStore: SQLAlchemy-backed option store
"""

from command_gateway.infrastructure.storage.database_option_store import DatabaseOptionStore
from command_gateway.infrastructure.storage.in_memory import (
    InMemoryKeyValueStore,
    InMemoryOptionStore,
)
from command_gateway.infrastructure.storage.redis_key_value_store import RedisKeyValueStore

__all__ = [
    "DatabaseOptionStore",
    "InMemoryKeyValueStore",
    "InMemoryOptionStore",
    "RedisKeyValueStore",
]
