"""Option store port: named JSON blobs.

Holds the bounded error and violation histories. Adapters:
``InMemoryOptionStore`` and ``DatabaseOptionStore`` (SQLAlchemy).

Concurrency:
    ``get`` followed by ``update`` is an unprotected read-modify-write;
    concurrent writers lose updates (last writer wins).
"""

from typing import Any, Protocol

from command_gateway.core.result import Result
from command_gateway.domain.errors import StorageError


class OptionStoreProtocol(Protocol):
    """Named option store (port)."""

    def get(self, name: str, default: Any = None) -> Result[Any, StorageError]:
        """Read an option, returning ``default`` when it does not exist."""
        ...

    def update(self, name: str, value: Any) -> Result[None, StorageError]:
        """Create or replace an option."""
        ...
