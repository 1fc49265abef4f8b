"""SQLAlchemy adapter implementing OptionStoreProtocol.

Each option is one row holding a JSON blob. Used for the bounded error and
violation histories when they must survive restarts or be shared across
workers.

Note: ``get`` then ``update`` is a plain read-modify-write with no row
locking. Concurrent writers lose updates (last writer wins).

Usage:
    engine = create_engine(settings.database_url)
    store = DatabaseOptionStore(engine)
    store.create_schema()
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Engine, String
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from command_gateway.core.enums import ErrorCode
from command_gateway.core.result import Failure, Result, Success
from command_gateway.domain.errors import StorageError


class OptionBase(DeclarativeBase):
    """Declarative base for the option table."""


class OptionModel(OptionBase):
    """One named JSON option.

    Fields:
        name: Option name (primary key).
        value: JSON blob.
        updated_at: Last write (UTC).
    """

    __tablename__ = "command_gateway_options"

    name: Mapped[str] = mapped_column(String(191), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<OptionModel(name={self.name!r})>"


class DatabaseOptionStore:
    """Option store backed by a SQLAlchemy engine.

    Note: Does NOT inherit from OptionStoreProtocol (structural typing).
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize the store.

        Args:
            engine: Synchronous SQLAlchemy engine.
        """
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def create_schema(self) -> None:
        """Create the option table if it does not exist."""
        OptionBase.metadata.create_all(self._engine)

    def get(self, name: str, default: Any = None) -> Result[Any, StorageError]:
        """Read an option.

        Returns:
            Result with the stored value, ``default`` when missing, or StorageError.
        """
        try:
            with self._session() as session:
                row = session.get(OptionModel, name)
                return Success(value=default if row is None else row.value)
        except SQLAlchemyError as e:
            return Failure(
                error=StorageError(
                    code=ErrorCode.STORE_READ_FAILED,
                    message=f"Failed to read option '{name}'",
                    details={"option": name, "error": str(e)},
                )
            )

    def update(self, name: str, value: Any) -> Result[None, StorageError]:
        """Create or replace an option."""
        try:
            with self._session() as session, session.begin():
                row = session.get(OptionModel, name)
                if row is None:
                    session.add(OptionModel(name=name, value=value))
                else:
                    row.value = value
                    row.updated_at = datetime.now(UTC)
        except SQLAlchemyError as e:
            return Failure(
                error=StorageError(
                    code=ErrorCode.STORE_WRITE_FAILED,
                    message=f"Failed to write option '{name}'",
                    details={"option": name, "error": str(e)},
                )
            )
        return Success(value=None)

    def _session(self) -> Session:
        return self._session_factory()
