"""Domain errors carried through Result types.

Errors here are plain frozen dataclasses and do NOT inherit from Exception.
Components return them inside ``Failure`` and the command gateway converts
them into exactly one response envelope.

Error Hierarchy:
    DomainError (base)
    ├── ValidationError (input failed a field rule)
    └── (domain package) SecurityViolation, StorageError
"""

from dataclasses import dataclass
from typing import Any

from command_gateway.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message.
        details: Optional structured context for logging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """A payload field violated its rule.

    Attributes:
        field: Dotted path of the offending field (``settings.font_size``).
    """

    field: str

    @property
    def reason(self) -> str:
        """Reason the field was rejected (alias of ``message``)."""
        return self.message

    def as_field_errors(self) -> dict[str, str]:
        """Field-level error map used by validation error envelopes.

        Returns:
            dict[str, str]: ``{field: reason}``.
        """
        return {self.field: self.message}
