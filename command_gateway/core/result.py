"""Result types used at every component boundary of the gateway.

Gate checks, sanitation and storage adapters report failures as data instead
of raising. Only the outermost dispatcher turns a failure into a response, so
each stage can be tested by matching on the returned value.

Usage:
    def check_token(token: str) -> Result[str, SecurityViolation]:
        if not token:
            return Failure(error=violation(ViolationType.MISSING_NONCE))
        return Success(value=token)

    match check_token(raw):
        case Success(value=token):
            ...
        case Failure(error=violation):
            envelope.security_error(violation.violation_type.value, violation.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: The error describing why the operation failed.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
