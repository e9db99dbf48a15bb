"""Two-variant result type returned by every Gofile operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

from .exceptions import (
    GofileAPIError,
    GofileEmptyResponseError,
    GofileHTTPError,
    GofileNetworkError,
    GofileTimeoutError,
)

T = TypeVar("T")
U = TypeVar("U")


class FailureKind(str, Enum):
    """Category of a failed operation."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    EMPTY_RESPONSE = "empty_response"
    UNEXPECTED = "unexpected"


_EXCEPTION_FOR_KIND: dict[FailureKind, type[GofileAPIError]] = {
    FailureKind.NETWORK: GofileNetworkError,
    FailureKind.TIMEOUT: GofileTimeoutError,
    FailureKind.HTTP_STATUS: GofileHTTPError,
    FailureKind.EMPTY_RESPONSE: GofileEmptyResponseError,
    FailureKind.UNEXPECTED: GofileAPIError,
}


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful operation wrapping the envelope data."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def map(self, func: Callable[[T], U]) -> Success[U]:
        """Apply ``func`` to the wrapped value."""
        return Success(func(self.value))


@dataclass(frozen=True)
class Failure:
    """Failed operation with a short human-readable description.

    Attributes:
        message: Description such as ``"Create folder failed: 404"``
        kind: Failure category
        status_code: HTTP status code, only set for ``HTTP_STATUS`` failures
    """

    message: str
    kind: FailureKind = FailureKind.UNEXPECTED
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        """Raise the exception matching this failure."""
        raise _EXCEPTION_FOR_KIND[self.kind](self.message, self.status_code)

    def unwrap_or(self, default: Any) -> Any:
        return default

    def map(self, func: Callable[[Any], Any]) -> Failure:
        return self

    def __str__(self) -> str:
        return self.message


Outcome = Union[Success[T], Failure]
