"""Exceptions raised by the Gofile client."""

from __future__ import annotations


class GofileError(Exception):
    """Base exception for all Gofile errors."""


class GofileConfigError(GofileError):
    """Raised when the client configuration is invalid."""


class GofileAPIError(GofileError):
    """Raised when a remote operation fails.

    Operations return a ``Failure`` instead of raising; this exception (and
    its subclasses) only surfaces through ``Outcome.unwrap()``.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GofileNetworkError(GofileAPIError):
    """Raised when the request never produced a response."""


class GofileTimeoutError(GofileNetworkError):
    """Raised when the connect, read or write timeout was exceeded."""


class GofileHTTPError(GofileAPIError):
    """Raised when the server answered with a non-success status code."""


class GofileEmptyResponseError(GofileAPIError):
    """Raised when a successful response carried no envelope data."""
