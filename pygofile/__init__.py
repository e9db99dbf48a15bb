"""PyGofile - client library and CLI for the Gofile file hosting API."""

from .api import AsyncGofileClient, GofileClient
from .config import UPLOAD_REGIONS
from .exceptions import (
    GofileAPIError,
    GofileConfigError,
    GofileEmptyResponseError,
    GofileError,
    GofileHTTPError,
    GofileNetworkError,
    GofileTimeoutError,
)
from .models import UNSET, DirectLinkOptions
from .outcome import Failure, FailureKind, Outcome, Success

__all__ = [
    "GofileClient",
    "AsyncGofileClient",
    "UPLOAD_REGIONS",
    "GofileError",
    "GofileAPIError",
    "GofileConfigError",
    "GofileEmptyResponseError",
    "GofileHTTPError",
    "GofileNetworkError",
    "GofileTimeoutError",
    "UNSET",
    "DirectLinkOptions",
    "Success",
    "Failure",
    "FailureKind",
    "Outcome",
]
