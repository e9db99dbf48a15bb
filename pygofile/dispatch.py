"""Typed call dispatch for the Gofile API.

Every remote operation is described by a ``Call`` and executed by a
``Dispatcher``. Dispatching issues exactly one request and normalizes the
result into an ``Outcome``:

- no response (connection error, timeout, unparsable URL): ``Failure``
  without status code
- non-2xx status: ``Failure("<operation> failed: <status>")``
- 2xx without envelope data: ``Failure("<operation> failed: No data received")``
- otherwise ``Success(envelope.data)``
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Union

import httpx

from .outcome import Failure, FailureKind, Outcome, Success
from .transport import AsyncTransport, Sender, Transport

logger = logging.getLogger(__name__)

FileSource = Union[str, os.PathLike, IO[bytes]]


@dataclass(frozen=True)
class FileUpload:
    """File part of a multipart upload.

    ``source`` is either a path or an open binary file object. Paths are
    opened for the duration of the request; file objects are left open.
    """

    source: FileSource
    field: str = "file"
    filename: str | None = None
    content_type: str = "application/octet-stream"

    @contextmanager
    def open(self) -> Iterator[tuple[str, IO[bytes], str]]:
        if hasattr(self.source, "read"):
            name = self.filename or Path(getattr(self.source, "name", "file")).name
            yield (name, self.source, self.content_type)  # type: ignore[misc]
            return
        path = Path(self.source)  # type: ignore[arg-type]
        with path.open("rb") as f:
            yield (self.filename or path.name, f, self.content_type)


@dataclass(frozen=True)
class Call:
    """Description of one remote operation.

    Attributes:
        operation: Human-readable name used in failure messages
        method: HTTP method
        path: Path relative to the sender's base URL, parameters substituted
        sender: Control-plane or upload host
        params: Query parameters
        json: JSON request body
        form: Text parts of a multipart body
        upload: File part of a multipart body
        data_key: Key to extract from the envelope data, if any
    """

    operation: str
    method: str
    path: str
    sender: Sender = Sender.CONTROL
    params: dict[str, Any] | None = None
    json: dict[str, Any] | None = None
    form: dict[str, str] | None = None
    upload: FileUpload | None = None
    data_key: str | None = None


@dataclass(frozen=True)
class Envelope:
    """The ``{status, data}`` wrapper of every Gofile response."""

    status: str | None
    data: Any

    @classmethod
    def from_response(cls, response: httpx.Response) -> Envelope | None:
        """Decode the envelope, or return None if the body is not one."""
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        return cls(status=payload.get("status"), data=payload.get("data"))


def _request_kwargs(call: Call, stack: ExitStack) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if call.params:
        kwargs["params"] = call.params
    if call.json is not None:
        kwargs["json"] = call.json
    if call.upload is not None:
        kwargs["files"] = {call.upload.field: stack.enter_context(call.upload.open())}
    if call.form:
        kwargs["data"] = call.form
    return kwargs


def _transport_failure(call: Call, exc: Exception) -> Failure:
    detail = str(exc) or type(exc).__name__
    if isinstance(exc, httpx.TimeoutException):
        logger.debug("%s timed out: %s", call.operation, detail)
        return Failure(
            f"{call.operation} failed: Request timed out: {detail}",
            FailureKind.TIMEOUT,
        )
    if isinstance(exc, (httpx.RequestError, httpx.InvalidURL)):
        logger.debug("%s network error: %s", call.operation, detail)
        return Failure(
            f"{call.operation} failed: Network error: {detail}", FailureKind.NETWORK
        )
    logger.warning("%s raised %s: %s", call.operation, type(exc).__name__, detail)
    return Failure(
        f"{call.operation} failed: {type(exc).__name__}: {detail}",
        FailureKind.UNEXPECTED,
    )


def interpret_response(call: Call, response: httpx.Response) -> Outcome[Any]:
    """Turn a received response into an ``Outcome``."""
    if not response.is_success:
        logger.debug("%s returned status %s", call.operation, response.status_code)
        return Failure(
            f"{call.operation} failed: {response.status_code}",
            FailureKind.HTTP_STATUS,
            response.status_code,
        )

    envelope = Envelope.from_response(response)
    data = envelope.data if envelope is not None else None
    if data is not None and call.data_key is not None:
        data = data.get(call.data_key) if isinstance(data, dict) else None

    if data is None:
        logger.debug("%s returned no data", call.operation)
        return Failure(
            f"{call.operation} failed: No data received", FailureKind.EMPTY_RESPONSE
        )
    return Success(data)


class Dispatcher:
    """Execute ``Call`` descriptors over a blocking ``Transport``."""

    def __init__(self, transport: Transport):
        self.transport = transport

    def dispatch(self, call: Call) -> Outcome[Any]:
        """Issue one request and normalize its result.

        Never raises for network, HTTP or payload errors; those are returned
        as ``Failure``.
        """
        logger.debug(
            "%s: %s %s [%s]", call.operation, call.method, call.path, call.sender.value
        )
        try:
            with ExitStack() as stack:
                kwargs = _request_kwargs(call, stack)
                response = self.transport.sender(call.sender).request(
                    call.method, call.path, **kwargs
                )
        except Exception as e:
            return _transport_failure(call, e)
        return interpret_response(call, response)


class AsyncDispatcher:
    """Execute ``Call`` descriptors over an ``AsyncTransport``.

    Cancelling the awaiting task aborts the request; the resulting
    ``asyncio.CancelledError`` is not turned into a ``Failure``.
    """

    def __init__(self, transport: AsyncTransport):
        self.transport = transport

    async def dispatch(self, call: Call) -> Outcome[Any]:
        logger.debug(
            "%s: %s %s [%s]", call.operation, call.method, call.path, call.sender.value
        )
        try:
            with ExitStack() as stack:
                kwargs = _request_kwargs(call, stack)
                response = await self.transport.sender(call.sender).request(
                    call.method, call.path, **kwargs
                )
        except Exception as e:
            return _transport_failure(call, e)
        return interpret_response(call, response)
