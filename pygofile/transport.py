"""HTTP transport for the Gofile API.

A ``Transport`` owns two ``httpx`` senders: one bound to the control-plane
API host and one bound to the upload host. Both share the same connection
pool, timeout policy and bearer-token authentication.
"""

from __future__ import annotations

import threading
from collections.abc import Generator
from dataclasses import dataclass
from enum import Enum

import httpx

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, DEFAULT_UPLOAD_URL


class Sender(str, Enum):
    """Which host a request is sent to."""

    CONTROL = "control"
    UPLOAD = "upload"


@dataclass(frozen=True)
class ClientSettings:
    """Immutable connection settings of a Gofile client.

    Attributes:
        token: Bearer token, ``None`` for anonymous requests
        api_url: Control-plane base URL
        upload_url: Upload base URL (automatic routing or a regional host)
        timeout: Connect, read and write timeout in seconds
    """

    token: str | None = None
    api_url: str = DEFAULT_API_URL
    upload_url: str = DEFAULT_UPLOAD_URL
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"ClientSettings(token={token!r}, api_url={self.api_url!r}, "
            f"upload_url={self.upload_url!r}, timeout={self.timeout!r})"
        )


class BearerTokenAuth(httpx.Auth):
    """Attach ``Authorization: Bearer <token>`` to every request."""

    def __init__(self, token: str):
        self.token = token

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


def _client_options(settings: ClientSettings) -> dict:
    """Keyword arguments shared by the control and upload senders."""
    return {
        "auth": BearerTokenAuth(settings.token) if settings.token else None,
        "timeout": httpx.Timeout(settings.timeout),
        "follow_redirects": True,
    }


def _base_url(settings: ClientSettings, which: Sender) -> str:
    return settings.upload_url if which is Sender.UPLOAD else settings.api_url


class Transport:
    """Blocking senders for the control-plane and upload hosts.

    Senders are created on first use, so an unparsable base URL surfaces as a
    failed request rather than as an error from the constructor.
    """

    def __init__(
        self,
        settings: ClientSettings,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the transport.

        Args:
            settings: Connection settings
            transport: Optional ``httpx`` transport shared by both senders
                (defaults to a new ``httpx.HTTPTransport``)
        """
        self.settings = settings
        self._transport = transport
        self._senders: dict[Sender, httpx.Client] = {}
        self._lock = threading.Lock()
        self._closed = False

    def sender(self, which: Sender) -> httpx.Client:
        """Get or create the sender bound to the host ``which``.

        Raises:
            httpx.InvalidURL: If the base URL of the host cannot be parsed
            RuntimeError: If the transport was closed
        """
        client = self._senders.get(which)
        if client is not None:
            return client
        with self._lock:
            if self._closed:
                raise RuntimeError("Transport is closed")
            client = self._senders.get(which)
            if client is None:
                if self._transport is None:
                    self._transport = httpx.HTTPTransport()
                client = httpx.Client(
                    base_url=_base_url(self.settings, which),
                    transport=self._transport,
                    **_client_options(self.settings),
                )
                self._senders[which] = client
        return client

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close both senders and release pooled connections."""
        with self._lock:
            self._closed = True
            senders = list(self._senders.values())
        for client in senders:
            client.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncTransport:
    """Asynchronous senders for the control-plane and upload hosts.

    Like ``Transport``, senders are created on first use.
    """

    def __init__(
        self,
        settings: ClientSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self._transport = transport
        self._senders: dict[Sender, httpx.AsyncClient] = {}
        self._closed = False

    def sender(self, which: Sender) -> httpx.AsyncClient:
        # Lookup and insert run without an await in between
        client = self._senders.get(which)
        if client is None:
            if self._closed:
                raise RuntimeError("Transport is closed")
            if self._transport is None:
                self._transport = httpx.AsyncHTTPTransport()
            client = httpx.AsyncClient(
                base_url=_base_url(self.settings, which),
                transport=self._transport,
                **_client_options(self.settings),
            )
            self._senders[which] = client
        return client

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        self._closed = True
        for client in list(self._senders.values()):
            await client.aclose()

    async def __aenter__(self) -> AsyncTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
