"""API client for Gofile."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from . import endpoints
from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, config, resolve_upload_url
from .dispatch import AsyncDispatcher, Call, Dispatcher, FileSource
from .endpoints import ContentIds
from .models import UNSET, DirectLinkOptions, Maybe
from .transport import AsyncTransport, ClientSettings, Transport

logger = logging.getLogger(__name__)


def _settings(
    token: str | None,
    api_url: str | None,
    upload_url: str | None,
    upload_region: str | None,
    timeout: float,
) -> ClientSettings:
    return ClientSettings(
        token=token or None,
        api_url=api_url or DEFAULT_API_URL,
        upload_url=resolve_upload_url(upload_region, upload_url),
        timeout=timeout,
    )


class _GofileOperations(ABC):
    """Public Gofile operations shared by the blocking and async clients.

    Every method returns an ``Outcome``: ``Success`` wrapping the ``data``
    field of the response envelope, or ``Failure`` describing what went
    wrong. The async client returns awaitables resolving to the same.
    """

    @abstractmethod
    def _dispatch(self, call: Call) -> Any:
        """Execute ``call`` and return its outcome (or an awaitable of it)."""

    # =========================
    # Upload Operations
    # =========================

    def get_best_server(self) -> Any:
        """Get the name of the best server for uploads.

        Returns:
            Outcome wrapping the server name (e.g. ``"store1"``)
        """
        return self._dispatch(endpoints.get_best_server())

    def upload_file(
        self,
        file: FileSource,
        folder_id: str | None = None,
        filename: str | None = None,
    ) -> Any:
        """Upload a file to the upload host.

        Args:
            file: Path of the file, or an open binary file object
            folder_id: Destination folder ID; omitted from the request when
                None so the server creates a new public folder
            filename: Name to store the file under (defaults to the file's
                own name)

        Returns:
            Outcome wrapping the upload record (``downloadPage``, ``fileId``,
            ``parentFolder``, ...)
        """
        return self._dispatch(endpoints.upload_file(file, folder_id, filename))

    # =========================
    # Content Operations
    # =========================

    def create_folder(self, parent_folder_id: str, folder_name: str) -> Any:
        """Create a folder.

        Args:
            parent_folder_id: ID of the parent folder
            folder_name: Name of the new folder

        Returns:
            Outcome wrapping the new folder record
        """
        return self._dispatch(endpoints.create_folder(parent_folder_id, folder_name))

    def update_content(
        self, content_id: str, attribute: str, attribute_value: Any
    ) -> Any:
        """Change one attribute of a file or folder.

        Args:
            content_id: ID of the content to update
            attribute: ``name``, ``description``, ``tags``, ``public``,
                ``expiry`` or ``password``
            attribute_value: New value of the attribute

        Returns:
            Outcome wrapping the updated content record
        """
        return self._dispatch(
            endpoints.update_content(content_id, attribute, attribute_value)
        )

    def delete_content(self, content_ids: ContentIds) -> Any:
        """Delete files and folders.

        Args:
            content_ids: IDs to delete, sent as one comma-joined string
        """
        return self._dispatch(endpoints.delete_content(content_ids))

    def get_folder_details(
        self, folder_id: str, password: str | None = None
    ) -> Any:
        """Get a folder and its children.

        Args:
            folder_id: ID of the folder
            password: SHA-256 hash of the folder password, if protected
        """
        return self._dispatch(endpoints.get_folder_details(folder_id, password))

    def search_within_folder(self, content_id: str, search_string: str) -> Any:
        """Search a folder for contents matching ``search_string``."""
        return self._dispatch(
            endpoints.search_within_folder(content_id, search_string)
        )

    def copy_content(self, content_ids: ContentIds, folder_id: str) -> Any:
        """Copy contents into the folder ``folder_id``."""
        return self._dispatch(endpoints.copy_content(content_ids, folder_id))

    def move_content(self, content_ids: ContentIds, folder_id: str) -> Any:
        """Move contents into the folder ``folder_id``."""
        return self._dispatch(endpoints.move_content(content_ids, folder_id))

    def import_public_content(self, content_ids: ContentIds) -> Any:
        """Import public contents into the account's root folder."""
        return self._dispatch(endpoints.import_public_content(content_ids))

    # =========================
    # Direct Link Operations
    # =========================

    def create_direct_link(
        self,
        content_id: str,
        expire_time: Maybe[int] = UNSET,
        source_ips_allowed: Maybe[list[str]] = UNSET,
        domains_allowed: Maybe[list[str]] = UNSET,
        auth: Maybe[list[str]] = UNSET,
    ) -> Any:
        """Create a direct download link.

        Restrictions left unset are not sent at all.

        Args:
            content_id: ID of the file or folder
            expire_time: Unix timestamp after which the link expires
            source_ips_allowed: IP addresses allowed to use the link
            domains_allowed: Domains allowed to use the link
            auth: ``"user:password"`` pairs required to use the link

        Returns:
            Outcome wrapping the direct link record
        """
        options = DirectLinkOptions(
            expire_time, source_ips_allowed, domains_allowed, auth
        )
        return self._dispatch(endpoints.create_direct_link(content_id, options))

    def update_direct_link(
        self,
        content_id: str,
        direct_link_id: str,
        expire_time: Maybe[int] = UNSET,
        source_ips_allowed: Maybe[list[str]] = UNSET,
        domains_allowed: Maybe[list[str]] = UNSET,
        auth: Maybe[list[str]] = UNSET,
    ) -> Any:
        """Update the restrictions of a direct link.

        Only the restrictions that are given are changed.
        """
        options = DirectLinkOptions(
            expire_time, source_ips_allowed, domains_allowed, auth
        )
        return self._dispatch(
            endpoints.update_direct_link(content_id, direct_link_id, options)
        )

    def delete_direct_link(self, content_id: str, direct_link_id: str) -> Any:
        return self._dispatch(endpoints.delete_direct_link(content_id, direct_link_id))

    # =========================
    # Account Operations
    # =========================

    def get_account_id(self) -> Any:
        """Get the ID of the account owning the token."""
        return self._dispatch(endpoints.get_account_id())

    def get_account_details(self, account_id: str) -> Any:
        return self._dispatch(endpoints.get_account_details(account_id))

    def reset_auth_token(self, account_id: str) -> Any:
        """Reset the account's API token.

        The new token is returned to the caller; this client keeps using the
        token it was created with.
        """
        return self._dispatch(endpoints.reset_auth_token(account_id))


class GofileClient(_GofileOperations):
    """Blocking client for the Gofile API."""

    _instance: ClassVar[GofileClient | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        upload_url: str | None = None,
        upload_region: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize Gofile API client.

        Args:
            token: Optional API token; requests are anonymous without one
            api_url: Control-plane URL (default: https://api.gofile.io/)
            upload_url: Upload host URL, takes precedence over
                ``upload_region``
            upload_region: Name of a regional upload host, see
                ``config.UPLOAD_REGIONS`` (default: automatic routing)
            timeout: Connect, read and write timeout in seconds
            transport: Optional ``httpx`` transport, mainly for tests

        Raises:
            GofileConfigError: If ``upload_region`` is unknown
        """
        self.settings = _settings(token, api_url, upload_url, upload_region, timeout)
        self._transport = Transport(self.settings, transport)
        self._dispatcher = Dispatcher(self._transport)

    @classmethod
    def from_config(
        cls,
        token: str | None = None,
        upload_region: str | None = None,
        **kwargs: Any,
    ) -> GofileClient:
        """Create a client, filling unset values from the user configuration."""
        return cls(
            token=token or config.token,
            api_url=kwargs.pop("api_url", None) or config.api_url,
            upload_url=kwargs.pop("upload_url", None)
            or (None if upload_region else config.upload_url),
            upload_region=upload_region,
            **kwargs,
        )

    @classmethod
    def get_instance(
        cls,
        token: str | None = None,
        api_url: str | None = None,
        upload_url: str | None = None,
        upload_region: str | None = None,
    ) -> GofileClient:
        """Return the process-wide shared client, creating it on first use.

        Concurrent first callers all receive the same instance. Arguments
        are only used when the instance is created.
        """
        instance = cls._instance
        if instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    logger.debug("Creating shared Gofile client")
                    cls._instance = cls(
                        token=token,
                        api_url=api_url,
                        upload_url=upload_url,
                        upload_region=upload_region,
                    )
                instance = cls._instance
        return instance

    @classmethod
    def reset_instance(cls) -> None:
        """Close and drop the shared client."""
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = None

    def _dispatch(self, call: Call) -> Any:
        return self._dispatcher.dispatch(call)

    @property
    def token(self) -> str | None:
        return self.settings.token

    def close(self) -> None:
        """Close the client and release connections."""
        if not self._transport.is_closed:
            self._transport.close()

    def __enter__(self) -> GofileClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncGofileClient(_GofileOperations):
    """Asyncio client for the Gofile API.

    Same operations as ``GofileClient``; each returns a coroutine. Cancelling
    the awaiting task aborts the request in flight.
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        upload_url: str | None = None,
        upload_region: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = _settings(token, api_url, upload_url, upload_region, timeout)
        self._transport = AsyncTransport(self.settings, transport)
        self._dispatcher = AsyncDispatcher(self._transport)

    def _dispatch(self, call: Call) -> Any:
        return self._dispatcher.dispatch(call)

    @property
    def token(self) -> str | None:
        return self.settings.token

    async def aclose(self) -> None:
        if not self._transport.is_closed:
            await self._transport.aclose()

    async def __aenter__(self) -> AsyncGofileClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
