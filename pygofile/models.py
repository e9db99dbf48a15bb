"""Request and response models for the Gofile API.

Request models serialize to the JSON bodies the API expects. Optional fields
default to ``UNSET`` and are left out of the body entirely when unset (or
``None``); empty values such as ``[]`` or ``""`` are sent as-is.

Response models are typed views over the ``data`` field of an envelope.
Operations return the raw data; the models are built on demand with
``from_api_response``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, TypeVar, Union


class _Unset:
    """Marker for an optional request field that was not provided."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

T = TypeVar("T")
# Request field that may be left out of the body
Maybe = Union[T, _Unset, None]


def is_set(value: Any) -> bool:
    """Return True if an optional request field carries a value."""
    return value is not UNSET and value is not None


def join_ids(content_ids: str | list[str] | tuple[str, ...]) -> str:
    """Join content identifiers into the comma-separated form the API expects.

    Args:
        content_ids: A single identifier or a sequence of identifiers

    Returns:
        Comma-joined identifiers, e.g. ``"a,b,c"``

    Raises:
        ValueError: If no identifier was given
    """
    if isinstance(content_ids, str):
        ids = [content_ids]
    else:
        ids = list(content_ids)
    ids = [str(content_id).strip() for content_id in ids]
    if not ids or not all(ids):
        raise ValueError("At least one non-empty content ID is required")
    return ",".join(ids)


# =============================================================================
# Requests
# =============================================================================


class _RequestBody:
    """Serialization shared by request dataclasses.

    Each field declares its wire name in ``metadata["key"]``.
    """

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if is_set(value):
                body[f.metadata.get("key", f.name)] = value
        return body


@dataclass(frozen=True)
class CreateFolderRequest(_RequestBody):
    parent_folder_id: str = field(metadata={"key": "parentFolderId"})
    folder_name: str = field(metadata={"key": "folderName"})


@dataclass(frozen=True)
class UpdateContentRequest(_RequestBody):
    """Change one attribute of a file or folder.

    ``attribute`` is one of ``name``, ``description``, ``tags``, ``public``,
    ``expiry`` or ``password``.
    """

    attribute: str = field(metadata={"key": "attribute"})
    attribute_value: Any = field(metadata={"key": "attributeValue"})


@dataclass(frozen=True)
class ContentsRequest(_RequestBody):
    """Body for operations addressing several contents (delete, import)."""

    contents_id: str = field(metadata={"key": "contentsId"})

    @classmethod
    def for_ids(cls, content_ids: str | list[str]) -> ContentsRequest:
        return cls(join_ids(content_ids))


@dataclass(frozen=True)
class TransferContentRequest(_RequestBody):
    """Body for copying or moving contents into a folder."""

    contents_id: str = field(metadata={"key": "contentsId"})
    folder_id: str = field(metadata={"key": "folderId"})

    @classmethod
    def for_ids(
        cls, content_ids: str | list[str], folder_id: str
    ) -> TransferContentRequest:
        return cls(join_ids(content_ids), folder_id)


@dataclass(frozen=True)
class DirectLinkOptions(_RequestBody):
    """Restrictions of a direct link, used to create and update links.

    Attributes:
        expire_time: Unix timestamp after which the link stops working
        source_ips_allowed: IP addresses allowed to use the link
        domains_allowed: Referrer domains allowed to use the link
        auth: ``"user:password"`` credential pairs protecting the link
    """

    expire_time: Maybe[int] = field(
        default=UNSET, metadata={"key": "expireTime"}
    )
    source_ips_allowed: Maybe[list[str]] = field(
        default=UNSET, metadata={"key": "sourceIpsAllowed"}
    )
    domains_allowed: Maybe[list[str]] = field(
        default=UNSET, metadata={"key": "domainsAllowed"}
    )
    auth: Maybe[list[str]] = field(default=UNSET, metadata={"key": "auth"})


# =============================================================================
# Responses
# =============================================================================


def _int_or_none(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class ServerInfo:
    """Upload server suggested by the API."""

    server: str

    @classmethod
    def from_api_response(cls, data: Any) -> ServerInfo:
        if isinstance(data, str):
            return cls(server=data)
        return cls(server=data.get("server", ""))

    @property
    def upload_url(self) -> str:
        return f"https://{self.server}.gofile.io/"

    def to_dict(self) -> dict[str, Any]:
        return {"server": self.server, "upload_url": self.upload_url}


@dataclass
class UploadResult:
    """File record returned by an upload."""

    file_id: str
    file_name: str
    download_page: str
    code: str = ""
    parent_folder: str = ""
    md5: str = ""
    guest_token: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> UploadResult:
        return cls(
            file_id=data.get("fileId") or data.get("id", ""),
            file_name=data.get("fileName") or data.get("name", ""),
            download_page=data.get("downloadPage", ""),
            code=data.get("code", ""),
            parent_folder=data.get("parentFolder", ""),
            md5=data.get("md5", ""),
            guest_token=data.get("guestToken"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "file_id": self.file_id,
            "file_name": self.file_name,
            "download_page": self.download_page,
            "code": self.code,
            "parent_folder": self.parent_folder,
            "md5": self.md5,
        }
        if self.guest_token:
            result["guest_token"] = self.guest_token
        return result


@dataclass
class ContentItem:
    """A file or folder inside a folder listing or search result."""

    id: str
    name: str
    type: str
    parent_folder: str = ""
    create_time: int | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    public: bool | None = None
    expiry: int | None = None
    password: bool = False
    size: int | None = None
    download_count: int | None = None
    md5: str | None = None
    link: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> ContentItem:
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [tag for tag in tags.split(",") if tag]
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            type=data.get("type", ""),
            parent_folder=data.get("parentFolder", ""),
            create_time=_int_or_none(data.get("createTime")),
            description=data.get("description"),
            tags=list(tags),
            public=data.get("public", data.get("isPublic")),
            expiry=_int_or_none(data.get("expiry")),
            password=bool(data.get("password")),
            size=_int_or_none(data.get("size")),
            download_count=_int_or_none(data.get("downloadCount")),
            md5=data.get("md5"),
            link=data.get("link"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "parent_folder": self.parent_folder,
            "create_time": self.create_time,
            "description": self.description,
            "tags": self.tags,
            "public": self.public,
            "expiry": self.expiry,
            "password": self.password,
            "size": self.size,
            "download_count": self.download_count,
            "md5": self.md5,
            "link": self.link,
        }


@dataclass
class FolderDetails(ContentItem):
    """A folder and its direct children."""

    code: str | None = None
    contents: list[ContentItem] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> FolderDetails:
        base = ContentItem.from_api_response(data)
        children = data.get("children", data.get("contents")) or {}
        if isinstance(children, dict):
            children = list(children.values())
        return cls(
            **{f.name: getattr(base, f.name) for f in fields(ContentItem)},
            code=data.get("code"),
            contents=[ContentItem.from_api_response(child) for child in children],
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["code"] = self.code
        result["contents"] = [child.to_dict() for child in self.contents]
        return result


def parse_content_list(data: Any) -> list[ContentItem]:
    """Parse a search result, given either as a list or an id-keyed mapping."""
    if isinstance(data, dict):
        data = list(data.values())
    return [ContentItem.from_api_response(item) for item in data or []]


@dataclass
class DirectLink:
    """A direct download link and its restrictions."""

    id: str
    url: str
    expire_time: int | None = None
    source_ips_allowed: list[str] = field(default_factory=list)
    domains_allowed: list[str] = field(default_factory=list)
    auth: list[str] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> DirectLink:
        return cls(
            id=data.get("id", ""),
            url=data.get("directLink") or data.get("url", ""),
            expire_time=_int_or_none(data.get("expireTime")),
            source_ips_allowed=list(data.get("sourceIpsAllowed") or []),
            domains_allowed=list(data.get("domainsAllowed") or []),
            auth=list(data.get("auth") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "expire_time": self.expire_time,
            "source_ips_allowed": self.source_ips_allowed,
            "domains_allowed": self.domains_allowed,
            "auth": self.auth,
        }


@dataclass
class AccountDetails:
    """Account owning the API token."""

    id: str
    email: str = ""
    tier: str = ""
    root_folder: str = ""
    total_size: int = 0
    total_files: int = 0
    total_folders: int = 0
    create_time: int | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> AccountDetails:
        stats = data.get("statsCurrent") or {}
        return cls(
            id=data.get("id", ""),
            email=data.get("email", ""),
            tier=data.get("tier", ""),
            root_folder=data.get("rootFolder", ""),
            total_size=_int_or_none(data.get("totalSize", stats.get("storage"))) or 0,
            total_files=_int_or_none(data.get("totalFiles", stats.get("fileCount")))
            or 0,
            total_folders=_int_or_none(
                data.get("totalFolders", stats.get("folderCount"))
            )
            or 0,
            create_time=_int_or_none(data.get("createTime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "tier": self.tier,
            "root_folder": self.root_folder,
            "total_size": self.total_size,
            "total_files": self.total_files,
            "total_folders": self.total_folders,
            "create_time": self.create_time,
        }
