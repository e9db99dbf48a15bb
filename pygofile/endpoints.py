"""Gofile API endpoints as ``Call`` descriptors.

Each function maps the arguments of one public operation to the request the
API expects. Nothing here performs I/O.
"""

from __future__ import annotations

from typing import Any, Union
from urllib.parse import quote

from .dispatch import Call, FileSource, FileUpload
from .models import (
    ContentsRequest,
    CreateFolderRequest,
    DirectLinkOptions,
    TransferContentRequest,
    UpdateContentRequest,
)
from .transport import Sender

ContentIds = Union[str, list[str], tuple[str, ...]]


def _segment(value: str) -> str:
    """Percent-encode a path parameter."""
    return quote(str(value), safe="")


# =========================
# Upload Operations
# =========================


def get_best_server() -> Call:
    return Call("Get best server", "GET", "getServer", data_key="server")


def upload_file(
    file: FileSource,
    folder_id: str | None = None,
    filename: str | None = None,
) -> Call:
    """Multipart upload; the ``folderId`` part is only sent when given."""
    form = {"folderId": folder_id} if folder_id is not None else None
    return Call(
        "Upload",
        "POST",
        "uploadfile",
        sender=Sender.UPLOAD,
        form=form,
        upload=FileUpload(file, filename=filename),
    )


# =========================
# Content Operations
# =========================


def create_folder(parent_folder_id: str, folder_name: str) -> Call:
    body = CreateFolderRequest(parent_folder_id, folder_name)
    return Call("Create folder", "POST", "contents/createFolder", json=body.to_dict())


def update_content(content_id: str, attribute: str, attribute_value: Any) -> Call:
    body = UpdateContentRequest(attribute, attribute_value)
    return Call(
        "Update content",
        "PUT",
        f"contents/{_segment(content_id)}/update",
        json=body.to_dict(),
    )


def delete_content(content_ids: ContentIds) -> Call:
    body = ContentsRequest.for_ids(content_ids)
    return Call("Delete content", "DELETE", "contents", json=body.to_dict())


def get_folder_details(folder_id: str, password: str | None = None) -> Call:
    params = {"password": password} if password is not None else None
    return Call(
        "Get folder details",
        "GET",
        f"contents/{_segment(folder_id)}",
        params=params,
    )


def search_within_folder(content_id: str, search_string: str) -> Call:
    return Call(
        "Search",
        "GET",
        "contents/search",
        params={"contentId": content_id, "searchedString": search_string},
    )


def copy_content(content_ids: ContentIds, folder_id: str) -> Call:
    body = TransferContentRequest.for_ids(content_ids, folder_id)
    return Call("Copy content", "POST", "contents/copy", json=body.to_dict())


def move_content(content_ids: ContentIds, folder_id: str) -> Call:
    body = TransferContentRequest.for_ids(content_ids, folder_id)
    return Call("Move content", "PUT", "contents/move", json=body.to_dict())


def import_public_content(content_ids: ContentIds) -> Call:
    body = ContentsRequest.for_ids(content_ids)
    return Call("Import content", "POST", "contents/import", json=body.to_dict())


# =========================
# Direct Link Operations
# =========================


def create_direct_link(content_id: str, options: DirectLinkOptions) -> Call:
    return Call(
        "Create direct link",
        "POST",
        f"contents/{_segment(content_id)}/directlinks",
        json=options.to_dict(),
    )


def update_direct_link(
    content_id: str, direct_link_id: str, options: DirectLinkOptions
) -> Call:
    return Call(
        "Update direct link",
        "PUT",
        f"contents/{_segment(content_id)}/directlinks/{_segment(direct_link_id)}",
        json=options.to_dict(),
    )


def delete_direct_link(content_id: str, direct_link_id: str) -> Call:
    return Call(
        "Delete direct link",
        "DELETE",
        f"contents/{_segment(content_id)}/directlinks/{_segment(direct_link_id)}",
    )


# =========================
# Account Operations
# =========================


def get_account_id() -> Call:
    return Call("Get account ID", "GET", "accounts/getid")


def get_account_details(account_id: str) -> Call:
    return Call("Get account details", "GET", f"accounts/{_segment(account_id)}")


def reset_auth_token(account_id: str) -> Call:
    return Call(
        "Reset auth token", "POST", f"accounts/{_segment(account_id)}/resetToken"
    )
