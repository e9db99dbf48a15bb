"""CLI interface for Gofile."""

import logging
from pathlib import Path
from typing import Any, Optional

import click
from rich.progress import Progress, SpinnerColumn, TextColumn

from .api import GofileClient
from .config import UPLOAD_REGIONS, config
from .exceptions import GofileConfigError
from .models import (
    UNSET,
    AccountDetails,
    ContentItem,
    DirectLink,
    FolderDetails,
    ServerInfo,
    UploadResult,
    parse_content_list,
)
from .outcome import Failure
from .output import OutputFormatter
from .utils import (
    CONTENT_ATTRIBUTES,
    coerce_attribute_value,
    format_timestamp,
    hash_password,
    parse_expiry,
)

logger = logging.getLogger(__name__)

CONTENT_COLUMNS = ["name", "type", "id", "size", "downloads", "created"]


def _get_client(ctx: Any) -> GofileClient:
    """Build a client from the global options and the user configuration."""
    out: OutputFormatter = ctx.obj["out"]
    try:
        return GofileClient.from_config(
            token=ctx.obj.get("token"), upload_region=ctx.obj.get("upload_region")
        )
    except GofileConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        raise


def _require_token(ctx: Any) -> None:
    out: OutputFormatter = ctx.obj["out"]
    if not ctx.obj.get("token") and not config.is_configured():
        out.error("API token not configured.")
        out.info("Run 'gofile init' or set GOFILE_TOKEN")
        ctx.exit(1)


def _unwrap(ctx: Any, outcome: Any) -> Any:
    """Return the outcome's value, or report the failure and exit."""
    if isinstance(outcome, Failure):
        out: OutputFormatter = ctx.obj["out"]
        out.error(outcome.message)
        ctx.exit(1)
    return outcome.value


def _account_id_from(data: Any) -> str:
    """Account ID from account lookup data, given as ``{"id": ...}`` or a string."""
    if isinstance(data, dict):
        return str(data.get("id", ""))
    return str(data)


def _account_id(ctx: Any, client: GofileClient) -> str:
    """Look up the ID of the account owning the token."""
    return _account_id_from(_unwrap(ctx, client.get_account_id()))


def _content_row(item: ContentItem, out: OutputFormatter) -> dict[str, Any]:
    return {
        "name": item.name + ("/" if item.is_folder else ""),
        "type": item.type,
        "id": item.id,
        "size": "" if item.is_folder else out.format_size(item.size),
        "downloads": item.download_count,
        "created": format_timestamp(item.create_time),
    }


def _link_options(
    expire: Optional[str],
    ips: tuple[str, ...],
    domains: tuple[str, ...],
    auth: tuple[str, ...],
) -> dict[str, Any]:
    """Direct link restrictions from CLI options, unset when not given."""
    for pair in auth:
        if ":" not in pair:
            raise click.BadParameter(
                f"'{pair}' is not in user:password form", param_hint="--auth"
            )
    try:
        expire_time = parse_expiry(expire) if expire else UNSET
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--expire") from e
    return {
        "expire_time": expire_time,
        "source_ips_allowed": list(ips) if ips else UNSET,
        "domains_allowed": list(domains) if domains else UNSET,
        "auth": list(auth) if auth else UNSET,
    }


def _print_link(out: OutputFormatter, link: DirectLink) -> None:
    out.print_fields(
        {
            "Link ID": link.id,
            "URL": link.url,
            "Expires": format_timestamp(link.expire_time)
            if link.expire_time
            else None,
            "Allowed IPs": link.source_ips_allowed,
            "Allowed domains": link.domains_allowed,
            "Credentials": [pair.split(":", 1)[0] + ":***" for pair in link.auth],
        }
    )


link_options = [
    click.option("--expire", "-e", help="Expiry as Unix timestamp or ISO date"),
    click.option(
        "--ip", "ips", multiple=True, help="Allowed source IP (repeatable)"
    ),
    click.option(
        "--domain", "domains", multiple=True, help="Allowed domain (repeatable)"
    ),
    click.option(
        "--auth", "auth", multiple=True, help="user:password pair (repeatable)"
    ),
]


def add_link_options(func: Any) -> Any:
    for option in reversed(link_options):
        func = option(func)
    return func


@click.group()
@click.option("--token", "-t", envvar="GOFILE_TOKEN", help="Gofile API token")
@click.option(
    "--upload-region",
    "-r",
    type=click.Choice(sorted(UPLOAD_REGIONS), case_sensitive=False),
    default=None,
    help="Upload host region (default: automatic routing)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pygofile")
@click.pass_context
def main(
    ctx: Any,
    token: Optional[str],
    upload_region: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """PyGofile - Upload and manage files on Gofile."""
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["upload_region"] = upload_region
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pygofile").setLevel(logging.DEBUG)
        # Request URLs are logged by pygofile itself
        logging.getLogger("httpx").setLevel(logging.WARNING)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--token",
    "-t",
    prompt="Enter your Gofile API token",
    hide_input=True,
    help="Gofile API token",
)
@click.option(
    "--upload-region",
    type=click.Choice(sorted(UPLOAD_REGIONS), case_sensitive=False),
    default=None,
    help="Default upload region to store",
)
@click.pass_context
def init(ctx: Any, token: str, upload_region: Optional[str]) -> None:
    """Initialize Gofile configuration.

    Stores your API token in ~/.config/pygofile/config for future use.
    """
    out: OutputFormatter = ctx.obj["out"]

    out.info("Validating API token...")
    with GofileClient(token=token) as client:
        outcome = client.get_account_id()

    if isinstance(outcome, Failure):
        out.error(f"Invalid API token ({outcome.message})")
        if not click.confirm("Save anyway?", default=False):
            out.info("Configuration cancelled")
            ctx.exit(1)
    else:
        out.success(
            f"API token is valid (account {_account_id_from(outcome.value)})"
        )

    config.save_token(token)
    if upload_region:
        config.save_upload_region(upload_region)
    out.success("Configuration saved successfully")
    out.info(f"Config file: {config.get_config_path()}")


@main.command()
@click.pass_context
def server(ctx: Any) -> None:
    """Show the best server for uploads."""
    out: OutputFormatter = ctx.obj["out"]
    with _get_client(ctx) as client:
        info = ServerInfo.from_api_response(_unwrap(ctx, client.get_best_server()))

    if out.json_output:
        out.output_json(info.to_dict())
    else:
        out.print(info.server)


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--folder-id", "-f", help="Destination folder ID")
@click.pass_context
def upload(ctx: Any, paths: tuple[str, ...], folder_id: Optional[str]) -> None:
    """Upload files to Gofile.

    PATHS: One or more local files to upload. Without --folder-id the
    first upload creates a new folder and the following files go there.
    """
    out: OutputFormatter = ctx.obj["out"]
    files = [Path(p) for p in paths]
    directories = [p for p in files if p.is_dir()]
    if directories:
        out.error(f"Not a file: {directories[0]}")
        ctx.exit(1)

    results: list[dict[str, Any]] = []
    failed = 0
    with _get_client(ctx) as client:
        for file_path in files:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                transient=True,
                disable=out.json_output or out.quiet,
            ) as progress:
                progress.add_task(f"Uploading {file_path.name}...", total=None)
                outcome = client.upload_file(file_path, folder_id=folder_id)

            if isinstance(outcome, Failure):
                failed += 1
                out.error(f"{file_path.name}: {outcome.message}")
                continue

            result = UploadResult.from_api_response(outcome.value)
            results.append(result.to_dict())
            if folder_id is None and result.parent_folder:
                folder_id = result.parent_folder
            if not out.json_output:
                out.success(f"Uploaded {file_path.name}")
                out.print_fields(
                    {"Download page": result.download_page, "File ID": result.file_id}
                )

    if out.json_output:
        out.output_json(results)
    if failed:
        ctx.exit(1)


@main.command()
@click.argument("parent_id")
@click.argument("name")
@click.pass_context
def mkdir(ctx: Any, parent_id: str, name: str) -> None:
    """Create a folder.

    PARENT_ID: ID of the parent folder
    NAME: Name of the folder to create
    """
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.create_folder(parent_id, name))

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Folder created: {name}")
        if isinstance(data, dict) and data.get("id"):
            out.print_fields({"Folder ID": data.get("id")})


@main.command()
@click.argument("content_id")
@click.argument("attribute", type=click.Choice(CONTENT_ATTRIBUTES))
@click.argument("value")
@click.pass_context
def update(ctx: Any, content_id: str, attribute: str, value: str) -> None:
    """Change an attribute of a file or folder.

    \b
    Examples:
        gofile update abc123 name report.pdf
        gofile update abc123 public true
        gofile update abc123 expiry 2025-12-31
    """
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    try:
        attribute_value = coerce_attribute_value(attribute, value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="VALUE") from e

    with _get_client(ctx) as client:
        data = _unwrap(
            ctx, client.update_content(content_id, attribute, attribute_value)
        )

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Updated {attribute} of {content_id}")


@main.command()
@click.argument("content_ids", nargs=-1, required=True)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def rm(ctx: Any, content_ids: tuple[str, ...], yes: bool) -> None:
    """Delete files and folders.

    CONTENT_IDS: One or more content IDs to delete
    """
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    if not yes and not click.confirm(
        f"Delete {len(content_ids)} item(s)?", default=False
    ):
        out.info("Deletion cancelled")
        return

    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.delete_content(list(content_ids)))

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Deleted {len(content_ids)} item(s)")


@main.command()
@click.argument("folder_id")
@click.option("--password", "-p", help="Password of a protected folder")
@click.pass_context
def ls(ctx: Any, folder_id: str, password: Optional[str]) -> None:
    """List the contents of a folder.

    FOLDER_ID: ID of the folder to list
    """
    out: OutputFormatter = ctx.obj["out"]
    hashed = hash_password(password) if password else None
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.get_folder_details(folder_id, password=hashed))

    folder = FolderDetails.from_api_response(data)
    if out.json_output:
        out.output_json(folder.to_dict())
        return

    out.print_fields({"Folder": f"{folder.name} ({folder.id})", "Link": folder.link})
    if not folder.contents:
        out.info("Folder is empty")
        return
    out.output_table(
        [_content_row(item, out) for item in folder.contents], CONTENT_COLUMNS
    )


@main.command()
@click.argument("folder_id")
@click.argument("query")
@click.pass_context
def search(ctx: Any, folder_id: str, query: str) -> None:
    """Search a folder for files and folders by name.

    FOLDER_ID: ID of the folder to search
    QUERY: Text to search for
    """
    out: OutputFormatter = ctx.obj["out"]
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.search_within_folder(folder_id, query))

    items = parse_content_list(data)
    if out.json_output:
        out.output_json([item.to_dict() for item in items])
        return
    if not items:
        out.info(f"No matches for '{query}'")
        return
    out.output_table([_content_row(item, out) for item in items], CONTENT_COLUMNS)


@main.command()
@click.argument("content_ids", nargs=-1, required=True)
@click.option("--to", "folder_id", required=True, help="Destination folder ID")
@click.pass_context
def cp(ctx: Any, content_ids: tuple[str, ...], folder_id: str) -> None:
    """Copy files and folders into another folder."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.copy_content(list(content_ids), folder_id))

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Copied {len(content_ids)} item(s) to {folder_id}")


@main.command()
@click.argument("content_ids", nargs=-1, required=True)
@click.option("--to", "folder_id", required=True, help="Destination folder ID")
@click.pass_context
def mv(ctx: Any, content_ids: tuple[str, ...], folder_id: str) -> None:
    """Move files and folders into another folder."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.move_content(list(content_ids), folder_id))

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Moved {len(content_ids)} item(s) to {folder_id}")


@main.command(name="import")
@click.argument("content_ids", nargs=-1, required=True)
@click.pass_context
def import_(ctx: Any, content_ids: tuple[str, ...]) -> None:
    """Import public files and folders into your account."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.import_public_content(list(content_ids)))

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Imported {len(content_ids)} item(s)")


@main.group()
def link() -> None:
    """Manage direct links."""


@link.command("create")
@click.argument("content_id")
@add_link_options
@click.pass_context
def link_create(
    ctx: Any,
    content_id: str,
    expire: Optional[str],
    ips: tuple[str, ...],
    domains: tuple[str, ...],
    auth: tuple[str, ...],
) -> None:
    """Create a direct link for a file or folder."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    options = _link_options(expire, ips, domains, auth)
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.create_direct_link(content_id, **options))

    direct_link = DirectLink.from_api_response(data)
    if out.json_output:
        out.output_json(direct_link.to_dict())
    else:
        out.success("Direct link created")
        _print_link(out, direct_link)


@link.command("update")
@click.argument("content_id")
@click.argument("link_id")
@add_link_options
@click.pass_context
def link_update(
    ctx: Any,
    content_id: str,
    link_id: str,
    expire: Optional[str],
    ips: tuple[str, ...],
    domains: tuple[str, ...],
    auth: tuple[str, ...],
) -> None:
    """Change the restrictions of a direct link."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    options = _link_options(expire, ips, domains, auth)
    with _get_client(ctx) as client:
        data = _unwrap(
            ctx, client.update_direct_link(content_id, link_id, **options)
        )

    direct_link = DirectLink.from_api_response(data)
    if out.json_output:
        out.output_json(direct_link.to_dict())
    else:
        out.success("Direct link updated")
        _print_link(out, direct_link)


@link.command("delete")
@click.argument("content_id")
@click.argument("link_id")
@click.pass_context
def link_delete(ctx: Any, content_id: str, link_id: str) -> None:
    """Delete a direct link."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        data = _unwrap(ctx, client.delete_direct_link(content_id, link_id))

    if out.json_output:
        out.output_json(data)
    else:
        out.success(f"Direct link {link_id} deleted")


@main.command()
@click.pass_context
def account(ctx: Any) -> None:
    """Show details of the account owning the API token."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        account_id = _account_id(ctx, client)
        data = _unwrap(ctx, client.get_account_details(account_id))

    details = AccountDetails.from_api_response(data)
    if out.json_output:
        out.output_json(details.to_dict())
        return
    out.print_fields(
        {
            "Account ID": details.id,
            "Email": details.email,
            "Tier": details.tier,
            "Root folder": details.root_folder,
            "Files": details.total_files,
            "Folders": details.total_folders,
            "Storage used": out.format_size(details.total_size),
            "Created": format_timestamp(details.create_time)
            if details.create_time
            else None,
        }
    )


@main.command(name="reset-token")
@click.option("--save", is_flag=True, help="Store the new token in the config file")
@click.confirmation_option(prompt="The current token will stop working. Continue?")
@click.pass_context
def reset_token(ctx: Any, save: bool) -> None:
    """Reset the API token of your account."""
    out: OutputFormatter = ctx.obj["out"]
    _require_token(ctx)
    with _get_client(ctx) as client:
        account_id = _account_id(ctx, client)
        new_token = _unwrap(ctx, client.reset_auth_token(account_id))

    if out.json_output:
        out.output_json({"token": new_token})
    else:
        out.success("API token reset")
        out.print_fields({"New token": new_token})

    if save:
        path = config.save_token(new_token)
        out.info(f"New token saved to {path}")


if __name__ == "__main__":
    main()
