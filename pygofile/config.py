"""Configuration management for the Gofile client.

Settings are read, in order of priority, from explicit arguments, the
environment (``GOFILE_TOKEN``, ``GOFILE_API_URL``, ``GOFILE_UPLOAD_REGION``,
``GOFILE_UPLOAD_URL``) and the user config file
``~/.config/pygofile/config``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import GofileConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.gofile.io/"
DEFAULT_UPLOAD_URL = "https://upload.gofile.io/"

# Connect, read and write timeout in seconds
DEFAULT_TIMEOUT: float = 30.0

UPLOAD_REGIONS: dict[str, str] = {
    "auto": DEFAULT_UPLOAD_URL,
    "eu-par": "https://upload-eu-par.gofile.io/",
    "na-phx": "https://upload-na-phx.gofile.io/",
    "ap-sgp": "https://upload-ap-sgp.gofile.io/",
    "ap-hkg": "https://upload-ap-hkg.gofile.io/",
    "ap-tyo": "https://upload-ap-tyo.gofile.io/",
    "sa-sao": "https://upload-sa-sao.gofile.io/",
}

TOKEN_KEY = "GOFILE_TOKEN"
API_URL_KEY = "GOFILE_API_URL"
UPLOAD_REGION_KEY = "GOFILE_UPLOAD_REGION"
UPLOAD_URL_KEY = "GOFILE_UPLOAD_URL"


def get_config_dir() -> Path:
    """Return the per-user configuration directory."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "pygofile"
    return Path.home() / ".config" / "pygofile"


def _parse_config_lines(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def resolve_upload_url(
    region: str | None = None, upload_url: str | None = None
) -> str:
    """Resolve the upload base URL.

    Args:
        region: Name of a regional upload host (see ``UPLOAD_REGIONS``)
        upload_url: Explicit upload URL, takes precedence over ``region``

    Returns:
        Upload base URL

    Raises:
        GofileConfigError: If ``region`` is not a known upload region
    """
    if upload_url:
        return upload_url
    if not region:
        return DEFAULT_UPLOAD_URL
    try:
        return UPLOAD_REGIONS[region.lower()]
    except KeyError:
        known = ", ".join(sorted(UPLOAD_REGIONS))
        raise GofileConfigError(
            f"Unknown upload region '{region}'. Choose one of: {known}"
        ) from None


class Config:
    """Gofile settings backed by the environment and the user config file."""

    def __init__(self, config_path: Path | None = None):
        self._config_path = config_path

    def get_config_path(self) -> Path:
        """Return the path of the user config file."""
        if self._config_path is not None:
            return self._config_path
        return get_config_dir() / "config"

    def _read_file(self) -> dict[str, str]:
        path = self.get_config_path()
        if not path.exists():
            return {}
        try:
            return _parse_config_lines(path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning("Could not read config file %s: %s", path, e)
            return {}

    def _get(self, key: str) -> str | None:
        value = os.environ.get(key)
        if value:
            return value
        return self._read_file().get(key) or None

    @property
    def token(self) -> str | None:
        return self._get(TOKEN_KEY)

    @property
    def api_url(self) -> str:
        return self._get(API_URL_KEY) or DEFAULT_API_URL

    @property
    def upload_region(self) -> str | None:
        return self._get(UPLOAD_REGION_KEY)

    @property
    def upload_url(self) -> str:
        return resolve_upload_url(self.upload_region, self._get(UPLOAD_URL_KEY))

    def is_configured(self) -> bool:
        """Check whether an API token is available."""
        return self.token is not None

    def save(self, values: dict[str, str | None]) -> Path:
        """Merge ``values`` into the user config file.

        Keys mapped to ``None`` are removed.

        Returns:
            Path of the written config file
        """
        path = self.get_config_path()
        existing = self._read_file()
        for key, value in values.items():
            if value is None:
                existing.pop(key, None)
            else:
                existing[key] = value

        path.parent.mkdir(parents=True, exist_ok=True)
        lines = ["# pygofile configuration"]
        lines.extend(f"{key}={existing[key]}" for key in sorted(existing))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", path)
        return path

    def save_token(self, token: str) -> Path:
        """Store the API token in the user config file."""
        return self.save({TOKEN_KEY: token})

    def save_upload_region(self, region: str | None) -> Path:
        """Store the default upload region in the user config file."""
        if region is not None:
            resolve_upload_url(region)
        return self.save({UPLOAD_REGION_KEY: region})


config = Config()
