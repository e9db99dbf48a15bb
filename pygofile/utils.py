"""Utility functions for Gofile."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Any

# Attributes accepted by the update content operation
CONTENT_ATTRIBUTES: tuple[str, ...] = (
    "name",
    "description",
    "tags",
    "public",
    "expiry",
    "password",
)


# =============================================================================
# Timestamp utilities
# =============================================================================


def parse_expiry(value: str | int | None) -> int | None:
    """Parse an expiry given as a Unix timestamp or an ISO 8601 date.

    Args:
        value: Unix timestamp (seconds) or ISO date such as "2025-01-15" or
            "2025-01-15T10:30:00Z". Naive dates are interpreted as UTC.

    Returns:
        Unix timestamp in seconds, or None if ``value`` is empty

    Raises:
        ValueError: If the value cannot be parsed

    Examples:
        >>> parse_expiry("1700000000")
        1700000000
        >>> parse_expiry("2024-01-01T00:00:00Z")
        1704067200
    """
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value

    text = value.strip()
    if text.isdigit():
        return int(text)

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid expiry: {value}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def format_timestamp(timestamp: int | None) -> str:
    """Format a Unix timestamp for display, "-" when missing."""
    if timestamp is None:
        return "-"
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (OverflowError, OSError, ValueError):
        return str(timestamp)


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int | None) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes is None:
        return "-"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"


# =============================================================================
# Request value helpers
# =============================================================================


def hash_password(password: str) -> str:
    """Return the SHA-256 hex digest Gofile expects for folder passwords.

    Examples:
        >>> hash_password("secret")[:16]
        '2bb80d537b1da3e3'
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def coerce_attribute_value(attribute: str, value: str) -> Any:
    """Convert a command-line value to the type the API expects.

    ``public`` becomes a bool and ``expiry`` a Unix timestamp; other
    attributes are sent as strings.

    Raises:
        ValueError: If the attribute is unknown or the value is invalid
    """
    if attribute not in CONTENT_ATTRIBUTES:
        raise ValueError(
            f"Unknown attribute '{attribute}'. "
            f"Choose one of: {', '.join(CONTENT_ATTRIBUTES)}"
        )
    if attribute == "public":
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ValueError(f"Invalid boolean value for public: {value}")
    if attribute == "expiry":
        return parse_expiry(value)
    return value
