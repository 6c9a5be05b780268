"""Validation utilities for submitted URLs and custom short codes."""

import re
from urllib.parse import urlsplit

from ..errors import ValidationError

MAX_URL_LENGTH = 2048
MIN_CODE_LENGTH = 4
MAX_CODE_LENGTH = 12

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_CODE_RE = re.compile(r"[A-Za-z0-9_-]+")


def normalize_url(raw: str) -> str:
    """Validate a submitted URL and complete its scheme.

    Only the scheme is added (``http://`` when missing); path, query and
    fragment are left exactly as submitted, so two orderings of the same
    query string are different keys.

    Args:
        raw: The URL as submitted

    Returns:
        The URL to store and to deduplicate on

    Raises:
        ValidationError: If the URL is empty, too long, contains control
            characters, is unparseable, has no host, or has a host without
            a dotted domain (only a bare ``localhost`` is exempt)
    """
    if not raw or not isinstance(raw, str):
        raise ValidationError("URL cannot be empty")

    if len(raw) > MAX_URL_LENGTH:
        raise ValidationError(f"URL is too long (max {MAX_URL_LENGTH} characters)")

    if any(ord(ch) < 0x20 or ord(ch) == 0x7f for ch in raw):
        raise ValidationError("Invalid URL format")

    url = raw if _SCHEME_RE.match(raw) else f"http://{raw}"

    try:
        parts = urlsplit(url)
        host = parts.hostname
        # Accessing .port validates it
        parts.port
    except ValueError:
        raise ValidationError("Invalid URL format")

    if any(ch.isspace() for ch in parts.netloc):
        raise ValidationError("Invalid URL format")

    if not host:
        raise ValidationError("URL must have a host")

    # Checked as submitted: port included, case kept
    host_port = parts.netloc.rpartition("@")[2]
    if host_port != "localhost" and len(host_port.split(".")) < 2:
        raise ValidationError("URL must have a valid domain")

    return url


def is_valid_code(code: str) -> bool:
    """Check a custom short code: 4-12 characters from ``[A-Za-z0-9_-]``."""
    if not code or not isinstance(code, str):
        return False

    if not MIN_CODE_LENGTH <= len(code) <= MAX_CODE_LENGTH:
        return False

    return _CODE_RE.fullmatch(code) is not None
