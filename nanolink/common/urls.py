"""Building fully-qualified short URLs behind proxies."""

from typing import Mapping, Optional


def resolve_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Work out the public base URL for a request.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host (set by a reverse proxy)
    2. Request scheme + Host header
    3. Configured base URL
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    proto = lowered.get("x-forwarded-proto")
    host = lowered.get("x-forwarded-host")
    if proto and host:
        # Proxies may append a chain ("https, http"); the first hop is the client's
        return f"{proto.split(',')[0].strip()}://{host.split(',')[0].strip()}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional path prefix (e.g. ``/s``) and code."""
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")
    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"
