"""Short URL construction for incoming requests."""

from fastapi import Request

from nanolink.common.urls import build_short_url, resolve_base_url


def short_url_for(request: Request, short_code: str) -> str:
    """Fully-qualified short URL as seen by the client of ``request``."""
    config = request.app.state.config
    base_url = resolve_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return build_short_url(short_code, base_url, config.path_prefix)
