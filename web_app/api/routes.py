"""API routes implementation."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request

from nanolink.database.models import ShortLink
from ..urls import short_url_for
from .schemas import (
    ErrorResponse,
    HealthResponse,
    RecentURLsResponse,
    ShortenRequest,
    ShortLinkSchema,
    StatisticsResponse,
    URLResponse,
)

router = APIRouter()

DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 100


def _url_response(request: Request, link: ShortLink) -> URLResponse:
    return URLResponse(
        url=ShortLinkSchema.model_validate(link),
        short_url=short_url_for(request, link.short_code),
    )


@router.post(
    "/shorten",
    response_model=URLResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or custom code, or code in use"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Shorten a URL. Resubmitting a known URL returns its existing short link.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    link = await service.create_short_url(body.url, body.custom_code)
    return _url_response(request, link)


@router.get(
    "/urls/{short_code}",
    response_model=URLResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL information",
    description="Get a short link including its visit count.",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a shortened URL."""
    service = request.app.state.service
    link = await service.get_url(short_code)
    return _url_response(request, link)


@router.get(
    "/urls",
    response_model=RecentURLsResponse,
    summary="List recent URLs",
    description="Most recently created short links; limit must be 1-100, anything else means 10.",
)
async def list_recent_urls(request: Request, limit: Optional[int] = None):
    """List recently created URLs."""
    service = request.app.state.service

    if limit is None or not 0 < limit <= MAX_LIST_LIMIT:
        limit = DEFAULT_LIST_LIMIT

    links = await service.get_recent_urls(limit)
    return RecentURLsResponse(urls=[_url_response(request, link) for link in links])


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service
    stats = await service.get_stats()
    return StatisticsResponse(
        total_urls=stats.total_urls,
        total_visits=stats.total_visits,
        last_created=stats.last_created,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
