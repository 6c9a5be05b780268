"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from nanolink.common.logging_config import get_logger
from nanolink.errors import ErrorKind, ShortLinkError
from .api import api_router
from .web import web_router
from .middleware import (
    FixedWindowRateLimiter,
    LoggingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)

logger = get_logger("web")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DATABASE: 500,
    ErrorKind.INTERNAL: 500,
}

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


async def short_link_error_handler(request: Request, exc: ShortLinkError) -> JSONResponse:
    """Translate service errors into ``{"error": ...}`` responses."""
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if not exc.is_client_error:
        # Details stay in the log, never in the response body
        logger.error(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc.message}")
        return JSONResponse({"error": INTERNAL_ERROR_MESSAGE}, status_code=status_code)
    return JSONResponse({"error": exc.message}, status_code=status_code)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Invalid request body for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


def create_app(
    service_instance,
    visit_recorder,
    config,
    rate_limiter=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: ShortLinkService instance (may be set later by the lifespan)
        visit_recorder: VisitRecorder used by the redirect route
        config: Configuration instance
        rate_limiter: Limiter with an async ``allow(key)``; defaults to an
            in-process fixed window built from ``config``

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="nanolink",
        description="URL shortening service",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    if rate_limiter is None:
        rate_limiter = FixedWindowRateLimiter(
            limit=config.rate_limit,
            window_seconds=config.rate_limit_window_seconds,
        )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.visit_recorder = visit_recorder
    app.state.config = config
    app.state.rate_limiter = rate_limiter

    app.add_exception_handler(ShortLinkError, short_link_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Last added runs first: logging wraps everything, CORS answers preflights
    # before they count against the rate limit.
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
