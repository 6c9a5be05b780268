"""Web interface routes implementation."""

import os

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from nanolink.common.logging_config import get_logger
from nanolink.errors import NotFoundError, ShortLinkError, ValidationError
from ..urls import short_url_for

router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)

logger = get_logger("web")

HOMEPAGE_RECENT_LIMIT = 10


def _error_page(request: Request, message: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error_message": message},
        status_code=status_code,
    )


def _server_error_page(request: Request, exc: ShortLinkError) -> HTMLResponse:
    logger.error(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc.message}")
    return _error_page(request, "Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the homepage with the shortening form and recent links."""
    service = request.app.state.service

    links = await service.get_recent_urls(HOMEPAGE_RECENT_LIMIT)
    stats = await service.get_stats()

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "recent": [(link, short_url_for(request, link.short_code)) for link in links],
            "stats": stats,
        },
    )


@router.post("/create", response_class=HTMLResponse, include_in_schema=False)
async def create_short_url_web(
    request: Request,
    url: str = Form(...),
    custom_code: str = Form(None),
):
    """Handle form submission to create short URL."""
    service = request.app.state.service

    # Empty form field means no custom code
    custom_code = custom_code.strip() if custom_code and custom_code.strip() else None

    try:
        link = await service.create_short_url(url, custom_code)
    except ValidationError as e:
        return _error_page(request, e.message, status.HTTP_400_BAD_REQUEST)
    except ShortLinkError as e:
        return _server_error_page(request, e)

    # Relative redirect so it works with or without a proxy path prefix
    return RedirectResponse(
        url=f"result/{link.short_code}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/result/{short_code}", response_class=HTMLResponse, include_in_schema=False)
async def result_page(request: Request, short_code: str):
    """Show result page with short URL."""
    service = request.app.state.service

    try:
        link = await service.get_url(short_code)
    except NotFoundError as e:
        return _error_page(request, e.message, status.HTTP_404_NOT_FOUND)
    except ShortLinkError as e:
        return _server_error_page(request, e)

    return templates.TemplateResponse(
        request,
        "result.html",
        {"link": link, "short_url": short_url_for(request, link.short_code)},
    )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL; unknown codes go to the homepage."""
    service = request.app.state.service

    try:
        link = await service.get_url(short_code)
    except NotFoundError:
        logger.debug(f"Short code not found: {short_code}")
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)

    # Counted in the background; the redirect never waits on it
    request.app.state.visit_recorder.record(link.short_code)

    return RedirectResponse(url=link.original_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
