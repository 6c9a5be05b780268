"""FastAPI web application for nanolink."""

from .app_factory import create_app

__all__ = ["create_app"]
