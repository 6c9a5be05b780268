"""Common utilities for nanolink."""

from .validators import normalize_url, is_valid_code
from .urls import resolve_base_url, build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "normalize_url",
    "is_valid_code",
    "resolve_base_url",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
