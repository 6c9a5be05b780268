"""Core business logic for nanolink."""

from .shortcode import ShortCodeGenerator
from .service import ShortLinkService
from .sweeper import RetentionSweeper
from .visits import VisitRecorder

__all__ = ["ShortCodeGenerator", "ShortLinkService", "RetentionSweeper", "VisitRecorder"]
