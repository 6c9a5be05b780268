"""Storage layer for nanolink."""

from .base import ShortLinkStoreBase
from .memory import MemoryShortLinkStore
from .models import ShortLink, Stats
from .postgres import PostgresShortLinkStore

__all__ = [
    "ShortLinkStoreBase",
    "MemoryShortLinkStore",
    "PostgresShortLinkStore",
    "ShortLink",
    "Stats",
]
