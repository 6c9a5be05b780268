"""In-memory link store.

Satisfies the full ``ShortLinkStoreBase`` contract without a database.
Used to unit-test the service layer in isolation and selectable with
``DATABASE_URL=memory://`` for local runs. Data does not survive the process.
"""

import asyncio
import itertools
import logging
from dataclasses import replace
from datetime import timedelta
from typing import Dict, List, Optional

from ..errors import CodeInUseError, ValidationError
from .base import ShortLinkStoreBase
from .models import ShortLink, Stats, utcnow


class MemoryShortLinkStore(ShortLinkStoreBase):
    """Dictionary-backed store; one lock serialises every mutation."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[str, ShortLink] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        self.closed = False

    async def insert(self, link: ShortLink, timeout: Optional[float] = None) -> ShortLink:
        async with self._lock:
            if link.short_code in self._links:
                raise CodeInUseError(link.short_code)
            stored = replace(link, id=next(self._ids))
            self._links[stored.short_code] = stored
        self.logger.debug(f"Stored {stored.short_code} -> {stored.original_url}")
        return replace(stored)

    async def get_by_code(self, short_code: str, timeout: Optional[float] = None) -> Optional[ShortLink]:
        link = self._links.get(short_code)
        return replace(link) if link else None

    async def get_by_original_url(
        self, original_url: str, timeout: Optional[float] = None
    ) -> Optional[ShortLink]:
        for link in self._links.values():
            if link.original_url == original_url:
                return replace(link)
        return None

    async def increment_visits(self, short_code: str, timeout: Optional[float] = None) -> bool:
        async with self._lock:
            link = self._links.get(short_code)
            if link is None:
                return False
            link.visits += 1
            return True

    async def list_recent(self, limit: int, timeout: Optional[float] = None) -> List[ShortLink]:
        links = sorted(
            self._links.values(),
            key=lambda link: (link.created_at, link.id),
            reverse=True,
        )
        return [replace(link) for link in links[:limit]]

    async def get_stats(self, timeout: Optional[float] = None) -> Stats:
        links = list(self._links.values())
        return Stats(
            total_urls=len(links),
            total_visits=sum(link.visits for link in links),
            last_created=max((link.created_at for link in links), default=None),
        )

    async def code_exists(self, short_code: str, timeout: Optional[float] = None) -> bool:
        return short_code in self._links

    async def delete_older_than(self, max_age: timedelta, timeout: Optional[float] = None) -> int:
        if max_age <= timedelta(0):
            raise ValidationError("max age must be positive")

        cutoff = utcnow() - max_age
        async with self._lock:
            expired = [code for code, link in self._links.items() if link.created_at < cutoff]
            for code in expired:
                del self._links[code]
        return len(expired)

    async def health_check(self) -> bool:
        return not self.closed

    async def close(self) -> None:
        self.closed = True
