"""Business logic service for nanolink."""

import logging
from typing import Dict, List, Optional

from .common.validators import is_valid_code, normalize_url
from .database.base import ShortLinkStoreBase
from .database.models import ShortLink, Stats, utcnow
from .errors import CodeInUseError, InternalError, NotFoundError, ValidationError
from .shortcode import ShortCodeGenerator

DEFAULT_RECENT_LIMIT = 10


class ShortLinkService:
    """Service layer for shortening and resolving links.

    Holds no state across calls beyond its collaborators; every read and
    write goes to the store.
    """

    def __init__(
        self,
        store: ShortLinkStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the service.

        Args:
            store: Link store, the authority for uniqueness and increments
            short_code_generator: Optional short code generator
            logger: Optional logger
        """
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)

    async def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
    ) -> ShortLink:
        """Create a short link, or return the existing one for this URL.

        The lookup by original URL is best effort: two concurrent first-time
        submissions of the same URL may both insert. Only code uniqueness is
        guaranteed, by the store.

        Args:
            original_url: The URL to shorten
            custom_code: Optional caller-chosen short code

        Returns:
            The new or existing link

        Raises:
            ValidationError: Bad URL or bad custom code
            CodeInUseError: The custom code is taken, or the insert lost a
                race for the same code (the caller may retry)
            DatabaseError: Storage failure
            InternalError: The random source failed
        """
        clean_url = normalize_url(original_url)

        if custom_code:
            if not is_valid_code(custom_code):
                raise ValidationError("Invalid custom code format")
            if await self.store.code_exists(custom_code):
                raise CodeInUseError(custom_code)
            short_code = custom_code
        else:
            try:
                short_code = self.generator.generate()
            except InternalError as e:
                self.logger.error(f"Short code generation failed: {e}")
                raise

        existing = await self.store.get_by_original_url(clean_url)
        if existing is not None:
            self.logger.debug(f"Reusing {existing.short_code} for {clean_url}")
            return existing

        link = ShortLink(
            short_code=short_code,
            original_url=clean_url,
            created_at=utcnow(),
        )

        try:
            link = await self.store.insert(link)
        except CodeInUseError:
            self.logger.info(f"Lost insert race for short code {short_code}")
            raise

        self.logger.info(f"Created short URL: {link.short_code} -> {link.original_url}")
        return link

    async def get_url(self, short_code: str) -> ShortLink:
        """Resolve a short code.

        Raises:
            ValidationError: Empty code
            NotFoundError: No link with this code
        """
        if not short_code:
            raise ValidationError("code cannot be empty")

        link = await self.store.get_by_code(short_code)
        if link is None:
            raise NotFoundError(f"Short code '{short_code}' not found")
        return link

    async def increment_visits(self, short_code: str) -> None:
        """Add one visit to a link.

        Raises:
            ValidationError: Empty code
            NotFoundError: No link with this code
        """
        if not short_code:
            raise ValidationError("code cannot be empty")

        if not await self.store.increment_visits(short_code):
            raise NotFoundError(f"Short code '{short_code}' not found")

    async def get_recent_urls(self, limit: Optional[int] = None) -> List[ShortLink]:
        """List the most recently created links, newest first.

        A missing or non-positive ``limit`` means 10.
        """
        if not limit or limit <= 0:
            limit = DEFAULT_RECENT_LIMIT
        return await self.store.list_recent(limit)

    async def get_stats(self) -> Stats:
        """Total links, total visits, and the latest creation time."""
        return await self.store.get_stats()

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check."""
        db_healthy = await self.store.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close the store."""
        await self.store.close()
