"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Optional

from .models import ShortLink, Stats


class ShortLinkStoreBase(ABC):
    """Contract every link store must satisfy.

    The store is the sole authority for code uniqueness and for atomic visit
    increments. Each operation is atomic on its own against the backing
    medium and is bounded by ``timeout`` seconds (the store default when
    ``None``). Storage failures and timeouts raise ``DatabaseError``.
    """

    async def initialize(self) -> None:
        """Prepare the backing medium (connect, create schema)."""

    @abstractmethod
    async def insert(self, link: ShortLink, timeout: Optional[float] = None) -> ShortLink:
        """Store a new mapping.

        Args:
            link: Mapping to store; ``id`` is ignored and assigned by the store

        Returns:
            The stored mapping with ``id`` populated

        Raises:
            CodeInUseError: If ``link.short_code`` is already stored
        """

    @abstractmethod
    async def get_by_code(self, short_code: str, timeout: Optional[float] = None) -> Optional[ShortLink]:
        """Get the mapping for a short code, or None."""

    @abstractmethod
    async def get_by_original_url(
        self, original_url: str, timeout: Optional[float] = None
    ) -> Optional[ShortLink]:
        """Get a mapping whose original URL matches exactly, or None."""

    @abstractmethod
    async def increment_visits(self, short_code: str, timeout: Optional[float] = None) -> bool:
        """Atomically add one to the visit counter.

        Returns:
            False if no mapping has this code
        """

    @abstractmethod
    async def list_recent(self, limit: int, timeout: Optional[float] = None) -> List[ShortLink]:
        """List at most ``limit`` mappings, newest first."""

    @abstractmethod
    async def get_stats(self, timeout: Optional[float] = None) -> Stats:
        """Get total count, visit sum and most recent creation time."""

    @abstractmethod
    async def code_exists(self, short_code: str, timeout: Optional[float] = None) -> bool:
        """Check whether a short code is stored."""

    @abstractmethod
    async def delete_older_than(self, max_age: timedelta, timeout: Optional[float] = None) -> int:
        """Delete mappings created more than ``max_age`` ago.

        Returns:
            Number of mappings removed

        Raises:
            ValidationError: If ``max_age`` is not positive
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check whether the backing medium answers."""

    @abstractmethod
    async def close(self) -> None:
        """Release all resources."""
