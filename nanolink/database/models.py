"""Data models for the link store."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class ShortLink:
    """A stored mapping from a short code to its original URL."""

    short_code: str
    original_url: str
    created_at: datetime = field(default_factory=utcnow)
    visits: int = 0
    id: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "original_url": self.original_url,
            "short_code": self.short_code,
            "visits": self.visits,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_record(cls, record) -> "ShortLink":
        """Build from a database row (asyncpg ``Record`` or any mapping)."""
        created_at = record["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=record["id"],
            short_code=record["short_code"],
            original_url=record["original_url"],
            visits=record["visits"],
            created_at=created_at,
        )


@dataclass
class Stats:
    """Aggregate figures over all stored links."""

    total_urls: int = 0
    total_visits: int = 0
    last_created: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "total_urls": self.total_urls,
            "total_visits": self.total_visits,
            "last_created": self.last_created.isoformat() if self.last_created else None,
        }
