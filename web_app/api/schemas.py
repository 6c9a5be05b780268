"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL.

    Content checks (scheme, host, code format) happen in the service so
    that every rejection comes back as the same 400 error shape.
    """

    url: str = Field(..., description="The URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional custom short code (4-12 of A-Z a-z 0-9 _ -)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "custom_code": None
                },
                {
                    "url": "github.com/user/repo",
                    "custom_code": "myrepo"
                }
            ]
        }
    }


class ShortLinkSchema(BaseModel):
    """A stored short link."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    original_url: str
    short_code: str
    visits: int
    created_at: datetime


class URLResponse(BaseModel):
    """A short link with its fully-qualified short URL."""

    url: ShortLinkSchema
    short_url: str = Field(..., description="The complete short URL")


class RecentURLsResponse(BaseModel):
    """Most recently created links."""

    urls: List[URLResponse]


class StatisticsResponse(BaseModel):
    """Service-wide totals."""

    total_urls: int
    total_visits: int
    last_created: Optional[datetime] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
