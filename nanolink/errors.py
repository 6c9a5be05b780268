"""Error hierarchy for the link shortener core.

Every failure leaving the core is a ``ShortLinkError`` carrying an
``ErrorKind`` so the HTTP layer and the CLI can pick a response without
parsing message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a core failure."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DATABASE = "database"
    INTERNAL = "internal"


class ShortLinkError(Exception):
    """Base exception for all core errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def is_client_error(self) -> bool:
        """True for expected, caller-facing outcomes (never logged as server errors)."""
        return self.kind in (ErrorKind.VALIDATION, ErrorKind.NOT_FOUND)


class ValidationError(ShortLinkError, ValueError):
    """Bad input: malformed URL, malformed custom code, code already taken."""

    kind = ErrorKind.VALIDATION


class CodeInUseError(ValidationError):
    """The requested short code is already taken.

    Raised both by the pre-insert existence check and by the store when its
    unique constraint rejects an insert. The caller may retry.
    """

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or f"Short code '{code}' is already in use")
        self.code = code


class NotFoundError(ShortLinkError):
    """No mapping exists for the requested code."""

    kind = ErrorKind.NOT_FOUND


class DatabaseError(ShortLinkError):
    """Storage failure, including timeouts."""

    kind = ErrorKind.DATABASE

    def __init__(self, message: str = "Database error occurred", operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class InternalError(ShortLinkError):
    """Unexpected failure, e.g. the random source could not be read."""

    kind = ErrorKind.INTERNAL
