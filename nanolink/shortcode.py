"""Short code generation utilities."""

import base64
import math
import secrets
from typing import Optional

from .errors import InternalError


class ShortCodeGenerator:
    """Generate random, URL-safe short codes.

    Codes come from the operating system's cryptographically secure random
    source, encoded with the URL-safe base64 alphabet (``A-Z a-z 0-9 - _``)
    and truncated. Uniqueness is not guaranteed here; the store enforces it.
    """

    URL_SAFE_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"

    # Random bytes drawn per code, never fewer than this
    MIN_RANDOM_BYTES = 6

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code

        Raises:
            InternalError: If the random source cannot be read
        """
        length = length or self.default_length
        num_bytes = max(self.MIN_RANDOM_BYTES, math.ceil(length * 3 / 4))

        try:
            raw = secrets.token_bytes(num_bytes)
        except (OSError, NotImplementedError) as e:
            raise InternalError("failed to generate random bytes") from e

        return base64.urlsafe_b64encode(raw).decode("ascii")[:length]

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check that every character is from the URL-safe alphabet."""
        return bool(code) and all(c in ShortCodeGenerator.URL_SAFE_CHARS for c in code)
