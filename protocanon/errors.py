"""Error type raised by canonical JSON conversions."""

from __future__ import annotations


class CanonicalError(ValueError):
    """Raised when a value cannot be converted to or from canonical JSON."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message