"""GMError: base exception class for all daily-gm errors."""

from __future__ import annotations


class GMError(Exception):
    """Base error for all daily-gm operations.

    Attributes:
        message: Short human-readable description, safe to show to a user.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "gm-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
