"""Recipient input errors: both block submission before any remote call."""

from __future__ import annotations

from daily_gm.errors.gm_errors import GMError


class NameUnresolvedError(GMError):
    """A name could not be resolved to an address (or is still resolving)."""

    def __init__(self, message: str, *, name: str = "") -> None:
        super().__init__(message, status_code=404, code="name-unresolved")
        self.name = name


class InvalidInputFormatError(GMError):
    """Recipient input is neither a name nor a well-formed raw address."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=400, code="invalid-input-format")
