"""Exception types surfaced by Hustle services."""

from __future__ import annotations


class HustleError(Exception):
    """Base class for application errors carrying a user-facing message."""

    def __init__(self, message: str = "Operation failed") -> None:
        super().__init__(message)
        self.message = message


class StoreError(HustleError):
    """A call against the record store failed."""


class AuthError(HustleError):
    """Credentials or session token were rejected."""


class NotFoundError(HustleError):
    """The requested record does not exist for the current user."""


class FutureDateError(HustleError, ValueError):
    """A day or month strictly after today was targeted."""


__all__ = ["AuthError", "FutureDateError", "HustleError", "NotFoundError", "StoreError"]
