"""Custom exceptions for Chromatask."""

from __future__ import annotations


class ChromataskError(Exception):
    """Base exception for all Chromatask errors."""


class ValidationError(ChromataskError):
    """Raised when user input is rejected before any remote call is made."""


class StoreError(ChromataskError):
    """Raised when a document store, object storage or key-value call fails."""


class NotFoundError(StoreError):
    """Raised when a record or task does not exist."""


class ImportDataError(ChromataskError):
    """Raised when an import file cannot be read or parsed."""


class AuthError(ChromataskError):
    """Raised when signing in or out fails.

    Attributes:
        category: Machine-readable failure category (see ``AUTH_ERROR_MESSAGES``)
    """

    def __init__(self, category: str, message: str | None = None):
        self.category = category
        super().__init__(message or AUTH_ERROR_MESSAGES.get(category, AUTH_ERROR_MESSAGES["unknown"]))


AUTH_ERROR_MESSAGES = {
    "cancelled": "Sign-in was cancelled.",
    "popup_blocked": "The sign-in prompt could not be opened. Check that your terminal is interactive.",
    "unauthorized_domain": "This endpoint is not authorized for sign-in. Check the context source URL.",
    "network": "Could not reach the authentication server. Check your connection and try again.",
    "invalid_credentials": "Invalid email or password.",
    "unknown": "Sign-in failed. Please try again.",
}
