"""Error taxonomy for the catalog client and the state machines that drive it."""

from __future__ import annotations
from typing import Optional


class CatalogClientError(Exception):
    """Base exception for everything the explorer reports to the user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransportError(CatalogClientError):
    """Network failure, non-2xx status, or an unreadable response body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CatalogError(CatalogClientError):
    """The catalog answered but flagged a logical failure (e.g. "Movie not found!")."""

    pass


class ValidationError(CatalogClientError):
    """A request was built from input that must never reach the catalog."""

    pass


class ConfigurationError(CatalogClientError):
    """Required configuration is missing."""

    pass
