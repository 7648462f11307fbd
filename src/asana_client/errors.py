from __future__ import annotations

from typing import Any, Dict, Optional


class AsanaClientError(Exception):
    """Base error for client failures."""


class AsanaConfigError(AsanaClientError):
    """Raised when the client cannot be constructed (e.g. no token)."""


class AsanaValidationError(AsanaClientError, ValueError):
    """Raised before any network activity when request fields are invalid."""


class AsanaTransportError(AsanaClientError):
    """Network/connection failure; no HTTP status was received."""


class AsanaHTTPError(AsanaClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.message = message
        self.response_json = response_json

    @property
    def code(self) -> int:
        return self.status_code


class AsanaParseError(AsanaClientError):
    pass


class AsanaModelValidationError(AsanaClientError):
    pass


__all__ = [
    "AsanaClientError",
    "AsanaConfigError",
    "AsanaValidationError",
    "AsanaTransportError",
    "AsanaHTTPError",
    "AsanaParseError",
    "AsanaModelValidationError",
]
