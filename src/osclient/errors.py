from __future__ import annotations


class OsClientError(Exception):
    """Base class for all client errors."""


class ConfigError(OsClientError):
    """Missing or inconsistent configuration (unknown zone, bad endpoint map)."""


class TransportError(OsClientError):
    """Network/IO failure before a response was received."""


class HttpResponseError(OsClientError):
    """The server answered with an error status."""

    def __init__(self, message: str, *, status_code: int, body: str = "", retry_after: float | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        # Seconds the server asked us to wait (429 Retry-After), if it said.
        self.retry_after = retry_after


class AuthorizationError(HttpResponseError):
    """401/403 from the server."""


class ResourceNotFoundError(HttpResponseError):
    """404 from the server."""


class MalformedResponseError(OsClientError):
    """A response body could not be decoded into the expected shape."""


class MalformedPageError(MalformedResponseError):
    """A collection page is missing its item array or carries an unusable marker."""
