# osclient - OpenStack/Rackspace REST clients with lazy marker-based paging

from osclient.config import Settings, configure_logging
from osclient.errors import (
    AuthorizationError,
    ConfigError,
    HttpResponseError,
    MalformedPageError,
    MalformedResponseError,
    OsClientError,
    ResourceNotFoundError,
    TransportError,
)
from osclient.pagination import Page, PagedSequence, PageFetcher, SequenceState, drain, paged

__version__ = "0.1.0"

__all__ = [
    "AuthorizationError",
    "ConfigError",
    "HttpResponseError",
    "MalformedPageError",
    "MalformedResponseError",
    "OsClientError",
    "Page",
    "PageFetcher",
    "PagedSequence",
    "ResourceNotFoundError",
    "SequenceState",
    "Settings",
    "TransportError",
    "configure_logging",
    "drain",
    "paged",
]
