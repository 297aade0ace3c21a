"""Marker-based paging over OpenStack collection resources.

A collection GET returns one page of items plus, when more remain, a "next"
link whose `marker` query parameter names where the following page starts.
`paged()` performs the first request and hands back a `PagedSequence`, which
pulls further pages through a `PageFetcher` only as the caller iterates.

Only a missing marker ends a listing; an empty page that still carries a
marker is followed. A 404 on any page request counts as an empty collection.
There is no guard against a server that keeps returning the same marker.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import httpx

from osclient.errors import MalformedPageError, MalformedResponseError, ResourceNotFoundError
from osclient.models import Link, links_from_json


log = logging.getLogger(__name__)

T = TypeVar("T")
O = TypeVar("O", bound="SupportsMarker")


class SupportsMarker(Protocol):
    def with_marker(self, marker: str) -> Any: ...


@dataclass(frozen=True)
class Page(Generic[T]):
    items: tuple[T, ...]
    marker: str | None = None
    links: tuple[Link, ...] = ()

    def __post_init__(self) -> None:
        if self.marker is not None and not self.marker:
            raise MalformedPageError("Page marker must be non-empty when present")

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    @property
    def is_last(self) -> bool:
        return self.marker is None

    @classmethod
    def empty(cls) -> "Page[T]":
        return cls(items=())


def marker_from_links(links: Iterable[Link], *, param: str = "marker") -> str | None:
    """Return the marker carried by the `rel="next"` link, or None when there is no next link."""
    for link in links:
        if link.rel != "next":
            continue
        marker = httpx.URL(link.href).params.get(param)
        if not marker:
            raise MalformedPageError(f"Next link has no {param!r} parameter: {link.href}")
        return marker
    return None


def decode_page(
    body: Any,
    *,
    items_key: str,
    item_decoder: Callable[[Any], T],
    marker_param: str = "marker",
) -> Page[T]:
    if not isinstance(body, dict):
        raise MalformedPageError(f"Expected a JSON object for {items_key!r}, got {type(body).__name__}")
    raw_items = body.get(items_key)
    if not isinstance(raw_items, list):
        raise MalformedPageError(f"Response has no {items_key!r} array")

    links = list(links_from_json(body.get(f"{items_key}_links")))
    # Glance v2 puts the next page href at top level instead of in a links array.
    next_href = body.get("next")
    if isinstance(next_href, str) and next_href and not any(link.rel == "next" for link in links):
        links.append(Link(href=next_href, rel="next"))

    marker = marker_from_links(links, param=marker_param)
    try:
        items = tuple(item_decoder(item) for item in raw_items)
    except MalformedResponseError as e:
        raise MalformedPageError(f"Bad item in {items_key!r} page: {e}") from e
    return Page(items=items, marker=marker, links=tuple(links))


def fetch_or_empty(fetch: Callable[[O], Page[T]], options: O) -> Page[T]:
    """Run one page request; a missing collection reads as an empty one."""
    try:
        return fetch(options)
    except ResourceNotFoundError:
        log.info("PAGE_NOT_FOUND options=%s treating as empty", options)
        return Page.empty()


class PageFetcher(Generic[T, O]):
    """Fetches the page that starts at a given marker, using the listing's original filters."""

    def __init__(self, fetch: Callable[[O], Page[T]], options: O) -> None:
        self._fetch = fetch
        self._options = options

    def __call__(self, marker: str) -> Page[T]:
        log.debug("PAGE_FETCH marker=%s", marker)
        return fetch_or_empty(self._fetch, self._options.with_marker(marker))

    def __repr__(self) -> str:
        return f"PageFetcher(options={self._options!r})"


class SequenceState(enum.Enum):
    HOLDING_PAGE = "holding_page"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class PagedSequence(Generic[T]):
    """Forward-only iterator over every item of a paged collection.

    Seeded with the first page (already fetched by the list call). When the
    buffered page runs out and it carried a marker, the next page is fetched
    right then. A fetch error is raised once from the pull that triggered it;
    the sequence then stays FAILED and yields nothing more.
    """

    def __init__(self, first_page: Page[T], fetcher: Callable[[str], Page[T]]) -> None:
        self._buffer: deque[T] = deque(first_page.items)
        self._marker = first_page.marker
        self._fetcher = fetcher
        self._state = SequenceState.HOLDING_PAGE
        self.pages_fetched = 1

    @property
    def state(self) -> SequenceState:
        return self._state

    def __iter__(self) -> "PagedSequence[T]":
        return self

    def __next__(self) -> T:
        if not self._advance():
            raise StopIteration
        return self._buffer.popleft()

    def has_next(self) -> bool:
        return self._advance()

    def concat(self) -> list[T]:
        return list(self)

    def _advance(self) -> bool:
        """Make sure an item is buffered, fetching pages as needed. False once terminal."""
        while True:
            if self._state in (SequenceState.EXHAUSTED, SequenceState.FAILED):
                return False
            if self._buffer:
                return True
            if self._marker is None:
                self._state = SequenceState.EXHAUSTED
                log.debug("PAGED_EXHAUSTED pages=%d", self.pages_fetched)
                return False

            self._state = SequenceState.FETCHING
            try:
                page = self._fetcher(self._marker)
            except Exception:
                self._state = SequenceState.FAILED
                raise
            self.pages_fetched += 1
            self._buffer.extend(page.items)
            self._marker = page.marker
            self._state = SequenceState.HOLDING_PAGE


def paged(fetch: Callable[[O], Page[T]], options: O) -> PagedSequence[T]:
    """Fetch the first page now and return a sequence that fetches the rest lazily."""
    first = fetch_or_empty(fetch, options)
    return PagedSequence(first, PageFetcher(fetch, options))


def drain(sequence: Iterable[T]) -> list[T]:
    return list(sequence)
