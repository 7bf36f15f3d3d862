"""Pagination utilities for GitHub API.

Two styles are supported by the same page walker:

- GraphQL connections carry ``pageInfo { hasNextPage endCursor }``; the
  cursor is passed back as ``after``.
- REST endpoints carry a ``Link`` header; the cursor is the ``rel="next"``
  URL, fetched verbatim.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One fetched page of a paginated collection."""

    items: list[T]
    next_cursor: Optional[str] = None
    has_more: bool = False

    @classmethod
    def from_connection(
        cls,
        connection: dict[str, Any],
        parse: Callable[[dict[str, Any]], T],
    ) -> "Page[T]":
        """Create from a GraphQL connection with ``pageInfo`` and ``edges``."""
        info = connection["pageInfo"]
        items = [parse(edge["node"]) for edge in connection["edges"]]
        return cls(
            items=items,
            next_cursor=info.get("endCursor"),
            has_more=bool(info.get("hasNextPage")),
        )


async def paginate(
    fetch: Callable[[Optional[str]], Awaitable[Page[T]]],
    *,
    stop_early: Optional[Callable[[T], bool]] = None,
    max_pages: Optional[int] = None,
    on_page: Optional[Callable[[], None]] = None,
) -> list[T]:
    """Fetch every page of a collection and concatenate the items in order.

    Args:
        fetch: Fetches the page after the given cursor (``None`` for the first)
        stop_early: Checked against the last item of each page; when it
            returns True no further page is requested
        max_pages: Page budget for unbounded collections (None for no limit)
        on_page: Called once after every fetched page

    Returns:
        All items of all fetched pages, page 1's items first

    Raises:
        Whatever ``fetch`` raises. Nothing partial is returned.
    """
    items: list[T] = []
    cursor: Optional[str] = None
    page_number = 0

    while True:
        page = await fetch(cursor)
        page_number += 1
        items.extend(page.items)

        if on_page:
            on_page()

        if not page.has_more or not page.next_cursor:
            break

        if stop_early and page.items and stop_early(page.items[-1]):
            logger.debug("Stopping early after page %d", page_number)
            break

        if max_pages is not None and page_number >= max_pages:
            logger.debug("Page budget of %d reached", max_pages)
            break

        cursor = page.next_cursor

    return items


def parse_link_header(link_header: Optional[str]) -> dict[str, str]:
    """Parse GitHub's Link header into a dictionary of rel -> url.

    Example Link header:
    <https://api.github.com/users/octocat/repos?page=2>; rel="next",
    <https://api.github.com/users/octocat/repos?page=5>; rel="last"

    Returns:
        dict: {"next": "url", "last": "url", "prev": "url", "first": "url"}
    """
    if not link_header:
        return {}

    links = {}
    pattern = r'<([^>]+)>;\s*rel="([^"]+)"'

    for match in re.finditer(pattern, link_header):
        url, rel = match.groups()
        links[rel] = url

    return links


def get_next_page_url(link_header: Optional[str]) -> Optional[str]:
    """Extract the 'next' page URL from a Link header."""
    links = parse_link_header(link_header)
    return links.get("next")
