"""Marker-based incremental listing.

Container and object listings are paged by the service: every request
carries a ``limit`` and an exclusive ``marker`` (the name of the last
item already seen). This module drives that protocol for any listing,
either pull-style with :func:`iter_pages` or push-style with
:func:`incrementally_list`, where the callback's return value decides
whether to keep going.
"""

import logging
from typing import Any, Callable, Iterator, List, Optional, Sequence, TypeVar

T = TypeVar("T")

# Fetches one page given (marker, limit); marker is None on the first call
# unless the caller supplied one.
PageFetcher = Callable[[Optional[str], int], Sequence[T]]

logger = logging.getLogger(__name__)


def item_name(item: Any) -> str:
    """Return the ``name`` of a listing entry (model or mapping)."""
    if isinstance(item, dict):
        return item["name"]
    return item.name


def iter_pages(
    fetch_page: PageFetcher,
    limit: int,
    marker: Optional[str] = None,
) -> Iterator[List[T]]:
    """Yield listing pages until the listing is exhausted.

    A request is only issued when the consumer asks for the next page, so
    breaking out of the loop stops the listing. Iteration ends on an
    empty page or on a page shorter than ``limit``.

    :param fetch_page: Callable returning the page after ``marker``
    :param limit: Page size requested from the service
    :param marker: Optional name to start after
    :return: Iterator over non-empty pages
    """
    page_number = 0
    while True:
        page = list(fetch_page(marker, limit) or [])
        if not page:
            logger.debug("Listing exhausted after %d page(s)", page_number)
            return
        page_number += 1
        yield page
        marker = item_name(page[-1])
        if len(page) < limit:
            logger.debug("Short page (%d < %d), listing exhausted", len(page), limit)
            return


def incrementally_list(
    fetch_page: PageFetcher,
    callback: Callable[[List[T]], Any],
    limit: int,
    marker: Optional[str] = None,
) -> None:
    """Feed every listing page to ``callback``.

    The callback must return a truthy value to request the next page;
    a falsy return (including ``None``) stops the listing without
    issuing another request. Exceptions from the callback or from a page
    fetch propagate immediately.

    :param fetch_page: Callable returning the page after ``marker``
    :param callback: Called once per non-empty page
    :param limit: Page size requested from the service
    :param marker: Optional name to start after
    """
    for page in iter_pages(fetch_page, limit, marker):
        if not callback(page):
            logger.debug("Listing stopped by callback at marker %r", item_name(page[-1]))
            return
