"""Page-by-page enumeration of Bitbucket list endpoints.

Every Bitbucket 2.0 list endpoint answers with a page object::

    {"values": [...], "next": "https://api.bitbucket.org/2.0/...?page=2"}

A page without ``next`` is the last one. Pages are fetched lazily, one
round trip at a time, and only when the items already received have all
been consumed.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .client import RemoteError, api_request

T = TypeVar("T")

RequestFunc = Callable[..., Any]

logger = logging.getLogger("bb_utils.pagination")


@dataclass
class Page:
    """One response of a paginated endpoint."""

    values: list[Any] = field(default_factory=list)
    next: str | None = None
    pagelen: int | None = None
    size: int | None = None
    page: int | None = None

    @property
    def is_last(self) -> bool:
        """True when there is no page after this one."""
        return self.next is None


class CancellationToken:
    """Cooperative cancellation signal for streaming enumerations.

    Can be triggered from any thread. The stream only notices it at its next
    check point, so an in-flight request is never interrupted.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation; streams stop at their next check point."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._event.is_set()


def fetch_page(
    url: str,
    params: dict[str, Any] | None = None,
    *,
    request: RequestFunc = api_request,
    parse: Callable[[dict[str, Any]], Any] | None = None,
) -> Page:
    """Fetch a single page.

    Args:
        url: Fully resolved endpoint URL or API path.
        params: Query parameters for this request.
        request: HTTP layer, called as ``request("GET", url, params=params)``.
        parse: Optional converter applied to each raw item.

    Returns:
        The page, with ``next`` copied verbatim from the response.

    Raises:
        RemoteError: If the response is not a page object.
    """
    body = request("GET", url, params=params) or {}
    if not isinstance(body, dict) or not isinstance(body.get("values") or [], list):
        raise RemoteError("Malformed page response", 200, str(body))
    raw_values = body.get("values") or []
    values = [parse(v) for v in raw_values] if parse else list(raw_values)
    page = Page(
        values=values,
        next=body.get("next") or None,
        pagelen=body.get("pagelen"),
        size=body.get("size"),
        page=body.get("page"),
    )
    logger.debug(
        "Fetched %d items from %s (next page: %s)",
        len(values),
        url,
        "yes" if page.next else "no",
    )
    return page


def paginate(
    url: str,
    params: dict[str, Any] | None = None,
    *,
    request: RequestFunc = api_request,
    parse: Callable[[dict[str, Any]], Any] | None = None,
) -> Iterator[Any]:
    """Lazily yield every item of a paginated endpoint.

    Nothing is fetched until the first item is requested. The query
    parameters are only sent with the first request; ``next`` links already
    carry them. Empty pages that still have a ``next`` link are skipped over
    rather than ending the enumeration.
    """
    next_url: str | None = url
    next_params = params
    while next_url is not None:
        page = fetch_page(next_url, next_params, request=request, parse=parse)
        yield from page.values
        next_url, next_params = page.next, None


def paginate_cancellable(
    url: str,
    params: dict[str, Any] | None = None,
    token: CancellationToken | None = None,
    *,
    request: RequestFunc = api_request,
    parse: Callable[[dict[str, Any]], Any] | None = None,
) -> Iterator[Any]:
    """Like :func:`paginate`, but stops quietly once ``token`` is cancelled.

    The token is checked before every page request and before every yielded
    item. Cancellation ends the iteration without raising.
    """
    if token is None:
        token = CancellationToken()
    next_url: str | None = url
    next_params = params
    while next_url is not None:
        if token.is_cancelled:
            logger.info("Enumeration of %s cancelled before fetching", next_url)
            return
        page = fetch_page(next_url, next_params, request=request, parse=parse)
        for item in page.values:
            if token.is_cancelled:
                logger.info("Enumeration of %s cancelled", next_url)
                return
            yield item
        next_url, next_params = page.next, None


def collect(items: Iterable[T]) -> list[T]:
    """Drain a lazy enumeration into a list, keeping server order."""
    return list(items)
