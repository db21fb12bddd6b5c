"""Query parameter objects for list and enumerate calls."""

from dataclasses import dataclass
from typing import Any

PULL_REQUEST_STATES = ("OPEN", "MERGED", "DECLINED", "SUPERSEDED")


@dataclass(frozen=True)
class ListParameters:
    """Parameters for eager list calls.

    Attributes:
        max: Maximum number of items to return. 0 returns all items.
        filter: Bitbucket query language expression, sent as ``q``.
        sort: Field to sort by, prefixed with '-' for descending order.
    """

    max: int = 0
    filter: str | None = None
    sort: str | None = None

    def to_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {}
        if self.filter:
            query["q"] = self.filter
        if self.sort:
            query["sort"] = self.sort
        return query


@dataclass(frozen=True)
class ListPullRequestsParameters(ListParameters):
    """List parameters with a pull request state filter.

    An empty ``states`` lets the server apply its default (open only).
    """

    states: tuple[str, ...] = ()

    def to_query(self) -> dict[str, Any]:
        query = super().to_query()
        if self.states:
            query["state"] = list(self.states)
        return query


@dataclass(frozen=True)
class EnumerateParameters:
    """Parameters for lazy enumerate calls.

    Attributes:
        page_len: Size of each page. None uses the server default.
        filter: Bitbucket query language expression, sent as ``q``.
        sort: Field to sort by, prefixed with '-' for descending order.
    """

    page_len: int | None = None
    filter: str | None = None
    sort: str | None = None

    def to_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {}
        if self.filter:
            query["q"] = self.filter
        if self.sort:
            query["sort"] = self.sort
        if self.page_len:
            query["pagelen"] = self.page_len
        return query


@dataclass(frozen=True)
class EnumeratePullRequestsParameters(EnumerateParameters):
    """Enumerate parameters with a pull request state filter."""

    states: tuple[str, ...] = ()

    def to_query(self) -> dict[str, Any]:
        query = super().to_query()
        if self.states:
            query["state"] = list(self.states)
        return query
