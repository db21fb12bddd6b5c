"""Pull request resources of a Bitbucket repository."""

import warnings
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .client import InvalidArgumentError, api_request
from .models import Activity, Comment, Commit, Participant, PullRequest
from .pagination import (
    CancellationToken,
    RequestFunc,
    collect,
    paginate,
    paginate_cancellable,
)
from .parameters import (
    EnumerateParameters,
    EnumeratePullRequestsParameters,
    ListParameters,
    ListPullRequestsParameters,
)


def _require(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None")


def _require_parameters(parameters: Any, expected: type) -> None:
    _require(parameters, "parameters")
    if not isinstance(parameters, expected):
        raise InvalidArgumentError(
            f"parameters must be {expected.__name__}, "
            f"got {type(parameters).__name__}"
        )


def _page_len_query(page_len: int | None) -> dict[str, Any]:
    return {"pagelen": page_len} if page_len else {}


def _truncate(items: list[Any], max: int) -> list[Any]:
    return items[:max] if max > 0 else items


class PullRequestsResource:
    """Manage the pull requests of one repository.

    The resource only remembers which repository it targets and which
    request function to use; every call is an independent request.

    Example:
        >>> prs = PullRequestsResource("team", "repo")
        >>> for pr in prs.enumerate_pull_requests():
        ...     print(pr.id, pr.title)
    """

    def __init__(
        self,
        account_name: str,
        repo_slug: str,
        request: RequestFunc = api_request,
    ):
        """Initialize the resource.

        Args:
            account_name: Workspace ID or user/team name owning the repository.
            repo_slug: Repository slug.
            request: HTTP layer used for every call; defaults to api_request.
        """
        self.account_name = account_name
        self.repo_slug = repo_slug
        self.request = request

    @property
    def base_path(self) -> str:
        return (
            f"/repositories/{quote(self.account_name, safe='{}')}"
            f"/{quote(self.repo_slug)}/pullrequests"
        )

    # --- Pagination helpers shared with PullRequestResource ---

    def _enumerate(
        self,
        path: str,
        query: dict[str, Any],
        parse: Callable[[dict[str, Any]], Any],
    ) -> Iterator[Any]:
        return paginate(path, query, request=self.request, parse=parse)

    def _stream(
        self,
        path: str,
        query: dict[str, Any],
        parse: Callable[[dict[str, Any]], Any],
        token: CancellationToken | None,
    ) -> Iterator[Any]:
        return paginate_cancellable(
            path, query, token, request=self.request, parse=parse
        )

    def _list(
        self,
        path: str,
        query: dict[str, Any],
        parse: Callable[[dict[str, Any]], Any],
        max: int,
    ) -> list[Any]:
        return _truncate(collect(self._enumerate(path, query, parse)), max)

    # --- Pull requests ---

    def list_pull_requests(
        self,
        parameters: ListParameters = ListPullRequestsParameters(),
    ) -> list[PullRequest]:
        """List pull requests on the repository.

        Args:
            parameters: Query parameters. The default lists open pull
                requests. Passing a plain ListParameters is deprecated.

        Returns:
            All matching pull requests, truncated to ``parameters.max``.
        """
        _require_parameters(parameters, ListParameters)
        if type(parameters) is ListParameters:
            warnings.warn(
                "Passing ListParameters is deprecated, "
                "use ListPullRequestsParameters instead",
                DeprecationWarning,
                stacklevel=2,
            )
        return self._list(
            self.base_path,
            parameters.to_query(),
            PullRequest.from_dict,
            parameters.max,
        )

    def enumerate_pull_requests(
        self,
        parameters: EnumeratePullRequestsParameters = EnumeratePullRequestsParameters(),
    ) -> Iterator[PullRequest]:
        """Lazily enumerate pull requests, one page request at a time."""
        _require_parameters(parameters, EnumerateParameters)
        return self._enumerate(
            self.base_path, parameters.to_query(), PullRequest.from_dict
        )

    def stream_pull_requests(
        self,
        parameters: EnumeratePullRequestsParameters = EnumeratePullRequestsParameters(),
        token: CancellationToken | None = None,
    ) -> Iterator[PullRequest]:
        """Enumerate pull requests page by page until ``token`` is cancelled."""
        _require_parameters(parameters, EnumerateParameters)
        return self._stream(
            self.base_path, parameters.to_query(), PullRequest.from_dict, token
        )

    def post_pull_request(self, pull_request: PullRequest) -> PullRequest:
        """Create a new pull request.

        The request URL is the destination repository, so a source
        repository must be set on ``pull_request.source`` to pull from a
        fork.
        """
        _require(pull_request, "pull_request")
        data = self.request("POST", self.base_path, json=pull_request.to_dict())
        return PullRequest.from_dict(data)

    def put_pull_request(self, pull_request: PullRequest) -> PullRequest:
        """Update an existing, open pull request.

        Apart from source and destination, every field must be supplied:
        the server drops values missing from the body (reviewers included).
        """
        _require(pull_request, "pull_request")
        _require(pull_request.id, "pull_request.id")
        data = self.request(
            "PUT",
            f"{self.base_path}/{pull_request.id}",
            json=pull_request.to_dict(),
        )
        return PullRequest.from_dict(data)

    # --- Activity log ---

    def get_pull_requests_activities(self, max: int = 0) -> list[Activity]:
        """Get the activity log of all the pull requests on the repository.

        Args:
            max: Maximum number of entries to return. 0 returns all entries.
        """
        return self._list(
            f"{self.base_path}/activity", {}, Activity.from_dict, max
        )

    def get_pull_request_log(self) -> list[Activity]:
        """Deprecated alias of :meth:`get_pull_requests_activities`."""
        warnings.warn(
            "get_pull_request_log is deprecated, "
            "use get_pull_requests_activities instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.get_pull_requests_activities()

    def enumerate_pull_requests_activities(
        self, page_len: int | None = None
    ) -> Iterator[Activity]:
        """Lazily enumerate the activity log of all pull requests.

        Args:
            page_len: Size of each page. None uses the server default.

        Returns:
            Iterator of activities, fetching one page at a time.
        """
        return self._enumerate(
            f"{self.base_path}/activity",
            _page_len_query(page_len),
            Activity.from_dict,
        )

    def stream_pull_requests_activities(
        self,
        page_len: int | None = None,
        token: CancellationToken | None = None,
    ) -> Iterator[Activity]:
        """Enumerate the activity log of all pull requests until cancelled.

        Args:
            page_len: Size of each page. None uses the server default.
            token: Cancellation token checked before each page and item.

        Returns:
            Iterator of activities that stops quietly once cancelled.
        """
        return self._stream(
            f"{self.base_path}/activity",
            _page_len_query(page_len),
            Activity.from_dict,
            token,
        )

    # --- Single pull request ---

    def pull_request_resource(self, pull_request_id: int) -> "PullRequestResource":
        """Get a resource bound to one pull request.

        Bitbucket has no such resource; this is a client-side view that
        reuses this resource's request function.
        """
        _require(pull_request_id, "pull_request_id")
        return PullRequestResource(
            self.account_name, self.repo_slug, pull_request_id, self
        )


@dataclass(frozen=True)
class PullRequestResource:
    """Operations on a single pull request."""

    account_name: str
    repo_slug: str
    pull_request_id: int
    pull_requests: PullRequestsResource

    @property
    def path(self) -> str:
        """API path of this pull request."""
        return f"{self.pull_requests.base_path}/{self.pull_request_id}"

    def get_pull_request(self) -> PullRequest:
        """Get the pull request itself."""
        return PullRequest.from_dict(self.pull_requests.request("GET", self.path))

    def list_activities(self, max: int = 0) -> list[Activity]:
        """List the activity log of this pull request.

        Args:
            max: Maximum number of entries to return. 0 returns all entries.
        """
        return self.pull_requests._list(
            f"{self.path}/activity", {}, Activity.from_dict, max
        )

    def enumerate_activities(self, page_len: int | None = None) -> Iterator[Activity]:
        """Lazily enumerate the activity log of this pull request."""
        return self.pull_requests._enumerate(
            f"{self.path}/activity", _page_len_query(page_len), Activity.from_dict
        )

    def stream_activities(
        self,
        page_len: int | None = None,
        token: CancellationToken | None = None,
    ) -> Iterator[Activity]:
        """Enumerate the activity log of this pull request until cancelled.

        Args:
            page_len: Size of each page. None uses the server default.
            token: Cancellation token checked before each page and item.
        """
        return self.pull_requests._stream(
            f"{self.path}/activity",
            _page_len_query(page_len),
            Activity.from_dict,
            token,
        )

    def list_commits(self, max: int = 0) -> list[Commit]:
        """List the commits of this pull request.

        Args:
            max: Maximum number of commits to return. 0 returns all commits.
        """
        return self.pull_requests._list(
            f"{self.path}/commits", {}, Commit.from_dict, max
        )

    def enumerate_commits(self, page_len: int | None = None) -> Iterator[Commit]:
        """Lazily enumerate the commits of this pull request."""
        return self.pull_requests._enumerate(
            f"{self.path}/commits", _page_len_query(page_len), Commit.from_dict
        )

    def list_comments(self, max: int = 0) -> list[Comment]:
        """List the comments on this pull request.

        Args:
            max: Maximum number of comments to return. 0 returns all comments.
        """
        return self.pull_requests._list(
            f"{self.path}/comments", {}, Comment.from_dict, max
        )

    def enumerate_comments(self, page_len: int | None = None) -> Iterator[Comment]:
        """Lazily enumerate the comments on this pull request."""
        return self.pull_requests._enumerate(
            f"{self.path}/comments", _page_len_query(page_len), Comment.from_dict
        )

    def approve(self) -> Participant:
        """Approve the pull request as the authenticated user.

        Returns:
            The authenticated user's participant entry.
        """
        data = self.pull_requests.request("POST", f"{self.path}/approve")
        return Participant.from_dict(data)

    def remove_approval(self) -> None:
        """Withdraw the authenticated user's approval."""
        self.pull_requests.request("DELETE", f"{self.path}/approve")

    def decline(self) -> PullRequest:
        """Decline the pull request."""
        data = self.pull_requests.request("POST", f"{self.path}/decline")
        return PullRequest.from_dict(data)

    def merge(
        self,
        message: str | None = None,
        close_source_branch: bool | None = None,
        merge_strategy: str | None = None,
    ) -> PullRequest:
        """Merge the pull request.

        Args:
            message: Commit message for the merge commit.
            close_source_branch: Delete the source branch after merging.
            merge_strategy: 'merge_commit', 'squash' or 'fast_forward'.

        Returns:
            The merged pull request.
        """
        body: dict[str, Any] = {}
        if message is not None:
            body["message"] = message
        if close_source_branch is not None:
            body["close_source_branch"] = close_source_branch
        if merge_strategy is not None:
            body["merge_strategy"] = merge_strategy
        data = self.pull_requests.request("POST", f"{self.path}/merge", json=body)
        return PullRequest.from_dict(data)

    def get_diff(self) -> str:
        """Get the diff of the pull request as text."""
        return self.pull_requests.request("GET", f"{self.path}/diff")

    def get_patch(self) -> str:
        """Get the pull request as a git patch series."""
        return self.pull_requests.request("GET", f"{self.path}/patch")
