"""Bitbucket utilities for working with pull requests."""

from .client import (
    BitbucketAPIError,
    InvalidArgumentError,
    RateLimitError,
    RemoteError,
    TransportError,
    api_get,
    api_request,
    get_token,
)
from .models import (
    Activity,
    BranchReference,
    Comment,
    Commit,
    Participant,
    PullRequest,
)
from .pagination import (
    CancellationToken,
    Page,
    collect,
    fetch_page,
    paginate,
    paginate_cancellable,
)
from .parameters import (
    PULL_REQUEST_STATES,
    EnumerateParameters,
    EnumeratePullRequestsParameters,
    ListParameters,
    ListPullRequestsParameters,
)
from .pr import PullRequestResource, PullRequestsResource

__all__ = [
    # Client
    "BitbucketAPIError",
    "InvalidArgumentError",
    "RateLimitError",
    "RemoteError",
    "TransportError",
    "api_get",
    "api_request",
    "get_token",
    # Pagination
    "CancellationToken",
    "Page",
    "collect",
    "fetch_page",
    "paginate",
    "paginate_cancellable",
    # Parameters
    "PULL_REQUEST_STATES",
    "EnumerateParameters",
    "EnumeratePullRequestsParameters",
    "ListParameters",
    "ListPullRequestsParameters",
    # Models
    "Activity",
    "BranchReference",
    "Comment",
    "Commit",
    "Participant",
    "PullRequest",
    # Resources
    "PullRequestsResource",
    "PullRequestResource",
]
