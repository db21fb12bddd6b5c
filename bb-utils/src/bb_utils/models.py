"""Typed records for Bitbucket pull request payloads.

Records keep the full JSON object in ``raw`` so fields not modelled here are
still reachable.
"""

from dataclasses import dataclass, field
from typing import Any

# Keys of an activity entry that describe the action, in lookup order.
ACTIVITY_KINDS = ("approval", "comment", "update", "changes_request")


def _user_ref(user: dict[str, Any] | None) -> dict[str, Any] | None:
    """Reduce a user object to the keys Bitbucket accepts in write bodies."""
    if not user:
        return None
    if user.get("uuid"):
        return {"uuid": user["uuid"]}
    if user.get("account_id"):
        return {"account_id": user["account_id"]}
    return dict(user)


@dataclass
class BranchReference:
    """Source or destination side of a pull request."""

    branch: str | None = None
    repository: str | None = None
    commit: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "BranchReference":
        data = data or {}
        return cls(
            branch=(data.get("branch") or {}).get("name"),
            repository=(data.get("repository") or {}).get("full_name"),
            commit=(data.get("commit") or {}).get("hash"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.branch:
            result["branch"] = {"name": self.branch}
        if self.repository:
            result["repository"] = {"full_name": self.repository}
        if self.commit:
            result["commit"] = {"hash": self.commit}
        return result


@dataclass
class PullRequest:
    """A pull request."""

    id: int | None = None
    title: str = ""
    description: str = ""
    state: str | None = None
    source: BranchReference = field(default_factory=BranchReference)
    destination: BranchReference | None = None
    reviewers: list[dict[str, Any]] = field(default_factory=list)
    author: dict[str, Any] | None = None
    close_source_branch: bool | None = None
    created_on: str | None = None
    updated_on: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullRequest":
        destination = data.get("destination")
        return cls(
            id=data.get("id"),
            title=data.get("title", ""),
            description=data.get("description", ""),
            state=data.get("state"),
            source=BranchReference.from_dict(data.get("source")),
            destination=BranchReference.from_dict(destination) if destination else None,
            reviewers=list(data.get("reviewers") or []),
            author=data.get("author"),
            close_source_branch=data.get("close_source_branch"),
            created_on=data.get("created_on"),
            updated_on=data.get("updated_on"),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        """Build the request body used to create or update this pull request.

        Updates replace the whole pull request, so every writable field is
        sent; reviewers omitted here are dropped by the server.
        """
        body: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "source": self.source.to_dict(),
            "reviewers": [ref for ref in map(_user_ref, self.reviewers) if ref],
        }
        if self.destination is not None:
            body["destination"] = self.destination.to_dict()
        if self.close_source_branch is not None:
            body["close_source_branch"] = self.close_source_branch
        return body


@dataclass(frozen=True)
class Activity:
    """An entry of a pull request activity log."""

    pull_request_id: int | None
    pull_request_title: str | None
    kind: str | None
    payload: dict[str, Any] | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Activity":
        pull_request = data.get("pull_request") or {}
        kind = next((k for k in ACTIVITY_KINDS if k in data), None)
        return cls(
            pull_request_id=pull_request.get("id"),
            pull_request_title=pull_request.get("title"),
            kind=kind,
            payload=data.get(kind) if kind else None,
            raw=data,
        )


@dataclass(frozen=True)
class Commit:
    hash: str
    message: str = ""
    date: str | None = None
    author: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Commit":
        return cls(
            hash=data.get("hash", ""),
            message=data.get("message", ""),
            date=data.get("date"),
            author=(data.get("author") or {}).get("raw"),
            raw=data,
        )


@dataclass(frozen=True)
class Comment:
    id: int | None
    content: str = ""
    user: str | None = None
    created_on: str | None = None
    inline_path: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            id=data.get("id"),
            content=(data.get("content") or {}).get("raw", ""),
            user=(data.get("user") or {}).get("display_name"),
            created_on=data.get("created_on"),
            inline_path=(data.get("inline") or {}).get("path"),
            raw=data,
        )


@dataclass(frozen=True)
class Participant:
    """A user's participation in a pull request, as returned by approve."""

    user: str | None
    role: str | None = None
    approved: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Participant":
        return cls(
            user=(data.get("user") or {}).get("display_name"),
            role=data.get("role"),
            approved=bool(data.get("approved")),
            raw=data,
        )
