"""
Unit tests for payload records and query parameter objects.
"""

import dataclasses

import pytest

from bb_utils import (
    PULL_REQUEST_STATES,
    Activity,
    BranchReference,
    EnumerateParameters,
    EnumeratePullRequestsParameters,
    ListParameters,
    ListPullRequestsParameters,
    PullRequest,
)


class TestPullRequest:

    def test_from_dict(self):
        data = {
            "id": 3,
            "title": "Fix bug",
            "state": "OPEN",
            "source": {
                "branch": {"name": "fix"},
                "repository": {"full_name": "me/fork"},
                "commit": {"hash": "123abc"},
            },
            "destination": {"branch": {"name": "main"}},
            "reviewers": [{"uuid": "{u1}", "display_name": "Reviewer"}],
            "links": {"html": {"href": "https://bitbucket.org/..."}},
        }

        pr = PullRequest.from_dict(data)

        assert pr.id == 3
        assert pr.source == BranchReference(branch="fix", repository="me/fork", commit="123abc")
        assert pr.destination.branch == "main"
        assert pr.raw["links"]["html"]["href"].startswith("https://")

    def test_to_dict_keeps_reviewers_by_uuid(self):
        pr = PullRequest(
            title="t",
            description="d",
            source=BranchReference(branch="fix", repository="me/fork"),
            reviewers=[{"uuid": "{u1}", "display_name": "Reviewer"}, {"account_id": "557058:1"}],
            close_source_branch=True,
        )

        body = pr.to_dict()

        assert body == {
            "title": "t",
            "description": "d",
            "source": {"branch": {"name": "fix"}, "repository": {"full_name": "me/fork"}},
            "reviewers": [{"uuid": "{u1}"}, {"account_id": "557058:1"}],
            "close_source_branch": True,
        }


class TestActivity:

    @pytest.mark.parametrize("kind", ["approval", "comment", "update", "changes_request"])
    def test_kind_detection(self, kind):
        activity = Activity.from_dict({"pull_request": {"id": 1}, kind: {"date": "2024-01-01"}})

        assert activity.kind == kind
        assert activity.payload == {"date": "2024-01-01"}

    def test_unknown_kind(self):
        activity = Activity.from_dict({"pull_request": {"id": 1}, "something_new": {}})

        assert activity.kind is None
        assert activity.payload is None

    def test_is_immutable(self):
        activity = Activity.from_dict({"pull_request": {"id": 1}, "comment": {}})

        with pytest.raises(dataclasses.FrozenInstanceError):
            activity.kind = "approval"


class TestParameters:

    def test_defaults_render_empty_query(self):
        assert ListParameters().to_query() == {}
        assert ListPullRequestsParameters().to_query() == {}
        assert EnumerateParameters().to_query() == {}
        assert EnumeratePullRequestsParameters().to_query() == {}

    def test_enumerate_query(self):
        parameters = EnumeratePullRequestsParameters(
            page_len=50, filter='state="OPEN"', sort="id", states=PULL_REQUEST_STATES
        )

        assert parameters.to_query() == {
            "q": 'state="OPEN"',
            "sort": "id",
            "pagelen": 50,
            "state": ["OPEN", "MERGED", "DECLINED", "SUPERSEDED"],
        }

    def test_max_is_not_sent(self):
        assert "max" not in ListPullRequestsParameters(max=5).to_query()

    def test_parameters_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ListPullRequestsParameters().max = 3
