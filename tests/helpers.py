"""
Shared test doubles for the request layer.
"""

from bb_utils import RemoteError


class FakeRequest:
    """Stand-in for api_request that serves canned responses.

    Responses are looked up by (method, url). A value that is an exception
    instance is raised instead of returned.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, method, url, params=None, json=None):
        self.calls.append((method, url, params, json))
        key = (method, url)
        if key not in self.responses:
            raise RemoteError("Not Found", 404, "")
        response = self.responses[key]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self):
        return len(self.calls)

    @property
    def urls(self):
        return [url for _, url, _, _ in self.calls]


def make_page(values, next_url=None):
    page = {"pagelen": 10, "values": values}
    if next_url:
        page["next"] = next_url
    return page
