"""
Pytest configuration and shared fixtures.
"""

import pytest

from tests.helpers import FakeRequest


@pytest.fixture
def fake_request():
    return FakeRequest()
