"""
RestMock pytest Plugin

Provides the ``rest_mock`` fixture: a RestMockSession set up for the
current test and torn down after it.
"""

import pytest

from .config import MockConfig
from .testing import RestMockSession


@pytest.fixture
def rest_mock(request):
    """Response store session owned by the requesting test."""
    session = RestMockSession(test_id=request.node.name, config=MockConfig.from_env())
    session.set_up()

    yield session

    session.tear_down()
