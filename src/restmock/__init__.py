"""
RestMock

File-backed request/response mocking for integration tests.

A test registers "for a request matching these criteria, return this
response"; the system under test swaps its HTTP client for MockTransport
and gets the registered response back instead of a network call.
"""

from .config import MockConfig
from .settings import SharedSettings, resolve_store_path
from .storage import ObjectStore, StoredRecord, criteria_matches
from .mock import MockTransport, MockTransportAdapter, mount_mock_transport, not_found_response
from .testing import RestMockSession, RestTestCaseMixin

__all__ = [
    'MockConfig',
    'SharedSettings',
    'resolve_store_path',
    'ObjectStore',
    'StoredRecord',
    'criteria_matches',
    'MockTransport',
    'MockTransportAdapter',
    'mount_mock_transport',
    'not_found_response',
    'RestMockSession',
    'RestTestCaseMixin',
]

__version__ = '1.0.0'
