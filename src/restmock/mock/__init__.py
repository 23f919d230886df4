"""
RestMock Mock Module

Mock HTTP transport serving responses registered by tests.

This module provides:
- MockTransport resolving requests against the object store
- 404 fallback responses for unmatched requests
- requests adapter for sessions used by the system under test
"""

from .transport import MockTransport, not_found_response, NOT_FOUND_MESSAGE
from .adapter import MockTransportAdapter, mount_mock_transport

__all__ = [
    # Transport
    'MockTransport',
    'not_found_response',
    'NOT_FOUND_MESSAGE',

    # requests integration
    'MockTransportAdapter',
    'mount_mock_transport',
]
