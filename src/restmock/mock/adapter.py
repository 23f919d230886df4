"""
RestMock requests Adapter

Transport adapter that lets code built on ``requests.Session`` talk to a
MockTransport instead of the network.
"""

import json
import logging
from http import HTTPStatus
from typing import Dict, Any, Optional

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from .transport import MockTransport

logger = logging.getLogger("restmock.mock")

INVALID_CODE_STATUS = 500


class MockTransportAdapter(BaseAdapter):
    """
    requests adapter answering every request from a MockTransport.

    Example:
        session = requests.Session()
        mount_mock_transport(session, MockTransport(store))
        resp = session.get('https://api.example.com/users/1')
    """

    def __init__(self, transport: MockTransport):
        super().__init__()
        self.transport = transport

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        """Resolve a prepared request against the mock transport."""
        mocked = self.transport.request({
            'method': request.method,
            'url': request.url,
            'headers': dict(request.headers),
            'body': request.body,
        })
        return self.build_response(request, mocked)

    def build_response(self, request, mocked: Dict[str, Any]) -> requests.Response:
        """Convert a mocked response dict into a requests.Response."""
        response = requests.Response()
        response.status_code = _status_code(mocked.get('code', 200))
        response.reason = _reason(response.status_code)
        response.headers = CaseInsensitiveDict(mocked.get('headers') or {})
        response._content = _encode_body(mocked.get('data'))
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        response.connection = self
        return response

    def close(self):
        pass


def _status_code(code: Any) -> int:
    """Coerce a payload code; non-numeric codes become a 500 response."""
    try:
        return int(code)
    except (TypeError, ValueError):
        logger.warning(f"Mocked response has non-numeric code {code!r}, answering {INVALID_CODE_STATUS}")
        return INVALID_CODE_STATUS


def _reason(status_code: int) -> Optional[str]:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return None


def _encode_body(data: Any) -> bytes:
    if data is None:
        return b''
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode('utf-8')
    return json.dumps(data).encode('utf-8')


def mount_mock_transport(
    session: requests.Session,
    transport: MockTransport,
    prefixes: tuple = ('http://', 'https://')
) -> MockTransportAdapter:
    """Mount a MockTransportAdapter on a session for the given URL prefixes."""
    adapter = MockTransportAdapter(transport)
    for prefix in prefixes:
        session.mount(prefix, adapter)
    return adapter
