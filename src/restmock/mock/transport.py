"""
RestMock Mock Transport

Stand-in for a real HTTP client: resolves an outgoing request to a response
registered in the object store instead of going to the network.

Features:
- Search criteria derived from the request (url and method by default)
- Matched responses returned without their criteria
- 404 fallback naming the unmatched URL and method
- Store identity injected, or re-read from the handshake on every request
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union, Sequence

from ..common import to_mapping
from ..config import MockConfig
from ..settings import SharedSettings, resolve_store_path
from ..storage import ObjectStore, StoredRecord

NOT_FOUND_MESSAGE = (
    "Mocked test response was not found in storage for URL {url} and method {method}. "
    "Please make sure that set_response() has correct path set, including URL query parameters."
)


def not_found_response(url: Any, method: Any, code: int = 404) -> Dict[str, Any]:
    """Build the fallback response for a request with no registered mock."""
    return {
        'code': code,
        'data': NOT_FOUND_MESSAGE.format(url=url, method=method),
    }


class MockTransport:
    """
    Mock HTTP client serving responses registered by a test.

    Use it wherever the system under test takes an injected HTTP client.
    Without an injected store, the store path published by the test runner
    is looked up again on every request.

    Example:
        transport = MockTransport('/tmp/restmock_response_123.json')
        response = transport.request({'method': 'GET', 'url': 'users/1'})

        if response['code'] == 404:
            print(response['data'])
    """

    def __init__(
        self,
        store: Optional[Union[ObjectStore, str, Path]] = None,
        config: Optional[MockConfig] = None,
        settings: Optional[SharedSettings] = None,
        criteria_fields: Optional[Sequence[str]] = None
    ):
        """
        Initialize mock transport.

        Args:
            store: ObjectStore or store file path (resolved per request if None)
            config: Optional MockConfig for fallback and handshake behavior
            settings: Optional SharedSettings used to resolve the store path
            criteria_fields: Request fields used for matching (overrides config)

        Raises:
            ValueError: If criteria_fields is empty
        """
        self.config = config or MockConfig()
        self.settings = settings
        if criteria_fields is None:
            criteria_fields = self.config.criteria_fields
        if isinstance(criteria_fields, str):
            criteria_fields = (criteria_fields,)
        self.criteria_fields = tuple(criteria_fields)
        if not self.criteria_fields:
            raise ValueError("criteria_fields must name at least one request field")

        if isinstance(store, (str, Path)):
            store = ObjectStore(store)
        self.store = store

        self.logger = logging.getLogger("restmock.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

    def _get_store(self) -> Optional[ObjectStore]:
        """Return the injected store, or one for the currently published path."""
        if self.store is not None:
            return self.store

        path = resolve_store_path(self.config, self.settings)
        if not path:
            self.logger.warning("No response store has been published for this process")
            return None

        return ObjectStore(path)

    def build_criteria(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """Derive search criteria from an outgoing request."""
        return {name: request.get(name) for name in self.criteria_fields}

    def request(self, request: Any) -> Dict[str, Any]:
        """
        Perform a mocked HTTP request.

        Args:
            request: Mapping or object with at least 'url' and 'method'

        Returns:
            Registered response (without criteria), or a 404 fallback
        """
        request = to_mapping(request)
        url = request.get('url')
        method = request.get('method')

        self.logger.debug(f"Incoming: {method} {url}")

        store = self._get_store()
        record = store.search(self.build_criteria(request)) if store is not None else None

        if record is None:
            self.logger.warning(f"No mocked response found for {method} {url}")
            return not_found_response(url, method, self.config.not_found_code)

        self.logger.debug(f"Matched mocked response for {method} {url}")
        return StoredRecord.from_dict(record).response()
