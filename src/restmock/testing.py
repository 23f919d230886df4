"""
RestMock Test Helpers

Test-side lifecycle for a response store: create and publish it when a
test starts, register responses, and delete it when the test ends.
"""

import logging
import os
from typing import Any, Optional

from .common import make_store_path
from .config import MockConfig
from .mock import MockTransport
from .settings import SharedSettings
from .storage import ObjectStore, StoredRecord

logger = logging.getLogger("restmock.testing")


class RestMockSession:
    """
    Owns the response store of one test.

    The store file is created by set_up() and removed only by tear_down().
    Its path is published through the environment variable named in the
    config (inherited by processes started afterwards) and, when a shared
    settings file is configured, under the configured setting name.

    Example:
        with RestMockSession(test_id='test_users') as session:
            session.set_response(
                {'method': 'GET', 'url': 'users/1'},
                {'code': 200, 'data': '{"id": 1}'}
            )
            run_system_under_test()
    """

    def __init__(
        self,
        test_id: Optional[str] = None,
        config: Optional[MockConfig] = None,
        settings: Optional[SharedSettings] = None
    ):
        self.test_id = test_id
        self.config = config or MockConfig()
        self.settings = settings
        if self.settings is None and self.config.settings_file:
            self.settings = SharedSettings(self.config.settings_file)

        self.store: Optional[ObjectStore] = None
        self._previous_env: Optional[str] = None

    def __enter__(self) -> 'RestMockSession':
        self.set_up()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.tear_down()

    @property
    def store_path(self) -> Optional[str]:
        return str(self.store.filename) if self.store is not None else None

    def set_up(self) -> ObjectStore:
        """Create a fresh store for this test and publish its path."""
        if self.store is not None:
            return self.store

        path = make_store_path(
            test_id=self.test_id,
            scratch_dir=self.config.scratch_dir,
            prefix=self.config.prefix
        )
        self.store = ObjectStore(path)

        self._previous_env = os.environ.get(self.config.env_var)
        os.environ[self.config.env_var] = str(path)
        if self.settings is not None:
            self.settings.set(self.config.setting_name, str(path))

        logger.debug(f"Response store for {self.test_id or 'ad hoc test'}: {path}")
        return self.store

    def tear_down(self):
        """Delete the store file and withdraw the published path."""
        if self.store is None:
            return

        self.store.delete()
        self.store = None

        if self._previous_env is None:
            os.environ.pop(self.config.env_var, None)
        else:
            os.environ[self.config.env_var] = self._previous_env
        self._previous_env = None

        if self.settings is not None:
            self.settings.delete(self.config.setting_name)

    def set_response(self, request: Any, response: Any) -> bool:
        """
        Register the response to return for a request.

        Args:
            request: Request criteria with at least 'method' and 'url'.
                String values in '/pattern/flags' form are matched as regex.
            response: Response with at least 'code' and 'data'

        Returns:
            True if the record was stored

        Raises:
            RuntimeError: If called before set_up()
            TypeError: If request or response cannot be normalized
        """
        if self.store is None:
            raise RuntimeError("set_up() must be called before set_response()")

        record = StoredRecord.build(request, response)
        logger.debug(f"Registering response for {record.criteria}")
        return self.store.add(record)

    def reset(self) -> bool:
        """Clear every registered response mid-test."""
        if self.store is None:
            return False
        return self.store.reset()

    def transport(self) -> MockTransport:
        """Build a MockTransport bound to this session's store."""
        return MockTransport(self.store, config=self.config)


class RestTestCaseMixin:
    """
    Mixin for unittest.TestCase classes that mock outbound HTTP.

    Call rest_set_up() from setUp() and rest_tear_down() from tearDown().

    Example:
        class UserSyncTest(RestTestCaseMixin, unittest.TestCase):
            def setUp(self):
                self.rest_set_up()

            def tearDown(self):
                self.rest_tear_down()
    """

    rest_config: Optional[MockConfig] = None
    rest_session: Optional[RestMockSession] = None

    @property
    def response_storage(self) -> Optional[ObjectStore]:
        return self.rest_session.store if self.rest_session is not None else None

    def rest_set_up(self):
        self.rest_session = RestMockSession(test_id=self.id(), config=self.rest_config)
        self.rest_session.set_up()

    def rest_tear_down(self):
        if self.rest_session is not None:
            self.rest_session.tear_down()
            self.rest_session = None

    def set_response(self, request: Any, response: Any) -> bool:
        if self.rest_session is None:
            raise RuntimeError("rest_set_up() must be called before set_response()")
        return self.rest_session.set_response(request, response)
