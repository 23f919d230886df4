"""
RestMock Shared Settings

Named values shared between the test runner and the system under test
through a YAML file. Each process keeps a snapshot of the values and only
sees changes made by another process after calling refresh().
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from .config import MockConfig

logger = logging.getLogger("restmock.settings")

DEFAULT_SETTINGS_NAME = 'restmock_settings.yaml'


class SharedSettings:
    """
    File-backed named settings visible to every process using the same file.

    Example:
        # Test runner
        settings = SharedSettings('/tmp/settings.yaml')
        settings.set('restmock_response_file', '/tmp/responses.json')

        # System under test, after the value changed
        settings.refresh()
        path = settings.get('restmock_response_file')
    """

    def __init__(self, path: Optional[str] = None):
        """
        Initialize shared settings.

        Args:
            path: Settings file path (defaults to a file in the system temp dir)
        """
        self.path = Path(path) if path else Path(tempfile.gettempdir()) / DEFAULT_SETTINGS_NAME
        self._values: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        """Read all values from disk; unreadable files count as empty."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read shared settings {self.path}: {e}")
            return {}

        return data if isinstance(data, dict) else {}

    def _save(self, values: Dict[str, Any]):
        tmp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(values, f, default_flow_style=False)
        os.replace(str(tmp_path), str(self.path))

    def refresh(self) -> Dict[str, Any]:
        """Discard the snapshot and reload values written by any process."""
        self._values = self._load()
        return dict(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a value from the current snapshot."""
        return self._values.get(name, default)

    def set(self, name: str, value: Any):
        """Persist a value and update the snapshot."""
        values = self._load()
        values[name] = value
        self._save(values)
        self._values = values
        logger.debug(f"Set shared setting {name}={value!r}")

    def delete(self, name: str):
        """Remove a value; missing names are ignored."""
        values = self._load()
        if name in values:
            del values[name]
            self._save(values)
        self._values = values
        logger.debug(f"Deleted shared setting {name}")


def resolve_store_path(
    config: Optional[MockConfig] = None,
    settings: Optional[SharedSettings] = None
) -> Optional[str]:
    """
    Look up the current response store path.

    Checked on every call: the environment variable first, then the
    shared settings file after a refresh.

    Args:
        config: MockConfig naming the variable and setting
        settings: SharedSettings to consult (built from config.settings_file
            if None; skipped when neither is given)

    Returns:
        Store path, or None if the runner has not published one
    """
    config = config or MockConfig()

    path = os.environ.get(config.env_var)
    if path:
        return path

    if settings is None:
        if not config.settings_file:
            return None
        settings = SharedSettings(config.settings_file)
    settings.refresh()
    return settings.get(config.setting_name)
