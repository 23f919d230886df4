"""
RestMock Configuration

Dataclass-based configuration with YAML file and environment variable
loaders.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml

from .common import DEFAULT_PREFIX

ENV_RESPONSE_FILE = 'RESTMOCK_RESPONSE_FILE'


@dataclass
class MockConfig:
    """Configuration for response stores and the mock transport."""

    # Store files
    scratch_dir: Optional[str] = None  # Defaults to the system temp dir
    prefix: str = DEFAULT_PREFIX

    # Cross-process handshake
    setting_name: str = 'restmock_response_file'
    env_var: str = ENV_RESPONSE_FILE
    settings_file: Optional[str] = None  # Shared settings YAML file

    # Matching
    criteria_fields: Tuple[str, ...] = ('url', 'method')

    # Fallback behavior
    not_found_code: int = 404

    log_level: str = "info"

    def __post_init__(self):
        if isinstance(self.criteria_fields, str):
            self.criteria_fields = (self.criteria_fields,)
        self.criteria_fields = tuple(self.criteria_fields or ())
        if not self.criteria_fields:
            raise ValueError("criteria_fields must name at least one request field")

        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(
                f"Unknown log_level {self.log_level!r}. "
                f"Expected one of: debug, info, warning, error, critical"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        if 'not_found_code' in values:
            values['not_found_code'] = int(values['not_found_code'])

        return cls(**values)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'MockConfig':
        """
        Load config from a YAML file.

        Args:
            yaml_path: Path to YAML file with a top-level mapping

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the document is not a mapping
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Unexpected YAML format in {path}. "
                f"Expected a mapping, got {type(data).__name__}"
            )

        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> 'MockConfig':
        """Create config from RESTMOCK_* environment variables."""
        data: Dict[str, Any] = {}

        if os.environ.get('RESTMOCK_SCRATCH_DIR'):
            data['scratch_dir'] = os.environ['RESTMOCK_SCRATCH_DIR']
        if os.environ.get('RESTMOCK_PREFIX'):
            data['prefix'] = os.environ['RESTMOCK_PREFIX']
        if os.environ.get('RESTMOCK_SETTINGS_FILE'):
            data['settings_file'] = os.environ['RESTMOCK_SETTINGS_FILE']
        if os.environ.get('RESTMOCK_LOG_LEVEL'):
            data['log_level'] = os.environ['RESTMOCK_LOG_LEVEL']

        return cls.from_dict(data)
