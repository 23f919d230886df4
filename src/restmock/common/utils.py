"""
RestMock Common Utilities

Shared helpers for normalizing request/response shapes and naming store files.
"""

import dataclasses
import json
import random
import re
import tempfile
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Any, Optional

DEFAULT_PREFIX = 'restmock_response'


def safe_json_parse(json_string: str, default: Any = None) -> Any:
    """
    Safely parse JSON string with error handling.

    Args:
        json_string: JSON string to parse
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON object, or default if parsing fails

    Example:
        records = safe_json_parse(path.read_text(), default=[])
    """
    if not json_string:
        return default

    try:
        return json.loads(json_string)
    except (json.JSONDecodeError, TypeError, ValueError):
        return default


def to_mapping(value: Any) -> Dict[str, Any]:
    """
    Normalize a request or response description to a plain dict.

    Accepts mappings, dataclass instances and plain attribute objects
    (anything carrying a ``__dict__``), so tests can register responses
    with whatever shape the system under test already uses.

    Args:
        value: Mapping, dataclass instance, attribute object or None

    Returns:
        A new dict with the same fields

    Raises:
        TypeError: If the value has no field structure
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if hasattr(value, '__dict__') and not isinstance(value, type):
        return {k: v for k, v in vars(value).items() if not k.startswith('_')}

    raise TypeError(
        f"Cannot convert {type(value).__name__} to a mapping. "
        f"Expected a dict, a dataclass or an object with attributes."
    )


def make_store_path(
    test_id: Optional[str] = None,
    scratch_dir: Optional[str] = None,
    prefix: str = DEFAULT_PREFIX
) -> Path:
    """
    Build a collision-resistant path for a response store file.

    Format: ``<scratch>/<prefix>_<test-id>_<timestamp>_<random>.json``, or
    ``<scratch>/<prefix>_<timestamp>_<random>.json`` for ad hoc stores.
    The random part is a number in the range [100, 1000].

    Args:
        test_id: Identifier of the owning test run (optional)
        scratch_dir: Directory for the file (defaults to system temp dir)
        prefix: File name prefix

    Returns:
        Path to the (not yet created) store file
    """
    parts = [prefix]
    if test_id:
        # Node ids such as "tests/test_a.py::test_b" must not leak separators
        parts.append(re.sub(r'[^A-Za-z0-9._-]+', '-', str(test_id)).strip('-'))
    parts.append(str(int(time.time())))
    parts.append(str(random.randint(10 ** 2, 10 ** 3)))

    directory = Path(scratch_dir) if scratch_dir else Path(tempfile.gettempdir())
    return directory / ('_'.join(parts) + '.json')
