"""
RestMock Common Utilities

Shared utilities and helpers used across RestMock modules.
"""

from .utils import safe_json_parse, to_mapping, make_store_path, DEFAULT_PREFIX

__all__ = [
    'safe_json_parse',
    'to_mapping',
    'make_store_path',
    'DEFAULT_PREFIX',
]
