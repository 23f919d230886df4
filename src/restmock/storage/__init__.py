"""
RestMock Storage Module

File-backed response storage shared across processes.

This module provides:
- Object store with append, reset, full read and search
- Regex-or-literal criteria matching
- Stored record shape (criteria + payload)
"""

from .object_store import ObjectStore
from .criteria import is_regex, compile_pattern, criteria_matches, record_matches
from .records import StoredRecord, CRITERIA_KEY

__all__ = [
    # Store
    'ObjectStore',

    # Matching
    'is_regex',
    'compile_pattern',
    'criteria_matches',
    'record_matches',

    # Records
    'StoredRecord',
    'CRITERIA_KEY',
]
