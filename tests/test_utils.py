"""
Unit tests for RestMock common utilities.

Tests cover:
- safe_json_parse() - JSON parsing with defaults
- to_mapping() - request/response normalization
- make_store_path() - store file naming
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import List
from unittest.mock import patch

import pytest

from restmock.common import safe_json_parse, to_mapping, make_store_path


class TestSafeJsonParse:
    """Test suite for safe_json_parse() function."""

    def test_valid_json(self):
        """Test parsing a JSON array."""
        assert safe_json_parse('[{"a": 1}]') == [{'a': 1}]

    def test_invalid_json(self):
        """Test invalid JSON returns the default."""
        assert safe_json_parse('{oops', default=[]) == []

    def test_empty_string(self):
        """Test empty input returns the default."""
        assert safe_json_parse('', default='empty') == 'empty'

    def test_none(self):
        """Test None input returns the default."""
        assert safe_json_parse(None) is None


class TestToMapping:
    """Test suite for to_mapping() function."""

    def test_dict_is_copied(self):
        """Test dicts are copied, not aliased."""
        original = {'method': 'GET'}
        result = to_mapping(original)

        assert result == original
        assert result is not original

    def test_none(self):
        """Test None becomes an empty mapping."""
        assert to_mapping(None) == {}

    def test_dataclass(self):
        """Test dataclass instances are converted recursively."""
        @dataclass
        class Response:
            code: int
            tags: List[str] = field(default_factory=list)

        assert to_mapping(Response(200, ['a'])) == {'code': 200, 'tags': ['a']}

    def test_attribute_object(self):
        """Test plain objects contribute their public attributes."""
        obj = SimpleNamespace(url='/a', method='GET')
        obj._private = 'hidden'

        assert to_mapping(obj) == {'url': '/a', 'method': 'GET'}

    @pytest.mark.parametrize('value', ['GET /a', 5, 1.5, ('a', 'b')])
    def test_rejects_values_without_fields(self, value):
        """Test scalars and sequences raise TypeError."""
        with pytest.raises(TypeError, match='Cannot convert'):
            to_mapping(value)

    def test_rejects_classes(self):
        """Test classes themselves are not treated as instances."""
        @dataclass
        class Request:
            url: str = '/a'

        with pytest.raises(TypeError):
            to_mapping(Request)


class TestMakeStorePath:
    """Test suite for make_store_path() function."""

    def test_with_test_id(self, tmp_path):
        """Test the test-run naming convention."""
        with patch('restmock.common.utils.time.time', return_value=1700000000.5), \
                patch('restmock.common.utils.random.randint', return_value=512):
            path = make_store_path(test_id='test_users', scratch_dir=str(tmp_path))

        assert path == tmp_path / 'restmock_response_test_users_1700000000_512.json'

    def test_ad_hoc(self, tmp_path):
        """Test the ad hoc naming convention."""
        path = make_store_path(scratch_dir=str(tmp_path), prefix='adhoc')

        assert re.fullmatch(r'adhoc_\d+_\d{3,4}\.json', path.name)

    def test_random_suffix_range(self, tmp_path):
        """Test the random part stays within [100, 1000]."""
        for _ in range(50):
            suffix = int(make_store_path(scratch_dir=str(tmp_path)).stem.rsplit('_', 1)[1])
            assert 100 <= suffix <= 1000

    def test_default_directory(self, tmp_path):
        """Test the system temp dir is used by default."""
        with patch('restmock.common.utils.tempfile.gettempdir', return_value=str(tmp_path)):
            path = make_store_path()

        assert path.parent == tmp_path

    def test_test_id_is_sanitized(self, tmp_path):
        """Test node ids do not introduce directory separators."""
        path = make_store_path(test_id='tests/test_a.py::TestX::test_b[1]', scratch_dir=str(tmp_path))

        assert path.parent == tmp_path
        assert 'tests-test_a.py-TestX-test_b-1' in path.name

    def test_file_not_created(self, tmp_path):
        """Test only a path is produced."""
        assert not make_store_path(scratch_dir=str(tmp_path)).exists()

    def test_returns_path(self, tmp_path):
        """Test the return type."""
        assert isinstance(make_store_path(scratch_dir=str(tmp_path)), Path)
