"""
Tests for RestMock criteria matching

Tests the regex-or-literal matcher including:
- Delimited regex detection
- Regex flags
- Strict, type-sensitive equality
- Invalid pattern handling
- Record-level AND matching
"""

import logging

import pytest

from restmock.storage.criteria import (
    is_regex,
    compile_pattern,
    criteria_matches,
    record_matches
)


class TestIsRegex:
    """Test delimited regex detection."""

    @pytest.mark.parametrize('value', [
        '/^foo.*bar$/',
        '/^foo.*bar$/i',
        r'/^\/api\/.*$/',
        '/a/ms',
        '/a/A',
    ])
    def test_regex_values(self, value):
        """Test values in /pattern/flags form are recognized."""
        assert is_regex(value) is True

    @pytest.mark.parametrize('value', [
        'users/1',
        '/users',
        '//',
        '/abc/1',
        'GET',
        '',
        5,
        None,
        ['/a/'],
    ])
    def test_non_regex_values(self, value):
        """Test plain strings and non-strings are not regex."""
        assert is_regex(value) is False

    def test_leading_and_trailing_slash_path_is_regex(self):
        """Test a path wrapped in slashes reads as a pattern."""
        assert is_regex('/users/1/') is True


class TestCompilePattern:
    """Test delimited regex compilation."""

    def test_case_insensitive_flag(self):
        """Test the i flag maps to IGNORECASE."""
        pattern = compile_pattern('/^users$/i')

        assert pattern is not None
        assert pattern.search('USERS')

    def test_anchored_flag(self):
        """Test the A flag anchors the match at the start."""
        pattern = compile_pattern('/users/A')

        assert pattern.search('users/1')
        assert not pattern.search('api/users')

    def test_unsupported_flag(self, caplog):
        """Test unknown flags make the pattern unusable."""
        with caplog.at_level(logging.WARNING, logger='restmock.storage'):
            assert compile_pattern('/users/q') is None

        assert 'Unsupported regex flag' in caplog.text

    def test_invalid_body(self, caplog):
        """Test an invalid pattern body returns None instead of raising."""
        with caplog.at_level(logging.WARNING, logger='restmock.storage'):
            assert compile_pattern('/([a-z/') is None

        assert 'Invalid regex' in caplog.text

    def test_ungreedy_flag_unsupported(self, caplog):
        """Test the U flag has no equivalent and is rejected."""
        with caplog.at_level(logging.WARNING, logger='restmock.storage'):
            assert compile_pattern('/a+/U') is None

        assert "Unsupported regex flag 'U'" in caplog.text

    def test_dollar_end_only_flag(self):
        """Test the D flag stops "$" matching before a trailing newline."""
        assert compile_pattern('/^foo$/').search('foo\n')
        assert not compile_pattern('/^foo$/D').search('foo\n')
        assert compile_pattern('/^foo$/D').search('foo')

    def test_dollar_end_only_keeps_literal_dollars(self):
        """Test escaped and bracketed dollars stay literal under D."""
        assert compile_pattern(r'/^\$\d+$/D').search('$10')
        assert compile_pattern('/^[$]$/D').search('$')
        assert not compile_pattern('/^[$]$/D').search('$\n')

    def test_dollar_end_only_ignored_when_multiline(self):
        """Test D has no effect together with m."""
        assert compile_pattern('/^foo$/mD').search('foo\nbar')


class TestCriteriaMatches:
    """Test field-level matching."""

    def test_regex_matches(self):
        """Test regex stored value matches a conforming search value."""
        assert criteria_matches(r'/^\/api\/.*$/', '/api/users') is True

    def test_regex_does_not_match(self):
        """Test regex stored value rejects a non-conforming search value."""
        assert criteria_matches(r'/^\/api\/.*$/', '/other') is False

    def test_regex_is_unanchored_search(self):
        """Test patterns without anchors match anywhere in the value."""
        assert criteria_matches('/users/', 'https://api.example.com/users/1') is True

    def test_regex_with_flags(self):
        """Test flags are honoured when matching."""
        assert criteria_matches('/^get$/i', 'GET') is True
        assert criteria_matches('/^get$/', 'GET') is False

    def test_regex_against_number(self):
        """Test non-string search values are stringified for regex matching."""
        assert criteria_matches(r'/^\d+$/', 42) is True

    def test_regex_against_none(self):
        """Test None is matched as an empty string."""
        assert criteria_matches('/^$/', None) is True
        assert criteria_matches('/.+/', None) is False

    def test_dollar_end_only_rejects_trailing_newline(self):
        """Test a D-flagged pattern does not match a value ending in a newline."""
        assert criteria_matches('/^foo$/D', 'foo\n') is False
        assert criteria_matches('/^foo$/D', 'foo') is True

    def test_invalid_regex_is_non_match(self):
        """Test an invalid stored pattern never matches and never raises."""
        assert criteria_matches('/([/', '([') is False

    def test_literal_equality(self):
        """Test equal strings match."""
        assert criteria_matches('abc', 'abc') is True

    def test_literal_inequality(self):
        """Test different strings do not match."""
        assert criteria_matches('abc', 'abd') is False

    def test_type_sensitive(self):
        """Test equality is type-sensitive."""
        assert criteria_matches('5', 5) is False
        assert criteria_matches(5, '5') is False
        assert criteria_matches(1, True) is False
        assert criteria_matches(1, 1.0) is False
        assert criteria_matches(5, 5) is True

    def test_regex_in_search_value_is_literal(self):
        """Test only the stored side is interpreted as a pattern."""
        assert criteria_matches('users', '/users/') is False


class TestRecordMatches:
    """Test AND matching across searched fields."""

    def test_all_fields_match(self):
        """Test a record matching every searched field."""
        assert record_matches(
            {'method': 'GET', 'url': '/a'},
            {'method': 'GET', 'url': '/a'}
        ) is True

    def test_record_may_have_extra_fields(self):
        """Test record fields absent from the search are ignored."""
        assert record_matches(
            {'method': 'GET', 'url': '/a', 'extra': 'foo'},
            {'method': 'GET', 'url': '/a'}
        ) is True

    def test_missing_field_rejects(self):
        """Test a searched field missing from the record rejects it."""
        assert record_matches(
            {'method': 'GET', 'url': '/a'},
            {'method': 'GET', 'url': '/a', 'other': 'bar'}
        ) is False

    def test_one_failing_field_rejects(self):
        """Test a single mismatching field rejects the record."""
        assert record_matches(
            {'method': 'POST', 'url': '/a'},
            {'method': 'GET', 'url': '/a'}
        ) is False

    def test_empty_search_matches_nothing(self):
        """Test a search without fields never matches."""
        assert record_matches({'method': 'GET'}, {}) is False
        assert record_matches({}, {}) is False
