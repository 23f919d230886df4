"""
RestMock Criteria Matching

Field-level comparison between a stored criteria value and a value taken
from an incoming request.

A stored value is either a literal (compared with strict, type-sensitive
equality) or a delimited regular expression such as ``/^\\/api\\/.*$/i``.
"""

import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger("restmock.storage")

# Delimited regex: "/body/" optionally followed by flag letters
REGEX_SYNTAX = re.compile(r'^/.+/[a-z]*$', re.IGNORECASE)

FLAG_MAP = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'u': 0,
}


def is_regex(value: Any) -> bool:
    """Check whether a stored value uses the delimited regex syntax."""
    if not isinstance(value, str):
        return False

    return bool(REGEX_SYNTAX.match(value))


def _dollar_end_only(body: str) -> str:
    """Replace unescaped "$" outside character classes with "\\Z"."""
    result = []
    escaped = False
    in_class = False

    for i, char in enumerate(body):
        if escaped:
            escaped = False
        elif char == '\\':
            escaped = True
        elif in_class:
            # "]" right after "[" or "[^" is a literal member
            if char == ']' and body[i - 1] != '[' and body[i - 2:i] != '[^':
                in_class = False
        elif char == '[':
            in_class = True
        elif char == '$':
            result.append(r'\Z')
            continue
        result.append(char)

    return ''.join(result)


def compile_pattern(value: str) -> Optional[re.Pattern]:
    """
    Compile a delimited regex into a Python pattern.

    Args:
        value: Pattern in ``/body/flags`` form

    Returns:
        Compiled pattern, or None if the flags or the body are invalid
    """
    closing = value.rfind('/')
    body = value[1:closing]
    flags = value[closing + 1:]

    re_flags = 0
    for flag in flags:
        if flag == 'A':
            # Anchored: the match must start at the beginning of the subject
            body = r'\A(?:' + body + ')'
        elif flag == 'D':
            continue
        elif flag in FLAG_MAP:
            re_flags |= FLAG_MAP[flag]
        else:
            logger.warning(f"Unsupported regex flag '{flag}' in criteria {value!r}")
            return None

    # Dollar end only: "$" must not match before a trailing newline
    if 'D' in flags and 'm' not in flags:
        body = _dollar_end_only(body)

    try:
        return re.compile(body, re_flags)
    except re.error as e:
        logger.warning(f"Invalid regex in criteria {value!r}: {e}")
        return None


def criteria_matches(stored_value: Any, search_value: Any) -> bool:
    """
    Check whether a search value satisfies a stored criteria value.

    Args:
        stored_value: Value registered in a record's criteria. If a string
            in ``/pattern/flags`` form, it is treated as a regex.
        search_value: Value taken from the incoming request

    Returns:
        True if the value matches, False otherwise (including invalid regex)
    """
    if is_regex(stored_value):
        pattern = compile_pattern(stored_value)
        if pattern is None:
            return False
        subject = '' if search_value is None else str(search_value)
        return pattern.search(subject) is not None

    return type(stored_value) is type(search_value) and stored_value == search_value


def record_matches(record_criteria: Dict[str, Any], search: Dict[str, Any]) -> bool:
    """
    Check a record's criteria against every field of a search.

    Every searched field must be present in the record's criteria and
    match it. Fields the search omits are not checked. A search with no
    fields matches nothing.
    """
    if not search:
        return False

    for name, search_value in search.items():
        if name not in record_criteria:
            return False
        if not criteria_matches(record_criteria[name], search_value):
            return False

    return True
