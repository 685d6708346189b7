"""Unit tests for URL and shortcode validation in validators.py.

Test coverage includes:

1. normalize_url()
   - Trims whitespace and defaults the scheme to http://.
   - Keeps http:// and https:// (any case) untouched.
   - Is idempotent.
   - Rejects empty, non-string and syntactically invalid URLs.

2. is_valid_shortcode()
   - Accepts fixed-width shortcodes drawn from the alphabet.
   - Rejects wrong widths, foreign symbols and non-strings.
"""

import pytest

from bloomshortener.exceptions import InvalidURLError
from bloomshortener.utils.validators import normalize_url, is_valid_shortcode


# -------------------------------
# 1. normalize_url()
# -------------------------------


@pytest.mark.parametrize(
    'raw, expected',
    [
        ('example.com/page', 'http://example.com/page'),
        ('  example.com/page  ', 'http://example.com/page'),
        ('https://example.com', 'https://example.com'),
        ('http://example.com', 'http://example.com'),
        ('HTTPS://Example.com/A', 'HTTPS://Example.com/A'),
        ('sub.example.co.uk:8080/x?y=1#z', 'http://sub.example.co.uk:8080/x?y=1#z'),
        ('http://[::1]:8080/', 'http://[::1]:8080/'),
        ('user:pw@example.com', 'http://user:pw@example.com'),
    ],
)
def test_normalize_url(raw, expected):
    """Ensure URLs are trimmed and given a default scheme."""
    assert normalize_url(raw) == expected


@pytest.mark.parametrize('raw', ['example.com', 'https://example.com/a b', 'HTTP://x.test'])
def test_normalize_url_is_idempotent(raw):
    """Ensure normalizing twice equals normalizing once."""
    assert normalize_url(normalize_url(raw)) == normalize_url(raw)


@pytest.mark.parametrize('raw', [None, 42, '', '   ', '\t\n'])
def test_normalize_url_rejects_empty_input(raw):
    """Ensure empty or non-string input raises InvalidURLError."""
    with pytest.raises(InvalidURLError):
        normalize_url(raw)


@pytest.mark.parametrize(
    'raw',
    [
        'not a url with spaces and no scheme',
        'http://',
        'https:///path-only',
        'http://example.com:notaport/',
        'http://example.com:99999/',
        'http://[not-ipv6]/',
        'http://exa<mple.com',
        'http://example.com/\x00',
    ],
)
def test_normalize_url_rejects_invalid_syntax(raw):
    """Ensure syntactically invalid URLs raise InvalidURLError."""
    with pytest.raises(InvalidURLError):
        normalize_url(raw)


def test_invalid_url_error_is_value_error():
    """Ensure InvalidURLError can be caught as ValueError."""
    with pytest.raises(ValueError):
        normalize_url('')


# -------------------------------
# 2. is_valid_shortcode()
# -------------------------------


@pytest.mark.parametrize('shortcode', ['abc123', 'ZZZZZZ', '000000', 'aB3xY9'])
def test_is_valid_shortcode(shortcode):
    """Ensure six base62 symbols are accepted."""
    assert is_valid_shortcode(shortcode)


@pytest.mark.parametrize('shortcode', ['', 'abc12', 'abc1234', 'abc-12', 'abc 12', 'ábc123', None, 123456])
def test_is_valid_shortcode_rejects_malformed(shortcode):
    """Ensure wrong widths, foreign symbols and non-strings are rejected."""
    assert not is_valid_shortcode(shortcode)


def test_is_valid_shortcode_custom_shape():
    """Ensure custom length and alphabet are honored."""
    assert is_valid_shortcode('0101', length=4, alphabet='01')
    assert not is_valid_shortcode('0121', length=4, alphabet='01')
