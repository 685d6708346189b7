"""URL and shortcode validation

Functions:
    normalize_url(raw) -> str
        Trim, default the scheme to http:// and syntax-check a submitted URL.
    is_valid_shortcode(shortcode, length=6, alphabet=BASE62_ALPHABET) -> bool
        Check a shortcode's width and alphabet.

Example:
    >>> normalize_url('  example.com/page ')
    'http://example.com/page'
    >>> normalize_url('not a url')
    Traceback (most recent call last):
        ...
    bloomshortener.exceptions.InvalidURLError: Invalid URL format: 'http://not a url'
"""

import re
import ipaddress
from urllib.parse import urlsplit

from bloomshortener.constants import BASE62_ALPHABET, Shortcode
from bloomshortener.exceptions import InvalidURLError


DEFAULT_SCHEME = 'http://'
SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)

# Host code points a URL parser refuses outright (whitespace and delimiters)
FORBIDDEN_HOST_PATTERN = re.compile(r'[\x00-\x20\x7f#%/:<>?@\[\\\]^|]')
CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x1f\x7f]')


def _check_syntax(url: str) -> None:
    if CONTROL_CHAR_PATTERN.search(url):
        raise InvalidURLError(f'Invalid URL format (control characters): {url!r}')

    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError for non-numeric or out-of-range ports
    except ValueError as e:
        raise InvalidURLError(f'Invalid URL format: {url!r}') from e

    host = parts.hostname
    if not host:
        raise InvalidURLError(f'Invalid URL format (missing host): {url!r}')

    if parts.netloc.rpartition('@')[2].startswith('['):
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise InvalidURLError(f'Invalid URL format (bad IPv6 host): {url!r}') from e
    elif FORBIDDEN_HOST_PATTERN.search(host):
        raise InvalidURLError(f'Invalid URL format: {url!r}')


def normalize_url(raw: str) -> str:
    """Normalize a submitted URL into the target stored for a shortcode

    Steps:
        1- Reject empty or non-string input
        2- Trim surrounding whitespace
        3- Prepend 'http://' unless the URL starts with http:// or https:// (any case)
        4- Reject URLs failing syntax checks (missing/invalid host, bad port)

    The operation is idempotent: normalize_url(normalize_url(x)) == normalize_url(x).

    Args:
        raw (str): URL as submitted by a client.

    Returns:
        str: normalized absolute URL.

    Raises:
        InvalidURLError: if the URL can't be normalized.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidURLError('URL is required and must be a non-empty string')

    url = raw.strip()
    if not SCHEME_PATTERN.match(url):
        url = f'{DEFAULT_SCHEME}{url}'

    _check_syntax(url)
    return url


def is_valid_shortcode(shortcode: str, length: int = Shortcode.LENGTH, alphabet: str = BASE62_ALPHABET) -> bool:
    """Check that `shortcode` has exactly `length` symbols, all drawn from `alphabet`

    Example:
        >>> is_valid_shortcode('aB3xY9')
        True
        >>> is_valid_shortcode('aB3-Y9')
        False
    """
    if not isinstance(shortcode, str) or len(shortcode) != length:
        return False
    return set(shortcode) <= set(alphabet)
