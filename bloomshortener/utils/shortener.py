"""Shortcode generation utility

This module provides a helper function for deriving short, deterministic,
fixed-width codes from a (normalized) target URL.

Functions:
    generate_shortcode(target, length=6, alphabet=BASE62_ALPHABET, digest_size=6):
        Generate a fixed-width code suitable for use as a URL slug.

Example:
    >>> from bloomshortener.utils import generate_shortcode
    >>> code = generate_shortcode('http://example.com/page')
    >>> len(code)
    6
    >>> code == generate_shortcode('http://example.com/page')
    True
"""

import hashlib

from bloomshortener.constants import BASE62_ALPHABET, Shortcode


def generate_shortcode(
    target: str,
    length: int = Shortcode.LENGTH,
    alphabet: str = BASE62_ALPHABET,
    digest_size: int = Shortcode.DIGEST_SIZE,
) -> str:
    """Generate a fixed-width, deterministic shortcode from a target URL.

    The target's UTF-8 bytes are hashed with SHA-256. The first `digest_size`
    bytes of the digest are read as a big-endian unsigned integer, which is
    then encoded in base-N (N = len(alphabet)) and left-padded with the
    alphabet's zero symbol.

    Args:
        target (str):
            Normalized target URL. Not re-validated here.

        length (int, optional):
            Number of symbols in the resulting code. Defaults to 6.

        alphabet (str, optional):
            Ordered symbol set. Defaults to [0-9][A-Z][a-z].

        digest_size (int, optional):
            Number of leading digest bytes seeding the code. Defaults to 6.

    Returns:
        str: shortcode of exactly `length` symbols from `alphabet`.

    NOTE:
        - Six digest bytes span 2**48 values while 62**6 is roughly 5.7e10,
          so the seed wraps modulo BASE**length to keep every code at exactly
          `length` symbols.
        - Distinct targets can collide. Collisions are resolved downstream by the
          store's insert-if-absent semantics (first writer wins), not here.
    """
    if not isinstance(target, str):
        raise TypeError(f'Target must be of type string (given type: {type(target)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if len(alphabet) < 2 or len(set(alphabet)) != len(alphabet):
        raise ValueError(f'Alphabet must contain at least two unique symbols (given value: {alphabet!r}).')

    base = len(alphabet)
    digest = hashlib.sha256(target.encode('utf-8')).digest()
    seed = int.from_bytes(digest[:digest_size], 'big') % base**length

    # Custom base-N encoding algorithm:
    # 1- Encode the seed digit by digit, least significant first (list comprehension)
    # 2- Reverse order so the most significant digit comes first (reversed())
    # 3- Join characters into a single string and pad with the zero symbol (rjust())
    return ''.join(reversed([alphabet[(seed // base**i) % base] for i in range(length)])).rjust(length, alphabet[0])
