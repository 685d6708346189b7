"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO, the
authoritative store behind the resolution pipeline.

Responsibilities:
    - Insert short URLs with insert-if-absent (first writer wins) semantics;
    - Retrieve short URLs by shortcode;
    - Maintain an index set of all shortcodes for filter rebuilds and counting;
    - Raise appropriate DAO exceptions on Redis failures.

Redis layout:
    <prefix>:links:<shortcode>:url  -> target URL (string)
    <prefix>:links:index            -> every stored shortcode (set)
    <prefix>:filter:<m>:<k>:bits    -> membership filter bitmap (see bloomshortener.filters)

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from bloomshortener.models import ShortURLModel
    >>> from bloomshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc123"
    ... )
    >>> dao.insert_if_absent(short_url)
    True

    >>> dao.get("abc123").target
    'https://example.com/page'
    >>> dao.count()
    1
"""

from collections.abc import Iterator

from beartype import beartype

from bloomshortener.models import ShortURLModel
from bloomshortener.dao.base import ShortURLBaseDAO
from bloomshortener.dao.redis.mixins import RedisClientMixin
from bloomshortener.dao.redis.helpers import handle_redis_connection_error
from bloomshortener.dao.exceptions import ShortURLNotFoundError


# Number of index members fetched per SSCAN round trip
SCAN_BATCH_SIZE = 1000


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert_if_absent(short_url: ShortURLModel, **kwargs) -> bool:
            SET NX the mapping and index its shortcode in one transaction.
            Raises DataStoreError on Redis failures.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a short URL mapping by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on Redis failures.

        shortcodes(**kwargs) -> Iterator[str]:
            SSCAN the shortcode index.
            Raises DataStoreError on Redis failures.

        count(**kwargs) -> int:
            SCARD the shortcode index.
            Raises DataStoreError on Redis failures.
    """

    @handle_redis_connection_error
    @beartype
    def insert_if_absent(self, short_url: ShortURLModel, **kwargs) -> bool:
        """Insert a short URL mapping into Redis unless the shortcode is taken

        NOTE: SET NX decides the winner atomically on the Redis server. The SADD
              into the index runs in the same MULTI/EXEC transaction so a committed
              mapping is never missing from the index used to rebuild the filter.
              SADD is idempotent, so a losing writer re-adding the shortcode is harmless.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            bool: True if the mapping was written, False if the shortcode already existed.

        Raises:
            DataStoreError:
                If a Redis issue occurs during the transaction.

        Example:
            >>> dao.insert_if_absent(ShortURLModel(target='https://example.com', shortcode='abc123'))
            True
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self.keys.link_url_key(short_url.shortcode), short_url.target, nx=True)
            pipe.sadd(self.keys.link_index_key(), short_url.shortcode)
            created, _ = pipe.execute()
        return bool(created)

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL mapping by shortcode

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel:
                The retrieved ShortURLModel instance.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If a Redis issue occurs.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(target='https://example.com', shortcode='abc123')
        """
        target = self.redis.get(self.keys.link_url_key(shortcode))
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return ShortURLModel(target=target, shortcode=shortcode)

    @handle_redis_connection_error
    def shortcodes(self, **kwargs) -> Iterator[str]:
        """Return every indexed shortcode

        The index is drained eagerly so Redis failures surface here, inside the
        error translation wrapper, rather than mid-iteration at the caller.

        Returns:
            Iterator[str]: iterator over all stored shortcodes (unordered).
        """
        index_key = self.keys.link_index_key()
        return iter(list(self.redis.sscan_iter(index_key, count=SCAN_BATCH_SIZE)))

    @handle_redis_connection_error
    def count(self, **kwargs) -> int:
        """Return the number of stored short URL mappings

        Example:
            >>> dao.count()
            123
        """
        return int(self.redis.scard(self.keys.link_index_key()))
