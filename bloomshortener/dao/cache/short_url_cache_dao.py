"""DAO for caching short URL mappings in Redis (ElastiCache)

Responsibilities:
    - Read cached targets by shortcode (None on miss)
    - Write targets with a TTL (write-through on creation, repopulation on lookup)

Cache layout:
    cache:<prefix>:links:<shortcode>  -> target URL (string, EX <ttl>)

Classes:
    ShortURLCacheDAO:
        Concrete cache DAO backed by Redis. Uses ElastiCacheClientMixin to
        initialize the Redis client (AWS/LocalStack aware).

Example:
    >>> dao = ShortURLCacheDAO(prefix="bloomshortener:dev")
    >>> dao.set('abc123', 'https://example.com', ttl=604_800)
    >>> dao.get('abc123')
    'https://example.com'
    >>> dao.get('zzzzzz') is None
    True
"""

import redis
from beartype import beartype

from bloomshortener.dao.base import ShortURLCacheBaseDAO
from bloomshortener.dao.cache.mixins import ElastiCacheClientMixin
from bloomshortener.dao.exceptions import CachePutError
from bloomshortener.dao.redis.helpers import handle_redis_connection_error


class ShortURLCacheDAO(ElastiCacheClientMixin, ShortURLCacheBaseDAO):
    """Redis-backed cache of (shortcode -> target) pairs

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with ElastiCache/Redis.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.

    Methods:
        get(shortcode: str) -> str | None:
            Return cached target URL or None on CACHE MISS.
            Raises DataStoreError on Redis failures.

        set(shortcode: str, target: str, ttl: int) -> None:
            Cache target URL with expiry.
            Raises CachePutError on Redis failures.
    """

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str) -> str | None:
        return self.redis.get(self.keys.link_key(shortcode))

    @beartype
    def set(self, shortcode: str, target: str, ttl: int) -> None:
        """Cache a short URL's target for `ttl` seconds

        Raises:
            CachePutError:
                If the write fails for any Redis reason (connection, timeout, OOM, ...).
        """
        try:
            self.redis.set(self.keys.link_key(shortcode), target, ex=ttl)
        except redis.exceptions.RedisError as e:
            raise CachePutError(f"Failed to cache short URL with code '{shortcode}'.") from e
