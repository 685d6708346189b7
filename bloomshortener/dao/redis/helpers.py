import functools
import redis
from collections.abc import Callable

from bloomshortener.models import ShortURLModel
from bloomshortener.dao.exceptions import DataStoreError


__all__ = []


def redis_location(client: redis.Redis) -> str:
    """Describe a Redis client's target as <host>:<port>/<db> for error messages"""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def _involved_shortcode(args: tuple, kwargs: dict) -> str | None:
    candidate = kwargs.get('shortcode', kwargs.get('short_url', args[0] if args else None))
    if isinstance(candidate, ShortURLModel):
        return candidate.shortcode
    return candidate if isinstance(candidate, str) else None


def handle_redis_connection_error[F: Callable](method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate Redis failures

    Connection errors, timeouts and any other Redis server error are re-raised
    as DataStoreError carrying the failed operation and the shortcode involved.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on Redis failures.

    Example:
        >>> @handle_redis_connection_error
        ... def count(self):
        ...     return self.redis.scard('links:index')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(
                f"Can't reach Redis at {redis_location(self.redis)} during '{method.__name__}'.",
                operation=method.__name__,
                shortcode=_involved_shortcode(args, kwargs),
            ) from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(
                f"Redis error during '{method.__name__}': {e}",
                operation=method.__name__,
                shortcode=_involved_shortcode(args, kwargs),
            ) from e

    return wrapper
