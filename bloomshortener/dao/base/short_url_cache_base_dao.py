"""Abstract base class for short URL cache DAOs.

The cache holds ephemeral (shortcode -> target) pairs with a TTL. It is a
performance optimization only: callers must tolerate both misses and errors.
"""

from abc import ABC, abstractmethod


class ShortURLCacheBaseDAO(ABC):
    """Interface for the volatile short URL cache.

    Methods:
        get(shortcode: str) -> str | None:
            Return the cached target URL, or None on a cache miss.
            Raises DataStoreError on connection or read failure.

        set(shortcode: str, target: str, ttl: int) -> None:
            Cache the target URL for `ttl` seconds.
            Raises CachePutError on failure.

        close() -> None:
            Release the underlying client/connection pool.
    """

    @abstractmethod
    def get(self, shortcode: str) -> str | None:
        pass

    @abstractmethod
    def set(self, shortcode: str, target: str, ttl: int) -> None:
        pass

    def close(self) -> None:  # noqa: B027
        pass
