"""Shared fixtures: in-memory store and cache DAOs with call counters, and a fake Redis bitmap for the filter"""

import threading
from collections import Counter
from types import SimpleNamespace

import pytest

from bloomshortener.models import ShortURLModel
from bloomshortener.dao.base import ShortURLBaseDAO, ShortURLCacheBaseDAO
from bloomshortener.dao.exceptions import ShortURLNotFoundError, DataStoreError, CachePutError
from bloomshortener.filters import BloomFilter
from bloomshortener.pipeline import ResolutionPipeline


class InMemoryShortURLDAO(ShortURLBaseDAO):
    """Dict-backed durable store recording how often each operation runs."""

    def __init__(self, rows: dict[str, str] | None = None):
        self.rows = dict(rows or {})
        self.calls = Counter()
        self.fail_with: DataStoreError | None = None
        self.closed = False

    def _record(self, operation: str) -> None:
        self.calls[operation] += 1
        if self.fail_with is not None:
            raise self.fail_with

    def insert_if_absent(self, short_url: ShortURLModel, **kwargs) -> bool:
        self._record('insert_if_absent')
        if short_url.shortcode in self.rows:
            return False
        self.rows[short_url.shortcode] = short_url.target
        return True

    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        self._record('get')
        if shortcode not in self.rows:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return ShortURLModel(target=self.rows[shortcode], shortcode=shortcode)

    def shortcodes(self, **kwargs):
        self._record('shortcodes')
        return iter(list(self.rows))

    def count(self, **kwargs) -> int:
        self._record('count')
        return len(self.rows)

    def close(self) -> None:
        self.closed = True


class InMemoryCacheDAO(ShortURLCacheBaseDAO):
    """Dict-backed cache recording reads, writes and TTLs."""

    def __init__(self):
        self.entries: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.calls = Counter()
        self.get_error: Exception | None = None
        self.set_error: Exception | None = None
        self.closed = False

    def get(self, shortcode: str) -> str | None:
        self.calls['get'] += 1
        if self.get_error is not None:
            raise self.get_error
        return self.entries.get(shortcode)

    def set(self, shortcode: str, target: str, ttl: int) -> None:
        self.calls['set'] += 1
        if self.set_error is not None:
            raise self.set_error
        self.entries[shortcode] = target
        self.ttls[shortcode] = ttl

    def evict(self, shortcode: str) -> None:
        self.entries.pop(shortcode, None)

    def close(self) -> None:
        self.closed = True


class FakeBitmapPipeline:
    """Queues SETBIT/GETBIT commands until execute(), like redis-py's Pipeline."""

    def __init__(self, server: 'FakeBitmapRedis'):
        self.server = server
        self.commands = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.commands = []

    def setbit(self, key: str, offset: int, value: int) -> None:
        self.commands.append(('setbit', key, offset, value))

    def getbit(self, key: str, offset: int) -> None:
        self.commands.append(('getbit', key, offset, None))

    def execute(self) -> list[int]:
        commands, self.commands = self.commands, []
        return self.server.run(commands)


class FakeBitmapRedis:
    """Minimal Redis bitmap server shared by every filter built on it."""

    def __init__(self):
        self.bitmaps: dict[str, set[int]] = {}
        self.fail_with: Exception | None = None
        self.connection_pool = SimpleNamespace(connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0})
        self._lock = threading.Lock()

    def pipeline(self, transaction: bool = True) -> FakeBitmapPipeline:
        return FakeBitmapPipeline(self)

    def run(self, commands) -> list[int]:
        if self.fail_with is not None:
            raise self.fail_with
        results = []
        with self._lock:
            for name, key, offset, value in commands:
                bits = self.bitmaps.setdefault(key, set())
                previous = int(offset in bits)
                if name == 'setbit' and value:
                    bits.add(offset)
                results.append(previous)
        return results


@pytest.fixture
def store():
    return InMemoryShortURLDAO()


@pytest.fixture
def cache():
    return InMemoryCacheDAO()


@pytest.fixture
def other_cache():
    """A second, independent cache (another process over the same store)."""
    return InMemoryCacheDAO()


@pytest.fixture
def bitmap_redis():
    return FakeBitmapRedis()


@pytest.fixture
def bloom_filter(bitmap_redis):
    return BloomFilter(bitmap_redis, 'test:filter:98304:7:bits', 98_304, 7, capacity=10_000, false_positive_rate=0.01)


@pytest.fixture
def pipeline(store, cache, bloom_filter):
    """A warmed pipeline over empty in-memory store, cache and filter bitmap."""
    _pipeline = ResolutionPipeline(store=store, cache=cache, bloom_filter=bloom_filter)
    _pipeline.warm()
    return _pipeline


@pytest.fixture
def store_failure():
    return DataStoreError("Can't reach Redis at redis.test:6379/0.", operation='insert_if_absent', shortcode='abc123')


@pytest.fixture
def cache_put_failure():
    return CachePutError('cache write failed')
