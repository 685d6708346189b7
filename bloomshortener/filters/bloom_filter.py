"""Probabilistic membership filter over shortcodes, stored as a Redis bitmap

A Bloom filter answers "definitely absent" or "possibly present". The
resolution pipeline consults it before touching the cache or the durable
store, so lookups for shortcodes that were never created are rejected in
constant time.

The bit array lives in Redis (SETBIT/GETBIT on a single string key), so every
process sharing the store also shares the filter: a shortcode added while
serving a create request is immediately visible to every resolver.

Bit positions use double hashing over two seeded xxhash64 digests:

    position_i = (h1 + i * h2) mod m,   i in [0, k)

Classes:
    BloomFilter:
        Fixed-size, append-only Bloom filter backed by a Redis bitmap.

Example:
    >>> bloom = BloomFilter(redis.Redis(), 'bloomshortener:dev:filter:98304:7', bit_array_size=98_304, hash_count=7)
    >>> bloom.add('aB3xY9')
    >>> bloom.test('aB3xY9')
    True
    >>> 'zzzzzz' in bloom
    False
"""

from collections.abc import Iterable

import redis
import xxhash

from bloomshortener.models import BloomFilterParameters
from bloomshortener.dao.redis.helpers import handle_redis_connection_error


# Seeds of the two base hash functions combined by double hashing
H1_SEED = 0
H2_SEED = 0x9E3779B9

# Number of shortcodes whose bits are sent per round trip while populating
POPULATE_BATCH_SIZE = 500


class BloomFilter:
    """Fixed-size Bloom filter over strings, stored in a Redis bitmap

    Attributes:
        redis (redis.Redis):
            Client owning the bitmap (usually the durable store's client).
        key (str):
            Redis key of the bitmap.
        bit_array_size (int):
            Number of bits (m).
        hash_count (int):
            Bit positions set per item (k).
        capacity (int | None):
            Expected number of items; informative only.
        false_positive_rate (float | None):
            Target false-positive rate at capacity; informative only.

    NOTE:
        - There is no delete: once added, an item tests positive for as long as
          the bitmap key exists. Use a new key to start from an empty filter.
        - add() sets all k bits in one MULTI/EXEC transaction, so test() never
          observes a partially added item.
        - Redis failures are raised as DataStoreError.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key: str,
        bit_array_size: int,
        hash_count: int,
        capacity: int | None = None,
        false_positive_rate: float | None = None,
    ):
        if not isinstance(bit_array_size, int) or bit_array_size < 1:
            raise ValueError(f'Bit array size must be a positive integer (given value: {bit_array_size!r}).')
        if not isinstance(hash_count, int) or hash_count < 1:
            raise ValueError(f'Hash count must be a positive integer (given value: {hash_count!r}).')

        self.redis = redis_client
        self.key = key
        self.bit_array_size = bit_array_size
        self.hash_count = hash_count
        self.capacity = capacity
        self.false_positive_rate = false_positive_rate

    def positions(self, item: str) -> list[int]:
        """Return the k bit positions of `item`"""
        data = item.encode('utf-8')
        h1 = xxhash.xxh64_intdigest(data, seed=H1_SEED)
        h2 = xxhash.xxh64_intdigest(data, seed=H2_SEED) | 1  # odd step avoids short cycles when m is even
        return [(h1 + i * h2) % self.bit_array_size for i in range(self.hash_count)]

    @handle_redis_connection_error
    def add(self, item: str) -> None:
        with self.redis.pipeline(transaction=True) as pipe:
            for position in self.positions(item):
                pipe.setbit(self.key, position, 1)
            pipe.execute()

    @handle_redis_connection_error
    def test(self, item: str) -> bool:
        """Return False if `item` was definitely never added, True if it possibly was"""
        with self.redis.pipeline(transaction=False) as pipe:
            for position in self.positions(item):
                pipe.getbit(self.key, position)
            return all(pipe.execute())

    def __contains__(self, item: str) -> bool:
        return self.test(item)

    @handle_redis_connection_error
    def populate(self, items: Iterable[str]) -> int:
        """Add every item from `items`, returning how many were added

        Bits are pipelined in batches of POPULATE_BATCH_SIZE items. SETBIT is
        idempotent, so re-populating an already warm bitmap is harmless.
        """
        count = 0
        with self.redis.pipeline(transaction=False) as pipe:
            for item in items:
                for position in self.positions(item):
                    pipe.setbit(self.key, position, 1)
                count += 1
                if count % POPULATE_BATCH_SIZE == 0:
                    pipe.execute()
            pipe.execute()
        return count

    @property
    def parameters(self) -> BloomFilterParameters:
        return BloomFilterParameters(
            bit_array_size=self.bit_array_size,
            hash_count=self.hash_count,
            capacity=self.capacity,
            false_positive_rate=self.false_positive_rate,
        )
