from dataclasses import dataclass
from typing import Any


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    target: str     # Normalized long URL
    shortcode: str  # Fixed-width identifier derived from the target
# fmt: on


@dataclass(frozen=True)
class BloomFilterParameters:
    bit_array_size: int                        # Width of the filter's bit array
    hash_count: int                            # Number of bit positions set per shortcode
    capacity: int | None = None                # Expected number of shortcodes
    false_positive_rate: float | None = None   # Target false-positive rate at capacity

    def as_dict(self) -> dict[str, Any]:
        return {
            'bitArraySize': self.bit_array_size,
            'hashCount': self.hash_count,
            'capacity': self.capacity,
            'falsePositiveRate': self.false_positive_rate,
        }


@dataclass(frozen=True)
class ShortenerStats:
    """Snapshot of the shortener's size and static tuning.

    Attributes:
        total_count (int):
            Number of short URL mappings in the durable store.
        filter_parameters (BloomFilterParameters):
            Sizing of the membership filter.
        cache_ttl (int):
            TTL (in seconds) applied to cached mappings.

    Example:
        >>> stats = ShortenerStats(3, BloomFilterParameters(98304, 7, 10000, 0.01), 604800)
        >>> stats.as_dict()['totalCount']
        3
    """

    total_count: int
    filter_parameters: BloomFilterParameters
    cache_ttl: int

    def as_dict(self) -> dict[str, Any]:
        return {
            'totalCount': self.total_count,
            'filterParameters': self.filter_parameters.as_dict(),
            'cacheTtl': self.cache_ttl,
        }


__all__ = ['ShortURLModel', 'BloomFilterParameters', 'ShortenerStats']
