from bloomshortener.filters.bloom_filter import BloomFilter


__all__ = ['BloomFilter']
