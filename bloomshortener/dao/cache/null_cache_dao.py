"""Stand-in cache used when the real cache can't be constructed

Every read is a miss and every write is dropped, so the resolution pipeline
serves straight from the durable store.
"""

from bloomshortener.dao.base import ShortURLCacheBaseDAO


class NullCacheDAO(ShortURLCacheBaseDAO):
    """Cache that never holds anything"""

    def get(self, shortcode: str) -> str | None:
        return None

    def set(self, shortcode: str, target: str, ttl: int) -> None:
        pass
