from bloomshortener.dao.cache.cache_key_schema import CacheKeySchema
from bloomshortener.dao.cache.mixins import ElastiCacheClientMixin
from bloomshortener.dao.cache.short_url_cache_dao import ShortURLCacheDAO
from bloomshortener.dao.cache.null_cache_dao import NullCacheDAO

__all__ = [
    'CacheKeySchema',
    'ElastiCacheClientMixin',
    'ShortURLCacheDAO',
    'NullCacheDAO',
]
