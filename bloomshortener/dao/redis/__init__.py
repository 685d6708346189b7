from bloomshortener.dao.redis.redis_key_schema import RedisKeySchema
from bloomshortener.dao.redis.mixins import RedisClientMixin
from bloomshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
]
