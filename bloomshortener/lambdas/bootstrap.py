"""Per-container construction of the resolution pipeline

A Lambda container serves many invocations. The pipeline (Redis clients plus
the membership filter) is built on the first invocation and reused until the
container is recycled.

The filter's bit array lives next to the short URLs in the durable Redis
store, so every Lambda and every container shares one filter: a shortcode
created by shorten_url is immediately visible to redirect_url.

Functions:
    build_cache(prefix: str) -> ShortURLCacheBaseDAO
        Connect the ElastiCache DAO, or fall back to a NullCacheDAO.
    build_pipeline(lambda_name: str, warm: bool = True) -> ResolutionPipeline
        Load AppConfig, connect the store, filter and cache, and warm the filter.
    get_pipeline(lambda_name: str, warm: bool = True) -> ResolutionPipeline
        Cached build_pipeline() (one pipeline per container and Lambda).
"""

import atexit
import functools
import logging

from botocore.exceptions import BotoCoreError, ClientError

from bloomshortener.pipeline import ResolutionPipeline
from bloomshortener.filters import BloomFilter
from bloomshortener.dao.base import ShortURLCacheBaseDAO
from bloomshortener.dao.redis import ShortURLRedisDAO
from bloomshortener.dao.cache import ShortURLCacheDAO, NullCacheDAO
from bloomshortener.dao.exceptions import DAOError
from bloomshortener.exceptions import ConfigurationError
from bloomshortener.utils.config import load_config, app_prefix, ShortenerConfig


logger = logging.getLogger(__name__)


def build_cache(prefix: str) -> ShortURLCacheBaseDAO:
    """Connect the ElastiCache-backed cache DAO

    Any failure to resolve the cache's parameters (SSM, Secrets Manager,
    environment) or to reach it is logged at WARNING and replaced with a
    NullCacheDAO: the cache never decides whether the service is up.
    """
    try:
        return ShortURLCacheDAO(prefix=prefix)
    except (DAOError, ConfigurationError, ValueError, BotoCoreError, ClientError) as e:
        logger.warning(
            'Cache unavailable; serving from the durable store only.',
            extra={'error': e.__class__.__name__, 'reason': str(e)},
        )
        return NullCacheDAO()


def build_pipeline(lambda_name: str, warm: bool = True) -> ResolutionPipeline:
    """Construct (and by default warm) a ResolutionPipeline from the Lambda's AppConfig section

    Args:
        lambda_name (str):
            AppConfig section to load.
        warm (bool):
            Load every stored shortcode into the filter before returning.
            Callers that never resolve shortcodes (stats) skip it.

    Raises:
        BadConfigurationError: if the "shortener" section is invalid.
        DataStoreError: if the store is unreachable or can't be enumerated.
    """
    app_config = load_config(lambda_name)
    config = ShortenerConfig.from_mapping(app_config.get('shortener'))
    prefix = app_prefix()

    logger.debug('Assuming Redis as the backend database for short URLs')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    store = ShortURLRedisDAO(**redis_config, prefix=prefix)

    bit_array_size, hash_count = config.filter_sizing()
    bloom_filter = BloomFilter(
        store.redis,
        store.keys.filter_bits_key(bit_array_size, hash_count),
        bit_array_size,
        hash_count,
        capacity=config.filter_capacity,
        false_positive_rate=config.filter_false_positive_rate,
    )

    pipeline = ResolutionPipeline(store=store, cache=build_cache(prefix), bloom_filter=bloom_filter, config=config)
    if warm:
        pipeline.warm()
    return pipeline


@functools.cache
def get_pipeline(lambda_name: str, warm: bool = True) -> ResolutionPipeline:
    pipeline = build_pipeline(lambda_name, warm=warm)
    atexit.register(pipeline.close)
    return pipeline
