"""Resolution pipeline: create and resolve short URLs

The pipeline composes a deterministic shortcode generator with a three-tier
lookup chain:

    create:   normalize -> generate -> store.insert_if_absent -> filter.add -> cache.set
    resolve:  validate -> filter.test -> cache.get -> store.get -> cache.set

Failure policy:
    - InvalidURLError / ShortURLNotFoundError are expected outcomes for bad input.
    - DataStoreError (store I/O, timeouts) propagates unmodified and is never retried here.
    - Cache failures never fail an operation: they are logged and skipped.

Classes:
    ResolutionPipeline:
        Orchestrates the generator, membership filter, cache and durable store.

Example:
    >>> store = ShortURLRedisDAO(...)
    >>> bloom = BloomFilter(store.redis, store.keys.filter_bits_key(98_304, 7), 98_304, 7)
    >>> with ResolutionPipeline(store=store, cache=ShortURLCacheDAO(...), bloom_filter=bloom) as pipeline:
    ...     code = pipeline.create('example.com/page')
    ...     pipeline.resolve(code)
    'http://example.com/page'
"""

import functools
import logging
from collections.abc import Callable

from bloomshortener.models import ShortURLModel, ShortenerStats
from bloomshortener.filters import BloomFilter
from bloomshortener.dao.base import ShortURLBaseDAO, ShortURLCacheBaseDAO
from bloomshortener.dao.exceptions import DAOError, ShortURLNotFoundError as StoreMissError
from bloomshortener.exceptions import ShortURLNotFoundError
from bloomshortener.utils.config import ShortenerConfig
from bloomshortener.utils.shortener import generate_shortcode
from bloomshortener.utils.validators import normalize_url, is_valid_shortcode


logger = logging.getLogger(__name__)


class ResolutionPipeline:
    """Create short URLs and resolve shortcodes back to their targets

    All collaborators are injected; the pipeline owns no global state. Whoever
    constructs the pipeline owns its lifecycle: call warm() before serving
    lookups and close() on shutdown (or use the pipeline as a context manager).

    Args:
        store (ShortURLBaseDAO):
            Durable, authoritative store.
        cache (ShortURLCacheBaseDAO):
            Volatile cache consulted before the store.
        bloom_filter (BloomFilter):
            Membership filter, shared by every pipeline over the same store.
        config (ShortenerConfig | None):
            Pipeline tuning. Defaults to ShortenerConfig().
        generator (Callable[[str], str] | None):
            Target -> shortcode function. Defaults to generate_shortcode with
            the configured length and alphabet.

    Attributes:
        ready (bool):
            True once warm() loaded every stored shortcode into the filter.
            Before that, the filter is treated as all-positive.
    """

    def __init__(
        self,
        store: ShortURLBaseDAO,
        cache: ShortURLCacheBaseDAO,
        bloom_filter: BloomFilter,
        config: ShortenerConfig | None = None,
        generator: Callable[[str], str] | None = None,
    ):
        self.config = config or ShortenerConfig()
        self.store = store
        self.cache = cache
        self.bloom_filter = bloom_filter

        # fmt: off
        self.generator = generator or functools.partial(generate_shortcode,
                                                        length=self.config.shortcode_length,
                                                        alphabet=self.config.shortcode_alphabet)
        # fmt: on
        self.ready = False

    def __enter__(self) -> 'ResolutionPipeline':
        self.warm()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def warm(self) -> int:
        """Load every stored shortcode into the membership filter

        Runs once, sequentially, before lookup traffic. Re-adding shortcodes
        another pipeline already added is harmless, and heals bits lost to an
        interruption between a store commit and its filter update. A store
        failure leaves the pipeline not ready (lookups keep deferring to
        cache/store).

        Returns:
            int: number of shortcodes loaded.

        Raises:
            DataStoreError: if the store can't be enumerated.
        """
        loaded = self.bloom_filter.populate(self.store.shortcodes())
        self.ready = True
        logger.info('Membership filter warmed.', extra={'shortcodes': loaded})
        return loaded

    def close(self) -> None:
        self.cache.close()
        self.store.close()

    def create(self, raw_url: str) -> str:
        """Shorten `raw_url`, returning its shortcode (see create_short_url())"""
        return self.create_short_url(raw_url).shortcode

    def create_short_url(self, raw_url: str) -> ShortURLModel:
        """Shorten `raw_url`, returning the normalized target with its shortcode

        Steps:
            1- Normalize the URL (InvalidURLError on failure)
            2- Generate the shortcode from the normalized target
            3- Insert-if-absent into the store (an existing mapping wins silently)
            4- Add the shortcode to the membership filter
            5- Write-through to the cache (best-effort)
            6- Return the submitted target with its shortcode (even on collision)

        NOTE: On a hash collision with a different, already stored target, the
              returned shortcode resolves to that earlier target. This is the
              accepted first-writer-wins policy.

        Raises:
            InvalidURLError: if the URL can't be normalized.
            DataStoreError: if the store write fails (filter and cache are untouched),
                or if the filter update fails after the store commit.
        """
        target = normalize_url(raw_url)
        short_url = ShortURLModel(target=target, shortcode=self.generator(target))
        shortcode = short_url.shortcode

        created = self.store.insert_if_absent(short_url)
        # Only after the store commit: the filter must never claim an uncommitted shortcode
        self.bloom_filter.add(shortcode)

        if created:
            logger.info('Created short URL.', extra={'shortcode': shortcode, 'target': target})
        else:
            logger.debug('Short URL already stored; first writer wins.', extra={'shortcode': shortcode, 'target': target})

        self._cache_put(shortcode, target)
        return short_url

    def resolve(self, shortcode: str) -> str:
        """Resolve `shortcode` to its target URL

        Steps:
            1- Reject malformed shortcodes
            2- Reject shortcodes the membership filter has never seen (no cache/store access)
            3- Return the cached target on a cache hit
            4- Fall back to the store; repopulate the cache on a store hit

        Raises:
            ShortURLNotFoundError: with reason 'malformed', 'filter_miss' or 'store_miss'.
            DataStoreError: if the filter bitmap or the store can't be read.
        """
        if not is_valid_shortcode(shortcode, self.config.shortcode_length, self.config.shortcode_alphabet):
            raise ShortURLNotFoundError(shortcode, ShortURLNotFoundError.MALFORMED)

        if self.ready and not self.bloom_filter.test(shortcode):
            logger.debug('Membership filter miss.', extra={'shortcode': shortcode})
            raise ShortURLNotFoundError(shortcode, ShortURLNotFoundError.FILTER_MISS)

        target = self._cache_get(shortcode)
        if target is not None:
            logger.debug('Cache hit.', extra={'shortcode': shortcode})
            return target

        logger.debug('Cache miss.', extra={'shortcode': shortcode})
        try:
            target = self.store.get(shortcode).target
        except StoreMissError:
            raise ShortURLNotFoundError(shortcode, ShortURLNotFoundError.STORE_MISS) from None

        self._cache_put(shortcode, target)
        return target

    def stats(self) -> ShortenerStats:
        """Report the store's size with the filter and cache tuning

        Raises:
            DataStoreError: if the store count fails.
        """
        return ShortenerStats(
            total_count=self.store.count(),
            filter_parameters=self.bloom_filter.parameters,
            cache_ttl=self.config.cache_ttl,
        )

    def _cache_get(self, shortcode: str) -> str | None:
        try:
            return self.cache.get(shortcode)
        except DAOError as e:
            logger.warning(
                'Cache read failed; falling back to store.',
                extra={'shortcode': shortcode, 'error': e.__class__.__name__, 'reason': str(e)},
            )
            return None

    def _cache_put(self, shortcode: str, target: str) -> None:
        try:
            self.cache.set(shortcode, target, self.config.cache_ttl)
        except DAOError as e:
            logger.warning(
                'Cache write failed; continuing without cache.',
                extra={'shortcode': shortcode, 'error': e.__class__.__name__, 'reason': str(e)},
            )
