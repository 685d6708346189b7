import string
from enum import StrEnum


# Shortcode symbols ordered [0-9][A-Z][a-z]; index 0 doubles as the padding symbol
BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


class TTL:
    """TTL durations in seconds."""

    # Cached short URL TTL duration (7 days in seconds)
    SEVEN_DAYS = 604_800  # 60 * 60 * 24 * 7


class Shortcode:
    """Default shortcode generation parameters."""

    LENGTH = 6  # Number of symbols in every shortcode
    DIGEST_SIZE = 6  # Number of SHA-256 digest bytes used as the shortcode seed


class DefaultFilter:
    """Default membership filter sizing."""

    CAPACITY = 10_000  # Expected number of shortcodes
    FALSE_POSITIVE_RATE = 0.01  # Target false-positive rate at capacity
    BIT_ARRAY_SIZE = 98_304  # 96 * 1024 bits
    HASH_COUNT = 7


class RedisTimeout:
    """Socket timeouts (seconds) for Redis clients."""

    STORE = 2.0
    CACHE = 1.0


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class ElastiCache(StrEnum):
        # SSM parameter paths for ElastiCache connection details
        HOST_PARAM = 'ELASTICACHE_HOST_PARAM'
        PORT_PARAM = 'ELASTICACHE_PORT_PARAM'
        DB_PARAM = 'ELASTICACHE_DB_PARAM'
        USER_PARAM = 'ELASTICACHE_USER_PARAM'
        # Secrets Manager name holding credentials JSON: {"username": "...", "password": "..."}
        SECRET = 'ELASTICACHE_SECRET'  # noqa: S105

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
