"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`)
has a dedicated AppConfig *Environment* within the shared AppConfig
*Application* identified by `APP_NAME`. Configuration data is stored as a JSON
document under a configuration profile (typically `backend-config`).

The configuration JSON follows this structure:

    {
        "active_backend": "redis",
        "shortener": {
            "filter_capacity": 10000,
            "filter_false_positive_rate": 0.01,
            "filter_bit_array_size": 98304,
            "filter_hash_count": 7,
            "shortcode_length": 6,
            "cache_ttl": 604800
        },
        "configs": {
            "shorten_url": {
                "redis": { ... }
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own backend section (e.g., `"shorten_url"`) plus the
shared `"shortener"` tuning section, which is parsed into a validated
`ShortenerConfig`.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig (or a local
        AppConfig agent when running under SAM).

Classes:
    ShortenerConfig
        Validated resolution pipeline tuning (filter sizing, shortcode shape, cache TTL).

Example:
    Typical usage inside a Lambda handler:

        >>> from bloomshortener.utils.config import load_config, ShortenerConfig
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
        >>> ShortenerConfig.from_mapping(app_config['shortener']).cache_ttl
        604800
"""

import os
import json
import math
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any
from collections.abc import Callable, Mapping

import boto3

from bloomshortener.constants import BASE62_ALPHABET, ENV, TTL, DefaultFilter, Shortcode
from bloomshortener.exceptions import BadConfigurationError
from bloomshortener.types import AppConfig, AppConfigDataClient
from bloomshortener.utils.helpers import require_environment
from bloomshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Example:
        >>> os.environ['APP_NAME'] = 'bloomshortener'
        >>> app_name()
        'bloomshortener'
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Finds the project root via the CloudFormation environment variable PROJECT_ROOT.
    Falls back to the current file's directory.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'bloomshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'bloomshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _select_sections(document: dict, lambda_name: str) -> AppConfig:
    backend = document['active_backend']
    return {
        backend: document['configs'][lambda_name][backend],
        'shortener': document.get('shortener', {}),
    }


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the configuration JSON from the local agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    def _validate_agent_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = _validate_agent_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return _select_sections(document, lambda_name)

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> AppConfig:
    """Load configuration for a given Lambda from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: {<active backend>: {...backend config...}, 'shortener': {...pipeline tuning...}}

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    document = json.loads(response['Configuration'].read().decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return _select_sections(document, lambda_name)


@dataclass(frozen=True)
class ShortenerConfig:
    """Resolution pipeline tuning, validated at construction time.

    Attributes:
        filter_capacity (int):
            Expected number of shortcodes in the membership filter.
        filter_false_positive_rate (float):
            Target false-positive rate at capacity, in (0, 1).
        filter_bit_array_size (int | None):
            Width of the filter's bit array. None derives it from capacity/rate.
        filter_hash_count (int | None):
            Number of hash functions. None derives it from capacity/rate.
        shortcode_length (int):
            Number of symbols in every shortcode.
        shortcode_alphabet (str):
            Ordered shortcode symbols; index 0 pads short encodings.
        cache_ttl (int):
            Seconds a cached mapping lives.

    Raises:
        BadConfigurationError: if any value is out of range.

    Example:
        >>> ShortenerConfig(cache_ttl=3600).cache_ttl
        3600
        >>> ShortenerConfig(filter_bit_array_size=None, filter_hash_count=None).filter_sizing()
        (95851, 7)
    """

    filter_capacity: int = DefaultFilter.CAPACITY
    filter_false_positive_rate: float = DefaultFilter.FALSE_POSITIVE_RATE
    filter_bit_array_size: int | None = DefaultFilter.BIT_ARRAY_SIZE
    filter_hash_count: int | None = DefaultFilter.HASH_COUNT
    shortcode_length: int = Shortcode.LENGTH
    shortcode_alphabet: str = BASE62_ALPHABET
    cache_ttl: int = TTL.SEVEN_DAYS

    def __post_init__(self):
        if not isinstance(self.filter_capacity, int) or self.filter_capacity < 1:
            raise BadConfigurationError(f'filter_capacity must be a positive integer (given value: {self.filter_capacity!r}).')
        if not isinstance(self.filter_false_positive_rate, (int, float)) or not 0 < self.filter_false_positive_rate < 1:
            raise BadConfigurationError(
                f'filter_false_positive_rate must be in (0, 1) (given value: {self.filter_false_positive_rate!r}).'
            )
        for name in ('filter_bit_array_size', 'filter_hash_count'):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or value < 1):
                raise BadConfigurationError(f'{name} must be a positive integer or None (given value: {value!r}).')
        if not isinstance(self.shortcode_length, int) or self.shortcode_length < 1:
            raise BadConfigurationError(f'shortcode_length must be a positive integer (given value: {self.shortcode_length!r}).')
        alphabet = self.shortcode_alphabet
        if not isinstance(alphabet, str) or len(alphabet) < 2 or len(set(alphabet)) != len(alphabet):
            raise BadConfigurationError(f'shortcode_alphabet must hold at least two unique symbols (given value: {alphabet!r}).')
        if not isinstance(self.cache_ttl, int) or self.cache_ttl < 1:
            raise BadConfigurationError(f'cache_ttl must be a positive integer (given value: {self.cache_ttl!r}).')

    def filter_sizing(self) -> tuple[int, int]:
        """Return (bit_array_size, hash_count), deriving unset values from capacity and rate

        m = ceil(-n * ln(p) / ln(2)^2)
        k = round(m / n * ln(2))
        """
        n, p = self.filter_capacity, self.filter_false_positive_rate
        bit_array_size = self.filter_bit_array_size or math.ceil(-n * math.log(p) / math.log(2) ** 2)
        hash_count = self.filter_hash_count or max(1, round(bit_array_size / n * math.log(2)))
        return bit_array_size, hash_count

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> 'ShortenerConfig':
        """Build a ShortenerConfig from AppConfig's "shortener" section

        Missing keys fall back to defaults.

        Raises:
            BadConfigurationError: on unknown keys or invalid values.
        """
        mapping = dict(mapping or {})
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise BadConfigurationError(f'Unknown shortener configuration keys: {", ".join(unknown)}')
        return cls(**mapping)
