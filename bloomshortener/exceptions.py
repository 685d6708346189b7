class BloomShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:bloomshortener_error'


class InvalidURLError(BloomShortenerError, ValueError):
    """Raised when a submitted URL can't be normalized into an absolute URL."""

    error_code = 'app:invalid_url'


class ShortURLNotFoundError(BloomShortenerError):
    """Raised when a shortcode doesn't resolve to a target URL.

    Attributes:
        shortcode (str):
            The requested shortcode (may be malformed).
        reason (str):
            Which lookup stage rejected the shortcode:
            'malformed', 'filter_miss' or 'store_miss'.
    """

    error_code = 'app:short_url_not_found'

    MALFORMED = 'malformed'
    FILTER_MISS = 'filter_miss'
    STORE_MISS = 'store_miss'

    def __init__(self, shortcode: str, reason: str):
        super().__init__(f"Short URL with code '{shortcode}' not found ({reason}).")
        self.shortcode = shortcode
        self.reason = reason


class ConfigurationError(BloomShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError, ValueError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
