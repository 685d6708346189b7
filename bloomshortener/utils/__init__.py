from bloomshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config, ShortenerConfig
from bloomshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from bloomshortener.utils.shortener import generate_shortcode
from bloomshortener.utils.validators import normalize_url, is_valid_shortcode
from bloomshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'normalize_url',
    'is_valid_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'ShortenerConfig',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
