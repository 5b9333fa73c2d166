from localshortener.utils.config import app_env, app_name, app_prefix, load_config
from localshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from localshortener.utils.shortener import generate_shortcode
from localshortener.utils.validation import validate_destination_url, validate_shortcode_format, validate_validity_minutes
from localshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'validate_destination_url',
    'validate_shortcode_format',
    'validate_validity_minutes',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
