from enum import StrEnum


# Short URL defaults
DEFAULT_VALIDITY_MINUTES = 30
SHORTCODE_LENGTH = 6
SHORTCODE_MIN_LENGTH = 3
SHORTCODE_MAX_LENGTH = 10
# Upper bound on shortcode regeneration attempts before giving up
DEFAULT_MAX_ATTEMPTS = 10_000

# Click source when the visitor arrived without a referrer
DIRECT_SOURCE = 'Direct'
UNKNOWN_LOCATION = 'Unknown'

# Maximum number of URLs accepted by a single shorten request
MAX_BATCH_SIZE = 5

# Diagnostic log retention (most recent entries kept)
MAX_LOG_ENTRIES = 1000

# Geolocation lookup defaults
GEOLOCATION_URL = 'https://ipapi.co/json/'
GEOLOCATION_TIMEOUT_SECONDS = 3.0

# Fallback base URL for short links (local invocation, tests, etc.)
DEFAULT_BASE_URL = 'http://localhost:3000'

# Environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'
BASE_URL_ENV = 'BASE_URL'
REDIS_HOST_ENV = 'REDIS_HOST'
REDIS_PORT_ENV = 'REDIS_PORT'
REDIS_DB_ENV = 'REDIS_DB'
REDIS_USERNAME_ENV = 'REDIS_USERNAME'
REDIS_PASSWORD_ENV = 'REDIS_PASSWORD'  # noqa: S105
GEOLOCATION_URL_ENV = 'GEOLOCATION_URL'
GEOLOCATION_TIMEOUT_ENV = 'GEOLOCATION_TIMEOUT'


class LogEvent(StrEnum):
    """Event codes attached to log records as `extra={'event': ...}`.

    Documented `extra` keys per event:
        SHORT_URL_CREATED:      shortcode, original_url, validity_minutes, is_custom
        SHORT_URL_REJECTED:     error_code, original_url, shortcode
        SHORTCODE_EXHAUSTED:    attempts, existing
        CLICK_RECORDED:         shortcode, source, location
        CLICK_REJECTED:         shortcode, error_code
        GEOLOCATION_FAILED:     reason
        STORAGE_LOADED:         count
        STORAGE_LOAD_FAILED:    reason
        STORAGE_LOAD_CORRUPT:   reason
        STORAGE_SAVE_FAILED:    count, reason
        REGISTRY_INITIALIZED:   count
    """

    SHORT_URL_CREATED = 'SHORT_URL_CREATED'
    SHORT_URL_REJECTED = 'SHORT_URL_REJECTED'
    SHORTCODE_EXHAUSTED = 'SHORTCODE_EXHAUSTED'
    CLICK_RECORDED = 'CLICK_RECORDED'
    CLICK_REJECTED = 'CLICK_REJECTED'
    GEOLOCATION_FAILED = 'GEOLOCATION_FAILED'
    STORAGE_LOADED = 'STORAGE_LOADED'
    STORAGE_LOAD_FAILED = 'STORAGE_LOAD_FAILED'
    STORAGE_LOAD_CORRUPT = 'STORAGE_LOAD_CORRUPT'
    STORAGE_SAVE_FAILED = 'STORAGE_SAVE_FAILED'
    REGISTRY_INITIALIZED = 'REGISTRY_INITIALIZED'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
