"""Application-specific exceptions.

Every exception carries a stable `error_code` which handlers put in their
response bodies and loggers attach to log records.

Classes:
    LocalShortenerError:
        Base exception for all application-specific errors.

    ValidationError:
        Base exception for rejected caller input (nothing was mutated).

    InvalidUrlError, InvalidShortcodeFormatError, InvalidValidityPeriodError:
        Raised when a create request carries malformed input.

    ShortcodeTakenError:
        Raised when a custom shortcode collides with an existing record.

    ShortURLNotFoundError, ShortURLExpiredError:
        Raised when a click cannot be recorded for a shortcode.

    CapacityExceededError:
        Raised when the shortcode generator gives up finding a free code.

    LookupFailureError:
        Raised by the geolocation lookup; always absorbed by the click recorder.

    ConfigurationError, MissingEnvironmentVariableError, BadConfigurationError:
        Raised when the application is misconfigured.

Example:
    >>> from localshortener.exceptions import ShortcodeTakenError
    >>> raise ShortcodeTakenError("Shortcode 'abc' already exists.")
    Traceback (most recent call last):
        ...
    localshortener.exceptions.ShortcodeTakenError: Shortcode 'abc' already exists.
"""


class LocalShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'LOCAL_SHORTENER_ERROR'


class ValidationError(LocalShortenerError):
    """Base exception for rejected caller input."""

    error_code = 'VALIDATION_ERROR'


class InvalidUrlError(ValidationError):
    """Raised when a destination URL is not a well-formed absolute URL."""

    error_code = 'INVALID_URL'


class InvalidShortcodeFormatError(ValidationError):
    """Raised when a custom shortcode is not 3-10 alphanumeric characters."""

    error_code = 'INVALID_SHORTCODE_FORMAT'


class InvalidValidityPeriodError(ValidationError):
    """Raised when the validity period is not a positive number of minutes."""

    error_code = 'INVALID_VALIDITY_PERIOD'


class ShortcodeTakenError(ValidationError):
    """Raised when a custom shortcode is already in use."""

    error_code = 'SHORTCODE_TAKEN'


class ShortURLNotFoundError(LocalShortenerError):
    """Raised when no record matches a shortcode."""

    error_code = 'SHORT_URL_NOT_FOUND'


class ShortURLExpiredError(LocalShortenerError):
    """Raised when a record's validity period has elapsed."""

    error_code = 'SHORT_URL_EXPIRED'


class CapacityExceededError(LocalShortenerError):
    """Raised when no unused shortcode could be generated."""

    error_code = 'SHORTCODE_CAPACITY_EXCEEDED'


class LookupFailureError(LocalShortenerError):
    """Raised when the geolocation lookup fails (network, timeout, bad payload)."""

    error_code = 'GEOLOCATION_LOOKUP_FAILED'


class ConfigurationError(LocalShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'CONFIGURATION_ERROR'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MISSING_ENVIRONMENT_VARIABLE'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BAD_CONFIGURATION'
