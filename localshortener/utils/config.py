"""Utility functions for application configuration management.

Configuration is read from environment variables. Each handler loads its
configuration through `load_config()`, which returns a dictionary of the
following shape:

    {
        "redis": {"host": ..., "port": ..., "db": ..., "username": ..., "password": ...},
        "geolocation": {"url": ..., "timeout": ...},
        "base_url": ... | None
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(function_name: str) -> dict
        Load the configuration for a given handler.

Example:
    Typical usage inside a handler:

        >>> from localshortener.utils.config import load_config
        >>> config = load_config('shorten_url')
        >>> print(config['redis']['host'])
        localhost
"""

import os
import logging
from typing import TypeVar

from localshortener.exceptions import BadConfigurationError
from localshortener.types import LambdaConfiguration
from localshortener.utils.helpers import require_environment
from localshortener.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    BASE_URL_ENV,
    REDIS_HOST_ENV,
    REDIS_PORT_ENV,
    REDIS_DB_ENV,
    REDIS_USERNAME_ENV,
    REDIS_PASSWORD_ENV,
    GEOLOCATION_URL_ENV,
    GEOLOCATION_TIMEOUT_ENV,
    GEOLOCATION_URL,
    GEOLOCATION_TIMEOUT_SECONDS,
)


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'localshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'localshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


T = TypeVar('T', int, float)


def _env_number(name: str, default: T, cast: type[T]) -> T:
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise BadConfigurationError(f"Environment variable '{name}' must be a number (given value: {raw!r}).") from e
    if value < 0:
        raise BadConfigurationError(f"Environment variable '{name}' must be non-negative (given value: {raw!r}).")
    return value


@require_environment(REDIS_HOST_ENV)
def load_config(function_name: str) -> LambdaConfiguration:
    """Load configuration for a given handler from the environment

    Environment variables:
        REDIS_HOST            – Redis hostname (required)
        REDIS_PORT            – Redis port (default: 6379)
        REDIS_DB              – Redis database index (default: 0)
        REDIS_USERNAME        – Redis ACL username (optional)
        REDIS_PASSWORD        – Redis password (optional)
        GEOLOCATION_URL       – IP geolocation endpoint (default: https://ipapi.co/json/)
        GEOLOCATION_TIMEOUT   – Geolocation timeout in seconds (default: 3)
        BASE_URL              – Public base URL for short links (optional)

    Args:
        function_name (str):
            Name of the handler (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: The handler's configuration as a Python dictionary.

    Raises:
        MissingEnvironmentVariableError:
            If REDIS_HOST is not set.
        BadConfigurationError:
            If a numeric variable holds a non-numeric or negative value.
    """
    config = {
        'redis': {
            'host': os.environ[REDIS_HOST_ENV],
            'port': _env_number(REDIS_PORT_ENV, 6379, int),
            'db': _env_number(REDIS_DB_ENV, 0, int),
            'username': os.environ.get(REDIS_USERNAME_ENV) or None,
            'password': os.environ.get(REDIS_PASSWORD_ENV) or None,
        },
        'geolocation': {
            'url': os.environ.get(GEOLOCATION_URL_ENV) or GEOLOCATION_URL,
            'timeout': _env_number(GEOLOCATION_TIMEOUT_ENV, GEOLOCATION_TIMEOUT_SECONDS, float),
        },
        'base_url': os.environ.get(BASE_URL_ENV) or None,
    }
    logger.debug('Loaded configuration from environment.', extra={'functionName': function_name, 'appEnv': app_env()})
    return config
