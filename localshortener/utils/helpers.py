"""Request/response plumbing shared by the handlers

`base_url()` and `get_short_url()` turn an API Gateway event into public
short URLs; `json_response()` and `error_response()` build proxy responses
whose error bodies read '<reason phrase> (<detail>)' plus an optional
'errorCode'. `require_environment` and `guarantee_500_response` are the two
decorators put around config loaders and handlers respectively.

    >>> base_url({'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}})
    'https://sho.rt'
    >>> get_short_url('abc123', 'https://sho.rt/')
    'https://sho.rt/abc123'
"""

import os
import json
import logging
import functools
from http import HTTPStatus
from typing import Any
from collections.abc import Callable

from localshortener.exceptions import MissingEnvironmentVariableError
from localshortener.utils.runtime import running_locally
from localshortener.utils.constants import BASE_URL_ENV, DEFAULT_BASE_URL, UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET,DELETE',
}


def base_url(event: dict[str, Any]) -> str:
    """Public origin the client used to reach the handler

    Default execute-api hosts need the stage as first path segment, custom
    domains map stages through base path mappings and don't. Events without
    a domain (local invocations) fall back to BASE_URL, then to
    http://localhost:3000.
    """
    context = event.get('requestContext') or {}
    domain = context.get('domainName', '')
    if not domain:
        return os.environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL
    if 'execute-api' in domain:
        return f"https://{domain}/{context.get('stage', '')}"
    return f'https://{domain}'


def get_short_url(shortcode: str, base: str) -> str:
    """'<base>/<shortcode>', tolerating a trailing slash on `base`"""
    return f'{base.rstrip("/")}/{shortcode}'


def json_response(status_code: int, body: Any, headers: dict[str, str] | None = None) -> dict[str, Any]:
    return {
        'statusCode': int(status_code),
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def error_response(status_code: int, message: str | None = None, error_code: str | None = None) -> dict[str, Any]:
    base = HTTPStatus(status_code).phrase
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(status_code, body)


def require_environment(*names: str) -> Callable:
    """Fail with MissingEnvironmentVariableError unless every variable in `names` is set and non-empty

    All missing names are reported at once:

        >>> @require_environment('REDIS_HOST', 'APP_NAME')
        ... def load():
        ...     ...
        >>> load()
        MissingEnvironmentVariableError: Missing required environment variables: 'REDIS_HOST', 'APP_NAME'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            unset = [f"'{name}'" for name in names if not os.environ.get(name)]
            if unset:
                raise MissingEnvironmentVariableError('Missing required environment variables: ' + ', '.join(unset))
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator turning any unhandled handler exception into a 500 response.

    When running locally the exception is re-raised instead, so it shows up
    with its full traceback.
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in handler. Responding with 500.', extra={'handler': handler.__name__})
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
