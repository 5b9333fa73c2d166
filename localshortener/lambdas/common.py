"""Wiring shared by the request handlers

Functions:
    build_log_dao(config) -> DiagnosticLogRedisDAO
        Build the diagnostic log DAO and route application logs into it.
    build_registry(function_name, event) -> URLRegistry
        Load configuration, initialize logging and construct the URL registry.
    render_short_url(short_url, now=None) -> dict
        Render a record for a response body (storage document + status + click count).
    http_status_for(error) -> HTTPStatus
        Map an application error onto the HTTP status reported to clients.
"""

import functools
from datetime import datetime, UTC
from http import HTTPStatus
from typing import Any, Optional

from localshortener.dao.redis import ShortURLRedisDAO, DiagnosticLogRedisDAO
from localshortener.exceptions import (
    LocalShortenerError,
    ValidationError,
    ShortcodeTakenError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
)
from localshortener.models import ShortURLModel
from localshortener.registry import URLRegistry, ClickRecorder
from localshortener.utils import load_config, app_prefix, base_url, initialize_logging
from localshortener.utils.geolocation import fetch_location


def build_log_dao(config: dict[str, Any]) -> DiagnosticLogRedisDAO:
    log_dao = DiagnosticLogRedisDAO.from_config(config['redis'], prefix=app_prefix())
    initialize_logging(log_dao)
    return log_dao


def build_registry(function_name: str, event: dict[str, Any]) -> URLRegistry:
    """Construct the URL registry for one handler invocation

    Raises:
        ConfigurationError:
            If the environment is missing or holds bad configuration.
        DataStoreError:
            If Redis is unreachable.
    """
    config = load_config(function_name)
    build_log_dao(config)

    short_url_dao = ShortURLRedisDAO.from_config(config['redis'], prefix=app_prefix())
    locate = functools.partial(fetch_location, **config['geolocation'])
    return URLRegistry(
        short_url_dao,
        base_url=config['base_url'] or base_url(event),
        click_recorder=ClickRecorder(locate=locate),
    )


def render_short_url(short_url: ShortURLModel, now: Optional[datetime] = None) -> dict[str, Any]:
    now = now if now is not None else datetime.now(UTC)
    return {
        **short_url.to_dict(),
        'status': 'expired' if short_url.is_expired(now) else 'active',
        'clickCount': len(short_url.clicks),
    }


def http_status_for(error: LocalShortenerError) -> HTTPStatus:
    if isinstance(error, ShortcodeTakenError):
        return HTTPStatus.CONFLICT
    if isinstance(error, ValidationError):
        return HTTPStatus.BAD_REQUEST
    if isinstance(error, ShortURLNotFoundError):
        return HTTPStatus.NOT_FOUND
    if isinstance(error, ShortURLExpiredError):
        return HTTPStatus.GONE
    return HTTPStatus.INTERNAL_SERVER_ERROR
