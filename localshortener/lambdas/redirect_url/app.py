import logging
from http import HTTPStatus
from typing import Any

from localshortener.dao.exceptions import DataStoreError
from localshortener.exceptions import ConfigurationError, ShortURLNotFoundError, ShortURLExpiredError
from localshortener.lambdas.common import build_registry
from localshortener.utils import guarantee_500_response, get_short_url
from localshortener.utils.helpers import error_response, json_response
from localshortener.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_SUCCESS,
    SERVICE_UNAVAILABLE,
)


logger = logging.getLogger(__name__)


def redirect_response(location: str) -> dict[str, Any]:
    return json_response(HTTPStatus.FOUND, {}, headers={'Location': location})


def _referrer(event: dict[str, Any]) -> str | None:
    headers = event.get('headers') or {}
    for name, value in headers.items():
        if name.lower() in {'referer', 'referrer'} and value:
            return value
    return None


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Record a click on `/{shortcode}` and redirect to the destination URL

    The click (timestamp, Referer header, best-effort location) is persisted
    before the redirect is issued. Unknown shortcodes get 404, expired ones
    410 and nothing is recorded for either.

    HTTP responses:
        302: redirect, destination in the Location header
        400: no shortcode in the path
        404: unknown shortcode
        410: expired short URL
        500: configuration or data store failure
    """
    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return error_response(HTTPStatus.BAD_REQUEST, "missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    # 2- Build URL registry
    try:
        registry = build_registry('redirect_url', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to build URL registry. Responding with 500.', extra={'event': SERVICE_UNAVAILABLE})
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=SERVICE_UNAVAILABLE)
    short_url = get_short_url(shortcode, registry.base_url)
    logger.debug('Client requested short URL %s.', short_url)

    # 3- Record the click
    try:
        target_url = registry.record_click(shortcode, referrer=_referrer(event))
    except ShortURLNotFoundError:
        logger.info(
            'Short URL record not found. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return error_response(HTTPStatus.NOT_FOUND, f"short url {short_url} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except ShortURLExpiredError:
        logger.info(
            'Short URL has expired. Responding with 410.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED},
        )
        return error_response(HTTPStatus.GONE, f'short url {short_url} has expired', error_code=SHORT_URL_EXPIRED)
    except DataStoreError:
        logger.exception('Failed to persist click. Responding with 500.', extra={'shortcode': shortcode, 'event': SERVICE_UNAVAILABLE})
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=SERVICE_UNAVAILABLE)

    # 4- Redirect client to original URL
    logger.info(
        'Redirecting client to original URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return redirect_response(target_url)
