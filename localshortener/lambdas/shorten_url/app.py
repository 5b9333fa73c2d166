import json
import logging
from http import HTTPStatus
from typing import Any

from localshortener.dao.exceptions import DataStoreError
from localshortener.exceptions import LocalShortenerError, ConfigurationError, ValidationError
from localshortener.lambdas.common import build_registry, render_short_url, http_status_for
from localshortener.registry import URLRegistry
from localshortener.utils import guarantee_500_response
from localshortener.utils.helpers import json_response, error_response
from localshortener.utils.constants import DEFAULT_VALIDITY_MINUTES, MAX_BATCH_SIZE
from localshortener.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_URL,
    TOO_MANY_URLS,
    SHORTEN_SUCCESS,
    SHORTEN_FAILED,
    SERVICE_UNAVAILABLE,
)


logger = logging.getLogger(__name__)


class MissingUrlError(ValidationError):
    error_code = MISSING_URL


def _validity_minutes(value: Any) -> Any:
    # Form submissions may send the number as a string
    if value is None or value == '':
        return DEFAULT_VALIDITY_MINUTES
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def _shorten(registry: URLRegistry, item: Any) -> dict[str, Any]:
    if not isinstance(item, dict) or not item.get('url'):
        raise MissingUrlError("missing 'url' in JSON body")

    url = item['url'].strip() if isinstance(item['url'], str) else item['url']
    shortcode = item.get('shortcode')
    if isinstance(shortcode, str):
        shortcode = shortcode.strip()

    short_url = registry.create(
        url,
        validity_minutes=_validity_minutes(item.get('validity_minutes')),
        custom_shortcode=shortcode or None,
    )
    return render_short_url(short_url)


def _error_body(error: LocalShortenerError) -> dict[str, Any]:
    return {'message': str(error), 'errorCode': error.error_code}


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This handler follows this procedure to shorten URLs:
    - Step 1: Extract the URL(s) from the request body
    - Step 2: Build the URL registry (config, logging, data store)
    - Step 3: Create a short URL record per requested URL
    - Step 4: Respond with the created record(s)

    Request body (single URL):
        {"url": "https://example.com", "validity_minutes": 30, "shortcode": "abc123"}

    Request body (batch of up to 5 URLs):
        {"urls": [{"url": ...}, {"url": ..., "shortcode": ...}]}

    HTTP responses:
        201: Short URL(s) created
            short_url: created record (single request)
            results / errors: created records and per-item errors (batch request)
        400: Bad client request
            message: invalid JSON, missing URL, too many URLs or invalid input
        409: Conflict
            message: custom shortcode already exists
        500: Internal server error
            message: configuration or data store failure

    Args:
        event (dict):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['short_url']['originalUrl']
        'https://example.com'
    """
    # 1- Extract URL(s) from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return error_response(HTTPStatus.BAD_REQUEST, 'invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        return error_response(HTTPStatus.BAD_REQUEST, 'JSON body must be an object', error_code=INVALID_JSON_BODY)

    batch = 'urls' in request_body
    items = request_body['urls'] if batch else [request_body]
    if not isinstance(items, list) or not items:
        return error_response(HTTPStatus.BAD_REQUEST, "missing 'url' in JSON body", error_code=MISSING_URL)
    if len(items) > MAX_BATCH_SIZE:
        return error_response(
            HTTPStatus.BAD_REQUEST,
            f'at most {MAX_BATCH_SIZE} URLs can be shortened at once',
            error_code=TOO_MANY_URLS,
        )

    # 2- Build URL registry
    try:
        registry = build_registry('shorten_url', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to build URL registry. Responding with 500.', extra={'event': SERVICE_UNAVAILABLE})
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=SERVICE_UNAVAILABLE)

    # 3- Create a short URL record per requested URL
    results, errors = [], []
    for index, item in enumerate(items):
        try:
            results.append(_shorten(registry, item))
        except LocalShortenerError as e:
            if not batch:
                status = http_status_for(e)
                logger.info('Failed to shorten URL. Responding with %s.', int(status), extra={'event': SHORTEN_FAILED, 'error_code': e.error_code})
                return error_response(status, str(e), error_code=e.error_code)
            errors.append({'index': index, **_error_body(e)})

    # 4- Respond with created record(s)
    if not batch:
        logger.info('Shortened URL. Responding with 201.', extra={'event': SHORTEN_SUCCESS, 'shortcode': results[0]['shortcode']})
        return json_response(
            HTTPStatus.CREATED,
            {
                'message': f'Successfully shortened {results[0]["originalUrl"]} to {results[0]["shortUrl"]}',
                'short_url': results[0],
            },
        )

    if not results:
        logger.info('Failed to shorten every URL in batch. Responding with 400.', extra={'event': SHORTEN_FAILED, 'count': len(errors)})
        return json_response(HTTPStatus.BAD_REQUEST, {'message': 'Bad Request (no URL could be shortened)', 'errors': errors})

    logger.info('Shortened URL batch. Responding with 201.', extra={'event': SHORTEN_SUCCESS, 'count': len(results), 'failed': len(errors)})
    return json_response(
        HTTPStatus.CREATED,
        {
            'message': f'Successfully shortened {len(results)} of {len(items)} URLs',
            'results': results,
            'errors': errors,
        },
    )
