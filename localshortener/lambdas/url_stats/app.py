import logging
from datetime import datetime, UTC
from http import HTTPStatus
from typing import Any

from localshortener.dao.exceptions import DataStoreError
from localshortener.exceptions import ConfigurationError
from localshortener.lambdas.common import build_registry, render_short_url
from localshortener.utils import guarantee_500_response
from localshortener.utils.helpers import json_response, error_response
from localshortener.lambdas.url_stats.constants import (
    INVALID_STATUS_FILTER,
    SHORT_URL_NOT_FOUND,
    STATS_SUCCESS,
    SERVICE_UNAVAILABLE,
    STATUS_FILTERS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests for short URL statistics

    Without a shortcode path parameter the handler returns the summary
    (total / active / expired / clicks) and the record listing. The listing
    can be narrowed with query parameters:
        status: 'active' or 'expired'
        search: case-insensitive substring of original URL, shortcode or short URL

    With a shortcode path parameter it returns that record and its click history.

    HTTP responses:
        200: statistics
        400: unknown status filter
        404: no short URL with this shortcode
        500: configuration or data store failure
    """
    query = event.get('queryStringParameters') or {}
    status_filter = (query.get('status') or '').lower() or None
    if status_filter is not None and status_filter not in STATUS_FILTERS:
        return error_response(
            HTTPStatus.BAD_REQUEST,
            f"status must be one of {', '.join(sorted(STATUS_FILTERS))}",
            error_code=INVALID_STATUS_FILTER,
        )

    try:
        registry = build_registry('url_stats', event)
    except (ConfigurationError, DataStoreError):
        logger.exception('Failed to build URL registry. Responding with 500.', extra={'event': SERVICE_UNAVAILABLE})
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=SERVICE_UNAVAILABLE)

    now = datetime.now(UTC)

    # Single record
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode:
        short_url = registry.lookup(shortcode)
        if short_url is None:
            logger.info('Short URL record not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
            return error_response(HTTPStatus.NOT_FOUND, f"shortcode '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)
        return json_response(HTTPStatus.OK, {'short_url': render_short_url(short_url, now)})

    # Summary + listing
    records = registry.search(query['search']) if query.get('search') else registry.records
    if status_filter == 'active':
        records = [record for record in records if not record.is_expired(now)]
    elif status_filter == 'expired':
        records = [record for record in records if record.is_expired(now)]

    logger.debug('Responding with statistics.', extra={'event': STATS_SUCCESS, 'count': len(records)})
    return json_response(
        HTTPStatus.OK,
        {
            'summary': registry.summary(),
            'short_urls': [render_short_url(record, now) for record in records],
        },
    )
