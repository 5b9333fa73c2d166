import logging
from http import HTTPStatus
from typing import Any

from localshortener.dao.exceptions import DataStoreError
from localshortener.exceptions import ConfigurationError
from localshortener.lambdas.common import build_log_dao
from localshortener.utils import guarantee_500_response, load_config
from localshortener.utils.helpers import json_response, error_response
from localshortener.lambdas.diagnostic_logs.constants import (
    METHOD_NOT_ALLOWED,
    INVALID_LOG_LEVEL,
    INVALID_LIMIT,
    SERVICE_UNAVAILABLE,
    LOG_LEVELS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Read (GET) or clear (DELETE) the diagnostic log

    GET query parameters:
        level: one of INFO, WARN, ERROR, DEBUG
        limit: return only the N most recent matching entries

    HTTP responses:
        200: {'logs': [...]} or {'message': ...} after clearing
        400: bad level or limit
        405: unsupported HTTP method
        500: configuration or data store failure
    """
    method = (event.get('httpMethod') or 'GET').upper()
    if method not in {'GET', 'DELETE'}:
        return error_response(HTTPStatus.METHOD_NOT_ALLOWED, f'{method} is not supported', error_code=METHOD_NOT_ALLOWED)

    query = event.get('queryStringParameters') or {}
    level = (query.get('level') or '').upper() or None
    if level is not None and level not in LOG_LEVELS:
        return error_response(HTTPStatus.BAD_REQUEST, f"level must be one of {', '.join(sorted(LOG_LEVELS))}", error_code=INVALID_LOG_LEVEL)

    limit = query.get('limit')
    if limit is not None:
        if not str(limit).isdigit():
            return error_response(HTTPStatus.BAD_REQUEST, 'limit must be a non-negative integer', error_code=INVALID_LIMIT)
        limit = int(limit)

    try:
        log_dao = build_log_dao(load_config('diagnostic_logs'))
        if method == 'DELETE':
            log_dao.clear()
            return json_response(HTTPStatus.OK, {'message': 'Diagnostic logs cleared'})
        return json_response(HTTPStatus.OK, {'logs': log_dao.entries(level=level, limit=limit)})
    except (ConfigurationError, DataStoreError):
        logger.exception('Diagnostic log store unavailable. Responding with 500.', extra={'event': SERVICE_UNAVAILABLE})
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=SERVICE_UNAVAILABLE)
