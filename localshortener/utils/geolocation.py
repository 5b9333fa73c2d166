"""Best-effort IP geolocation lookup

A single GET request to a public IP geolocation endpoint (ipapi.co JSON
format by default), bounded by a timeout. There is no retry: callers treat
any failure as "location unknown".

Functions:
    fetch_location(url=GEOLOCATION_URL, timeout=GEOLOCATION_TIMEOUT_SECONDS) -> Location
        Fetch the visitor's location; raise LookupFailureError on any failure.

Example:
    >>> from localshortener.utils.geolocation import fetch_location
    >>> fetch_location()
    Location(country='Bulgaria', city='Sofia', region='Sofia-Capital')
"""

import json
import logging
import http.client
import urllib.error
import urllib.parse
import urllib.request

from localshortener.exceptions import LookupFailureError
from localshortener.models import Location
from localshortener.utils.constants import GEOLOCATION_URL, GEOLOCATION_TIMEOUT_SECONDS, UNKNOWN_LOCATION


logger = logging.getLogger(__name__)


def _field(payload: dict, key: str) -> str:
    value = payload.get(key)
    return str(value) if value else UNKNOWN_LOCATION


def fetch_location(url: str = GEOLOCATION_URL, timeout: float = GEOLOCATION_TIMEOUT_SECONDS) -> Location:
    """Fetch a geolocation snapshot from an ipapi.co-compatible endpoint

    Args:
        url (str):
            HTTP(S) endpoint returning a JSON object with 'country_name',
            'city' and 'region' keys.
        timeout (float):
            Seconds to wait for the response before giving up.

    Returns:
        Location: snapshot with missing or empty fields set to 'Unknown'.

    Raises:
        LookupFailureError:
            On network errors, timeouts, non-JSON or non-object payloads and
            payloads flagged with {"error": true} (e.g. rate limiting).
    """
    if urllib.parse.urlsplit(url).scheme not in {'http', 'https'}:
        raise LookupFailureError(f'Bad geolocation URL scheme {url}')

    request = urllib.request.Request(url, headers={'Accept': 'application/json'})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:  # noqa: S310
            body = response.read()
    except (urllib.error.URLError, http.client.HTTPException, TimeoutError, OSError) as e:
        raise LookupFailureError(f'Geolocation lookup failed: {e}') from e

    try:
        payload = json.loads(body)
    except (ValueError, RecursionError) as e:
        # NOTE: JSONDecodeError and UnicodeDecodeError are ValueErrors; deeply nested arrays exhaust the stack
        raise LookupFailureError(f'Geolocation lookup returned malformed JSON: {type(e).__name__}') from e

    if not isinstance(payload, dict):
        raise LookupFailureError(f'Geolocation lookup returned a {type(payload).__name__}, expected an object.')
    if payload.get('error'):
        raise LookupFailureError(f'Geolocation lookup was refused: {payload.get("reason", "unknown reason")}')

    location = Location(
        country=_field(payload, 'country_name'),
        city=_field(payload, 'city'),
        region=_field(payload, 'region'),
    )
    logger.debug('Fetched geolocation.', extra={'location': location.to_dict()})
    return location
