"""Click recording for shortened URLs

Recording a click follows this procedure:
    - Step 1: Resolve the record and check it is still active
    - Step 2: Look up the visitor's location (best-effort, outside the registry lock)
    - Step 3: Build the click event
    - Step 4: Append + persist through the registry as one unit
    - Step 5: Hand the original URL back for the redirect

The geolocation lookup is the only step that may block. It runs before
anything is mutated, so concurrent readers keep seeing the pre-click record.
"""

import logging
from datetime import datetime, UTC
from collections.abc import Callable
from typing import Optional, TYPE_CHECKING

from localshortener.exceptions import LookupFailureError, ShortURLNotFoundError, ShortURLExpiredError
from localshortener.models import ClickEvent, Location
from localshortener.utils.geolocation import fetch_location
from localshortener.utils.constants import DIRECT_SOURCE, LogEvent

if TYPE_CHECKING:
    from localshortener.registry.url_registry import URLRegistry


logger = logging.getLogger(__name__)


class ClickRecorder:
    """Append click events to short URL records.

    Attributes:
        locate (Callable[[], Location]):
            Geolocation lookup. Expected to raise LookupFailureError on failure;
            the failure is absorbed and the click gets an 'Unknown' location.

    Example:
        >>> recorder = ClickRecorder()
        >>> recorder.record(registry, 'abc123', referrer='https://news.ycombinator.com/')
        'https://example.com/article/123'
    """

    def __init__(self, locate: Callable[[], Location] = fetch_location):
        self.locate = locate

    def record(self, registry: 'URLRegistry', shortcode: str, referrer: Optional[str] = None) -> str:
        """Record a click on `shortcode` and return its original URL

        Args:
            registry (URLRegistry):
                Registry owning the record.
            shortcode (str):
                Exact (case-sensitive) shortcode that was visited.
            referrer (Optional[str]):
                Referring URL; 'Direct' is recorded when empty.

        Returns:
            str: the record's original URL.

        Raises:
            ShortURLNotFoundError:
                If no record matches `shortcode`.
            ShortURLExpiredError:
                If the record's validity period has elapsed (nothing is recorded).
            DataStoreError:
                If the updated collection could not be saved (nothing is recorded).
        """
        now = datetime.now(UTC)
        try:
            registry.resolve_active(shortcode, now=now)
        except (ShortURLNotFoundError, ShortURLExpiredError) as e:
            logger.info(
                'Click rejected.',
                extra={'event': LogEvent.CLICK_REJECTED, 'shortcode': shortcode, 'error_code': e.error_code},
            )
            raise

        click = ClickEvent(timestamp=now, source=referrer or DIRECT_SOURCE, location=self._locate())
        short_url = registry.append_click(shortcode, click)

        logger.info(
            'Click recorded.',
            extra={
                'event': LogEvent.CLICK_RECORDED,
                'shortcode': shortcode,
                'source': click.source,
                'location': click.location.to_dict(),
            },
        )
        return short_url.original_url

    def _locate(self) -> Location:
        try:
            return self.locate()
        except LookupFailureError as e:
            logger.warning(
                'Geolocation lookup failed. Recording click with unknown location.',
                extra={'event': LogEvent.GEOLOCATION_FAILED, 'reason': str(e)},
            )
            return Location.unknown()
