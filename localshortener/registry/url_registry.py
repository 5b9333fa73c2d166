"""In-memory registry of shortened URLs, kept in sync with the data store

The registry owns the collection of ShortURLModel records. It is built once
per session from the data store and every successful mutation is
immediately followed by a full save of the collection:

    create()        -> validate -> pick shortcode -> save -> publish
    record_click()  -> resolve -> (geolocation) -> append -> save -> publish

A new collection is only published in memory after the data store accepted
it, so memory and storage never diverge once an operation returns.

Record states are a pure function of the clock:

    Active  (now <= expires_at)  ->  Expired  (now > expires_at)

Classes:
    URLRegistry:
        Authoritative collection of short URL records.

Example:
    >>> dao = ShortURLRedisDAO(prefix='localshortener:dev')
    >>> registry = URLRegistry(dao, base_url='https://sho.rt')
    >>> short_url = registry.create('https://example.com', validity_minutes=30)
    >>> short_url.short_url
    'https://sho.rt/q7TzK2'
    >>> registry.record_click(short_url.shortcode)
    'https://example.com'
"""

import uuid
import logging
import threading
from datetime import datetime, UTC
from typing import Any, Optional

from localshortener.models import ShortURLModel, ClickEvent
from localshortener.dao.base import ShortURLBaseDAO
from localshortener.dao.exceptions import DataStoreError
from localshortener.registry.click_recorder import ClickRecorder
from localshortener.exceptions import (
    ValidationError,
    InvalidUrlError,
    InvalidShortcodeFormatError,
    InvalidValidityPeriodError,
    ShortcodeTakenError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
    CapacityExceededError,
)
from localshortener.utils.helpers import get_short_url
from localshortener.utils.shortener import generate_shortcode
from localshortener.utils.validation import validate_destination_url, validate_shortcode_format, validate_validity_minutes
from localshortener.utils.constants import DEFAULT_BASE_URL, DEFAULT_VALIDITY_MINUTES, LogEvent


logger = logging.getLogger(__name__)


class URLRegistry:
    """Authoritative in-memory collection of short URL records.

    Every read-modify-persist sequence runs under a re-entrant lock, so
    operations never work on a stale snapshot of the collection. Reads hand
    out immutable records and fresh lists.

    Attributes:
        base_url (str):
            Public base URL used to render `short_url` for new records.
    """

    def __init__(
        self,
        short_url_dao: ShortURLBaseDAO,
        base_url: Optional[str] = None,
        click_recorder: Optional[ClickRecorder] = None,
    ):
        self.base_url = base_url or DEFAULT_BASE_URL
        self._dao = short_url_dao
        self._click_recorder = click_recorder if click_recorder is not None else ClickRecorder()
        self._lock = threading.RLock()
        self._records: list[ShortURLModel] = self._load()

        logger.info('URL registry initialized.', extra={'event': LogEvent.REGISTRY_INITIALIZED, 'count': len(self._records)})

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[ShortURLModel]:
        """Snapshot of every record, in insertion order"""
        return list(self._records)

    def create(
        self,
        original_url: str,
        validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        custom_shortcode: Optional[str] = None,
    ) -> ShortURLModel:
        """Create and persist a new short URL record

        Args:
            original_url (str):
                Absolute destination URL.
            validity_minutes (int):
                Positive number of minutes the record accepts clicks. Defaults to 30.
            custom_shortcode (Optional[str]):
                Caller-chosen shortcode (3-10 alphanumerics). None or '' generates one.

        Returns:
            ShortURLModel: the new record.

        Raises:
            InvalidUrlError, InvalidValidityPeriodError, InvalidShortcodeFormatError:
                If the input is malformed.
            ShortcodeTakenError:
                If `custom_shortcode` is already in use.
            CapacityExceededError:
                If no unused shortcode could be generated.
            DataStoreError:
                If the collection could not be saved.

        The registry is left unchanged whenever an exception is raised.
        """
        custom_shortcode = custom_shortcode or None

        with self._lock:
            try:
                self._validate(original_url, validity_minutes, custom_shortcode)
                existing = {record.shortcode for record in self._records}
                if custom_shortcode is not None and custom_shortcode in existing:
                    raise ShortcodeTakenError(f"Shortcode '{custom_shortcode}' already exists. Please choose a different one.")
                shortcode = custom_shortcode or generate_shortcode(existing)
            except (ValidationError, CapacityExceededError) as e:
                logger.warning(
                    'Short URL creation rejected.',
                    extra={
                        'event': LogEvent.SHORT_URL_REJECTED,
                        'error_code': e.error_code,
                        'original_url': original_url,
                        'shortcode': custom_shortcode,
                    },
                )
                raise

            short_url = ShortURLModel(
                id=uuid.uuid4().hex,
                original_url=original_url,
                shortcode=shortcode,
                short_url=get_short_url(shortcode, self.base_url),
                created_at=datetime.now(UTC),
                validity_minutes=validity_minutes,
                is_custom=custom_shortcode is not None,
            )
            self._commit([*self._records, short_url])

        logger.info(
            'Short URL created.',
            extra={
                'event': LogEvent.SHORT_URL_CREATED,
                'shortcode': short_url.shortcode,
                'original_url': short_url.original_url,
                'validity_minutes': short_url.validity_minutes,
                'is_custom': short_url.is_custom,
            },
        )
        return short_url

    def lookup(self, shortcode: str) -> ShortURLModel | None:
        """Exact, case-sensitive lookup. None if no record matches."""
        with self._lock:
            index = self._index_of(shortcode)
            return None if index is None else self._records[index]

    def list_active(self) -> list[ShortURLModel]:
        now = datetime.now(UTC)
        return [record for record in self.records if not record.is_expired(now)]

    def list_expired(self) -> list[ShortURLModel]:
        now = datetime.now(UTC)
        return [record for record in self.records if record.is_expired(now)]

    def search(self, term: str) -> list[ShortURLModel]:
        """Case-insensitive substring match on original URL, shortcode or short URL"""
        needle = (term or '').lower()
        return [
            record
            for record in self.records
            if needle in record.original_url.lower() or needle in record.shortcode.lower() or needle in record.short_url.lower()
        ]

    def summary(self) -> dict[str, Any]:
        now = datetime.now(UTC)
        records = self.records
        expired = sum(1 for record in records if record.is_expired(now))
        return {
            'total': len(records),
            'active': len(records) - expired,
            'expired': expired,
            'clicks': sum(len(record.clicks) for record in records),
        }

    def record_click(self, shortcode: str, referrer: Optional[str] = None) -> str:
        """Record a click on `shortcode` and return its original URL (see ClickRecorder.record)"""
        return self._click_recorder.record(self, shortcode, referrer=referrer)

    def resolve_active(self, shortcode: str, now: Optional[datetime] = None) -> ShortURLModel:
        """Return the record for `shortcode` if it exists and is active at `now`

        Raises:
            ShortURLNotFoundError: If no record matches.
            ShortURLExpiredError: If the record expired before `now`.
        """
        short_url = self.lookup(shortcode)
        if short_url is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        if short_url.is_expired(now):
            raise ShortURLExpiredError(f"Short URL with code '{shortcode}' has expired.")
        return short_url

    def append_click(self, shortcode: str, click: ClickEvent) -> ShortURLModel:
        """Append `click` to the record and persist the collection as one unit

        Returns:
            ShortURLModel: the updated record.

        Raises:
            ShortURLNotFoundError, ShortURLExpiredError:
                If the record is gone or was expired at `click.timestamp`.
            DataStoreError:
                If the collection could not be saved (the click is discarded).
        """
        with self._lock:
            index = self._index_of(shortcode)
            if index is None:
                raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
            if self._records[index].is_expired(click.timestamp):
                raise ShortURLExpiredError(f"Short URL with code '{shortcode}' has expired.")

            short_url = self._records[index].with_click(click)
            records = list(self._records)
            records[index] = short_url
            self._commit(records)
            return short_url

    def _load(self) -> list[ShortURLModel]:
        try:
            return list(self._dao.load())
        except DataStoreError as e:
            logger.error(
                'Failed to load short URLs. Starting with an empty registry.',
                extra={'event': LogEvent.STORAGE_LOAD_FAILED, 'reason': str(e)},
            )
            return []

    def _commit(self, records: list[ShortURLModel]) -> None:
        # Caller holds self._lock
        try:
            self._dao.save(records)
        except DataStoreError as e:
            logger.error(
                'Failed to save short URLs.',
                extra={'event': LogEvent.STORAGE_SAVE_FAILED, 'count': len(records), 'reason': str(e)},
            )
            raise
        self._records = records

    def _index_of(self, shortcode: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.shortcode == shortcode:
                return index
        return None

    @staticmethod
    def _validate(original_url: Any, validity_minutes: Any, custom_shortcode: Optional[str]) -> None:
        if not validate_destination_url(original_url):
            raise InvalidUrlError(f'Invalid URL format: {original_url!r}')
        if not validate_validity_minutes(validity_minutes):
            raise InvalidValidityPeriodError(f'Validity must be a positive number of minutes (given value: {validity_minutes!r}).')
        if custom_shortcode is not None and not validate_shortcode_format(custom_shortcode):
            raise InvalidShortcodeFormatError('Invalid shortcode format. Use 3-10 alphanumeric characters.')
