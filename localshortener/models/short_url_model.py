from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, UTC
from typing import Any, Optional

from localshortener.types import ShortURLDocument
from localshortener.utils.constants import DEFAULT_VALIDITY_MINUTES, DIRECT_SOURCE, UNKNOWN_LOCATION


def format_timestamp(value: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string, e.g. '2025-10-15T12:00:00.123456Z'"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime (naive values are taken as UTC)"""
    if not isinstance(value, str):
        raise TypeError(f'Timestamp must be of type string (given type: {type(value)}).')
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclass(frozen=True)
class Location:
    """Best-effort geolocation snapshot of a visitor.

    Every field defaults to 'Unknown' when the lookup failed or had no data.
    """

    country: str = UNKNOWN_LOCATION
    city: str = UNKNOWN_LOCATION
    region: str = UNKNOWN_LOCATION

    @classmethod
    def unknown(cls) -> 'Location':
        return cls()

    def to_dict(self) -> dict[str, str]:
        return {'country': self.country, 'city': self.city, 'region': self.region}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> 'Location':
        if data is None:
            return cls.unknown()
        if not isinstance(data, dict):
            raise TypeError(f'Location must be a mapping (given type: {type(data)}).')
        return cls(
            country=str(data.get('country') or UNKNOWN_LOCATION),
            city=str(data.get('city') or UNKNOWN_LOCATION),
            region=str(data.get('region') or UNKNOWN_LOCATION),
        )


@dataclass(frozen=True)
class ClickEvent:
    """One recorded visit through a shortcode.

    Attributes:
        timestamp (datetime):
            Moment of the click (UTC).
        source (str):
            Referring URL, or 'Direct' when the visitor had no referrer.
        location (Location):
            Geolocation snapshot taken while recording the click.
    """

    timestamp: datetime
    source: str = DIRECT_SOURCE
    location: Location = field(default_factory=Location.unknown)

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': format_timestamp(self.timestamp),
            'source': self.source,
            'location': self.location.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ClickEvent':
        return cls(
            timestamp=parse_timestamp(data['timestamp']),
            source=data.get('source') or DIRECT_SOURCE,
            location=Location.from_dict(data.get('location')),
        )


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL record and its click history.

    Records are immutable: a click produces a new record via `with_click()`.
    The expiry moment is always derived from `created_at` and `validity_minutes`.

    Attributes:
        id (str):
            Opaque unique identifier assigned at creation.
        original_url (str):
            The original long URL that the shortcode redirects to.
        shortcode (str):
            The unique short identifier (3-10 alphanumeric characters).
        short_url (str):
            Display form of the short link, '<base url>/<shortcode>'.
        created_at (datetime):
            Creation moment (UTC).
        validity_minutes (int):
            Number of minutes the record accepts clicks after creation.
        is_custom (bool):
            True if the shortcode was supplied by the caller.
        clicks (tuple[ClickEvent, ...]):
            Recorded clicks in chronological order.

    Example:
        >>> from datetime import datetime, UTC
        >>> url = ShortURLModel(
        ...     id='5f0c...',
        ...     original_url='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     short_url='http://localhost:3000/abc123',
        ...     created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
        ... )
        >>> url.expires_at
        datetime.datetime(2025, 10, 15, 12, 30, tzinfo=datetime.timezone.utc)
        >>> url.is_expired(datetime(2025, 10, 15, 12, 30, tzinfo=UTC))
        False
    """

    id: str
    original_url: str
    shortcode: str
    short_url: str
    created_at: datetime
    validity_minutes: int = DEFAULT_VALIDITY_MINUTES
    is_custom: bool = False
    clicks: tuple[ClickEvent, ...] = ()

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(minutes=self.validity_minutes)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True iff `now` is strictly after the expiry moment"""
        now = now if now is not None else datetime.now(UTC)
        return now > self.expires_at

    def with_click(self, click: ClickEvent) -> 'ShortURLModel':
        return replace(self, clicks=(*self.clicks, click))

    def to_dict(self) -> ShortURLDocument:
        return {
            'id': self.id,
            'originalUrl': self.original_url,
            'shortcode': self.shortcode,
            'shortUrl': self.short_url,
            'createdAt': format_timestamp(self.created_at),
            'expiresAt': format_timestamp(self.expires_at),
            'validityMinutes': self.validity_minutes,
            'isCustom': self.is_custom,
            'clicks': [click.to_dict() for click in self.clicks],
        }

    @classmethod
    def from_dict(cls, data: ShortURLDocument) -> 'ShortURLModel':
        """Build a record from its storage document.

        NOTE: the stored 'expiresAt' is informational only; the expiry moment
              is recomputed from 'createdAt' and 'validityMinutes'.

        Raises:
            KeyError, TypeError, ValueError: if the document is malformed.
        """
        if not isinstance(data, dict):
            raise TypeError(f'Record must be a mapping (given type: {type(data)}).')

        for key in ('id', 'originalUrl', 'shortcode'):
            if not isinstance(data[key], str):
                raise TypeError(f'{key} must be a string (given type: {type(data[key])}).')

        validity_minutes = data.get('validityMinutes', DEFAULT_VALIDITY_MINUTES)
        if isinstance(validity_minutes, bool) or not isinstance(validity_minutes, int):
            raise TypeError(f'validityMinutes must be an integer (given type: {type(validity_minutes)}).')
        if validity_minutes <= 0:
            raise ValueError(f'validityMinutes must be positive (given: {validity_minutes}).')

        return cls(
            id=data['id'],
            original_url=data['originalUrl'],
            shortcode=data['shortcode'],
            short_url=data.get('shortUrl', ''),
            created_at=parse_timestamp(data['createdAt']),
            validity_minutes=validity_minutes,
            is_custom=bool(data.get('isCustom', False)),
            clicks=tuple(ClickEvent.from_dict(click) for click in data.get('clicks') or []),
        )
