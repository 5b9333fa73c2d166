"""Unit tests for the ShortURLModel, ClickEvent and Location dataclasses.

Test coverage includes:

1. Derived expiry
   - expires_at is created_at + validity_minutes.
   - is_expired() is strict: a record is still active at exactly expires_at.

2. Immutability and click appends
   - Fields cannot be reassigned.
   - with_click() returns a new record and leaves the original untouched.

3. Storage documents
   - to_dict() uses the camelCase storage keys.
   - from_dict() restores an equal record, recomputing the expiry.
   - Malformed documents raise.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone, UTC

import pytest

from localshortener.models import ShortURLModel, ClickEvent, Location


CREATED_AT = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def short_url() -> ShortURLModel:
    return ShortURLModel(
        id='0f1e2d3c',
        original_url='https://example.com/article/123',
        shortcode='abc123',
        short_url='https://sho.rt/abc123',
        created_at=CREATED_AT,
        validity_minutes=30,
    )


@pytest.fixture
def click() -> ClickEvent:
    return ClickEvent(
        timestamp=CREATED_AT + timedelta(minutes=5),
        source='https://news.ycombinator.com/',
        location=Location(country='Bulgaria', city='Sofia', region='Sofia-Capital'),
    )


# -------------------------------
# 1. Derived expiry
# -------------------------------


def test_expires_at_is_derived_from_created_at_and_validity(short_url):
    assert short_url.expires_at == datetime(2025, 10, 15, 12, 30, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    'offset, expired',
    [
        (timedelta(minutes=0), False),
        (timedelta(minutes=29, seconds=59), False),
        (timedelta(minutes=30), False),
        (timedelta(minutes=30, microseconds=1), True),
        (timedelta(days=1), True),
    ],
)
def test_is_expired_is_strictly_after_expires_at(short_url, offset, expired):
    assert short_url.is_expired(CREATED_AT + offset) is expired


def test_default_values():
    short_url = ShortURLModel(id='1', original_url='https://a.com', shortcode='abc', short_url='https://sho.rt/abc', created_at=CREATED_AT)
    assert short_url.validity_minutes == 30
    assert short_url.is_custom is False
    assert short_url.clicks == ()


def test_click_event_defaults():
    click = ClickEvent(timestamp=CREATED_AT)
    assert click.source == 'Direct'
    assert click.location == Location('Unknown', 'Unknown', 'Unknown')
    assert Location.unknown() == Location()


# -------------------------------
# 2. Immutability and click appends
# -------------------------------


def test_short_url_model_is_immutable(short_url):
    with pytest.raises(FrozenInstanceError):
        short_url.shortcode = 'xyz789'
    with pytest.raises(FrozenInstanceError):
        short_url.expires_at = CREATED_AT


def test_with_click_appends_without_mutating(short_url, click):
    updated = short_url.with_click(click)
    second = updated.with_click(ClickEvent(timestamp=click.timestamp + timedelta(seconds=1)))

    assert short_url.clicks == ()
    assert updated.clicks == (click,)
    assert second.clicks[0] == click
    assert len(second.clicks) == 2
    assert second.shortcode == short_url.shortcode
    assert second.expires_at == short_url.expires_at


# -------------------------------
# 3. Storage documents
# -------------------------------


def test_to_dict_uses_storage_keys(short_url, click):
    document = short_url.with_click(click).to_dict()

    assert document == {
        'id': '0f1e2d3c',
        'originalUrl': 'https://example.com/article/123',
        'shortcode': 'abc123',
        'shortUrl': 'https://sho.rt/abc123',
        'createdAt': '2025-10-15T12:00:00Z',
        'expiresAt': '2025-10-15T12:30:00Z',
        'validityMinutes': 30,
        'isCustom': False,
        'clicks': [
            {
                'timestamp': '2025-10-15T12:05:00Z',
                'source': 'https://news.ycombinator.com/',
                'location': {'country': 'Bulgaria', 'city': 'Sofia', 'region': 'Sofia-Capital'},
            }
        ],
    }


def test_from_dict_restores_equal_record(short_url, click):
    original = short_url.with_click(click)
    assert ShortURLModel.from_dict(original.to_dict()) == original


def test_from_dict_recomputes_expiry(short_url):
    document = short_url.to_dict()
    document['expiresAt'] = '2099-01-01T00:00:00Z'

    restored = ShortURLModel.from_dict(document)

    assert restored.expires_at == short_url.expires_at


def test_from_dict_accepts_browser_timestamps_and_missing_location():
    restored = ShortURLModel.from_dict(
        {
            'id': '1729000000000',
            'originalUrl': 'https://example.com',
            'shortcode': 'abc',
            'shortUrl': 'http://localhost:3000/abc',
            'createdAt': '2025-10-15T12:00:00.000Z',
            'expiresAt': '2025-10-15T12:30:00.000Z',
            'validityMinutes': 30,
            'isCustom': True,
            'clicks': [{'timestamp': '2025-10-15T12:01:00.000+02:00', 'source': ''}],
        }
    )

    assert restored.created_at == CREATED_AT
    assert restored.is_custom is True
    assert restored.clicks[0].timestamp == datetime(2025, 10, 15, 12, 1, tzinfo=timezone(timedelta(hours=2)))
    assert restored.clicks[0].source == 'Direct'
    assert restored.clicks[0].location == Location.unknown()


@pytest.mark.parametrize(
    'document',
    [
        [],
        {'originalUrl': 'https://example.com', 'shortcode': 'abc', 'createdAt': '2025-10-15T12:00:00Z'},
        {'id': '1', 'originalUrl': 'https://example.com', 'shortcode': 'abc', 'createdAt': 'yesterday'},
        {'id': '1', 'originalUrl': 'https://example.com', 'shortcode': 'abc', 'createdAt': 1729000000},
        {'id': '1', 'originalUrl': 'https://a.com', 'shortcode': 'abc', 'createdAt': '2025-10-15T12:00:00Z', 'validityMinutes': '30'},
        {'id': '1', 'originalUrl': 123, 'shortcode': 'abc', 'createdAt': '2025-10-15T12:00:00Z'},
        {'id': '1', 'originalUrl': 'https://a.com', 'shortcode': ['abc'], 'createdAt': '2025-10-15T12:00:00Z'},
        {'id': 7, 'originalUrl': 'https://a.com', 'shortcode': 'abc', 'createdAt': '2025-10-15T12:00:00Z'},
        {'id': '1', 'originalUrl': 'https://a.com', 'shortcode': 'abc', 'createdAt': '2025-10-15T12:00:00Z', 'validityMinutes': -5},
        {'id': '1', 'originalUrl': 'https://a.com', 'shortcode': 'abc', 'createdAt': '2025-10-15T12:00:00Z', 'validityMinutes': 0},
    ],
)
def test_from_dict_rejects_malformed_documents(document):
    with pytest.raises((KeyError, TypeError, ValueError)):
        ShortURLModel.from_dict(document)
