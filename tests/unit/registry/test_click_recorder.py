"""Unit tests for the ClickRecorder

Test coverage includes:

1. Recording
   - Source defaults to 'Direct'; the referrer is kept otherwise.
   - The location comes from the injected lookup.
   - A CLICK_RECORDED event is logged.

2. Geolocation failures
   - A failed lookup records the click with an 'Unknown' location.

3. Rejections
   - Unknown and expired shortcodes are logged and re-raised.
"""

import io
import logging
import urllib.request
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from localshortener.exceptions import LookupFailureError, ShortURLNotFoundError, ShortURLExpiredError
from localshortener.models import Location
from localshortener.registry import URLRegistry, ClickRecorder
from localshortener.utils.constants import LogEvent


T0 = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def registry(short_url_dao) -> URLRegistry:
    registry = URLRegistry(short_url_dao, base_url='https://sho.rt', click_recorder=MagicMock())
    with freeze_time(T0):
        registry.create('https://example.com', validity_minutes=1, custom_shortcode='abc')
    return registry


def click_events(caplog, event):
    return [record for record in caplog.records if getattr(record, 'event', None) == event]


# -------------------------------
# 1. Recording
# -------------------------------


def test_record_direct_click(registry, sofia, caplog):
    caplog.set_level(logging.INFO)
    recorder = ClickRecorder(locate=lambda: sofia)

    with freeze_time(T0 + timedelta(seconds=30)):
        original_url = recorder.record(registry, 'abc')

    assert original_url == 'https://example.com'
    [click] = registry.lookup('abc').clicks
    assert click.timestamp == T0 + timedelta(seconds=30)
    assert click.source == 'Direct'
    assert click.location == sofia

    [record] = click_events(caplog, LogEvent.CLICK_RECORDED)
    assert record.shortcode == 'abc'
    assert record.location == {'country': 'Bulgaria', 'city': 'Sofia', 'region': 'Sofia-Capital'}


def test_record_referred_click(registry, sofia):
    recorder = ClickRecorder(locate=lambda: sofia)

    with freeze_time(T0):
        recorder.record(registry, 'abc', referrer='https://news.ycombinator.com/')

    assert registry.lookup('abc').clicks[0].source == 'https://news.ycombinator.com/'


# -------------------------------
# 2. Geolocation failures
# -------------------------------


def test_record_with_failed_lookup(registry, caplog):
    locate = MagicMock(side_effect=LookupFailureError('Geolocation lookup failed: timed out'))
    recorder = ClickRecorder(locate=locate)

    with freeze_time(T0):
        assert recorder.record(registry, 'abc') == 'https://example.com'

    locate.assert_called_once_with()
    assert registry.lookup('abc').clicks[0].location == Location('Unknown', 'Unknown', 'Unknown')
    [record] = click_events(caplog, LogEvent.GEOLOCATION_FAILED)
    assert record.levelno == logging.WARNING


def test_record_with_malformed_geolocation_response(registry, monkeypatch):
    monkeypatch.setattr(urllib.request, 'urlopen', lambda request, timeout=None: io.BytesIO(b'[' * 200_000))
    recorder = ClickRecorder()

    with freeze_time(T0):
        assert recorder.record(registry, 'abc') == 'https://example.com'

    assert registry.lookup('abc').clicks[0].location == Location.unknown()


def test_unexpected_lookup_errors_propagate(registry):
    recorder = ClickRecorder(locate=MagicMock(side_effect=RuntimeError('bug')))

    with freeze_time(T0), pytest.raises(RuntimeError):
        recorder.record(registry, 'abc')

    assert registry.lookup('abc').clicks == ()


# -------------------------------
# 3. Rejections
# -------------------------------


def test_record_unknown_shortcode(registry, caplog):
    caplog.set_level(logging.INFO)
    locate = MagicMock()

    with pytest.raises(ShortURLNotFoundError):
        ClickRecorder(locate=locate).record(registry, 'nope')

    locate.assert_not_called()
    [record] = click_events(caplog, LogEvent.CLICK_REJECTED)
    assert record.error_code == 'SHORT_URL_NOT_FOUND'


def test_record_expired_shortcode(registry, caplog):
    caplog.set_level(logging.INFO)
    locate = MagicMock()

    with freeze_time(T0 + timedelta(minutes=2)), pytest.raises(ShortURLExpiredError):
        ClickRecorder(locate=locate).record(registry, 'abc')

    locate.assert_not_called()
    assert registry.lookup('abc').clicks == ()
    [record] = click_events(caplog, LogEvent.CLICK_REJECTED)
    assert record.error_code == 'SHORT_URL_EXPIRED'
