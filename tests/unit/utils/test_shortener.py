"""Unit tests for generate_shortcode() in shortener.py.

Test coverage includes:

1. Output format
   - Default length of 6 characters drawn from [A-Za-z0-9].
   - Custom lengths are honoured.

2. Collision handling
   - Codes present in `existing_codes` are regenerated.
   - CapacityExceededError is raised once the attempt budget is spent.

3. Argument validation
   - Non-positive length or attempt count raises ValueError.
"""

import logging
from itertools import cycle

import pytest

from localshortener.exceptions import CapacityExceededError
from localshortener.utils import shortener
from localshortener.utils.constants import LogEvent
from localshortener.utils.shortener import generate_shortcode, ALPHABET


# -------------------------------
# 1. Output format
# -------------------------------


def test_alphabet_is_base62():
    assert len(ALPHABET) == 62
    assert len(set(ALPHABET)) == 62


def test_generate_shortcode_default_length():
    for _ in range(200):
        shortcode = generate_shortcode(set())
        assert len(shortcode) == 6
        assert all(char in ALPHABET for char in shortcode)


@pytest.mark.parametrize('length', [3, 8, 10])
def test_generate_shortcode_custom_length(length):
    assert len(generate_shortcode(set(), length=length)) == length


def test_generate_shortcode_produces_distinct_codes():
    existing = set()
    for _ in range(500):
        existing.add(generate_shortcode(existing))
    assert len(existing) == 500


# -------------------------------
# 2. Collision handling
# -------------------------------


def test_generate_shortcode_skips_taken_codes(monkeypatch):
    candidates = iter(['abc123', 'XYZ789', 'fresh1'])
    monkeypatch.setattr(shortener, '_random_code', lambda length: next(candidates))

    assert generate_shortcode({'abc123', 'XYZ789'}) == 'fresh1'


def test_generate_shortcode_raises_when_attempts_exhausted(monkeypatch, caplog):
    calls = []

    def always_taken(length):
        calls.append(length)
        return 'abc123'

    monkeypatch.setattr(shortener, '_random_code', always_taken)

    with pytest.raises(CapacityExceededError) as exc_info:
        generate_shortcode({'abc123'}, max_attempts=25)

    assert len(calls) == 25
    assert exc_info.value.error_code == 'SHORTCODE_CAPACITY_EXCEEDED'
    assert any(record.levelno == logging.ERROR and record.event == LogEvent.SHORTCODE_EXHAUSTED for record in caplog.records)


def test_generate_shortcode_succeeds_on_last_attempt(monkeypatch):
    candidates = cycle(['abc123'] * 9 + ['last01'])
    monkeypatch.setattr(shortener, '_random_code', lambda length: next(candidates))

    assert generate_shortcode({'abc123'}, max_attempts=10) == 'last01'


# -------------------------------
# 3. Argument validation
# -------------------------------


@pytest.mark.parametrize('length', [0, -1, 2.5, '6'])
def test_generate_shortcode_rejects_bad_length(length):
    with pytest.raises(ValueError):
        generate_shortcode(set(), length=length)


@pytest.mark.parametrize('max_attempts', [0, -10, None])
def test_generate_shortcode_rejects_bad_max_attempts(max_attempts):
    with pytest.raises(ValueError):
        generate_shortcode(set(), max_attempts=max_attempts)
