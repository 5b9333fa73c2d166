"""Shortcode generation utility

This module provides a helper function for generating random, collision-free
shortcodes drawn uniformly from the Base62 alphabet.

Functions:
    generate_shortcode(existing_codes, length=6, max_attempts=10_000):
        Generate a random shortcode which is not present in `existing_codes`.

Example:
    >>> from localshortener.utils import generate_shortcode
    >>> generate_shortcode({'abc123', 'XYZ789'})
    'q7TzK2'
"""

import logging
import secrets
import string
from collections.abc import Collection

from localshortener.exceptions import CapacityExceededError
from localshortener.utils.constants import SHORTCODE_LENGTH, DEFAULT_MAX_ATTEMPTS, LogEvent


logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
BASE = len(ALPHABET)  # 26 uppercase + 26 lowercase + 10 digits


def _random_code(length: int) -> str:
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def generate_shortcode(
    existing_codes: Collection[str],
    length: int = SHORTCODE_LENGTH,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """Generate a random shortcode absent from `existing_codes`.

    Each character is drawn uniformly (and independently) from the Base62
    alphabet [A-Za-z0-9]. A colliding code is thrown away and regenerated.

    Args:
        existing_codes (Collection[str]):
            Shortcodes already in use. A set gives O(1) membership checks.

        length (int, optional):
            Length of the generated shortcode. Defaults to 6.

        max_attempts (int, optional):
            Number of candidates drawn before giving up. Defaults to 10 000.

    Returns:
        str: A shortcode of exactly `length` Base62 characters.

    Raises:
        ValueError:
            If `length` or `max_attempts` is not a positive integer.
        CapacityExceededError:
            If every one of the `max_attempts` candidates was already taken.

    NOTE:
        - With 62^6 (~5.7e10) possible 6-character codes, the retry bound is
          only reached when the code space is practically full.
    """
    if not isinstance(length, int) or length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(max_attempts, int) or max_attempts <= 0:
        raise ValueError(f'Max attempts must be a positive integer (given value: {max_attempts}).')

    for _ in range(max_attempts):
        shortcode = _random_code(length)
        if shortcode not in existing_codes:
            return shortcode

    logger.error(
        'Failed to generate an unused shortcode.',
        extra={'event': LogEvent.SHORTCODE_EXHAUSTED, 'attempts': max_attempts, 'existing': len(existing_codes)},
    )
    raise CapacityExceededError(f'Could not generate an unused {length}-character shortcode after {max_attempts} attempts.')
