"""Input validation for shortened URLs

Pure predicates: they never raise and have no side effects. The registry
turns a False result into the matching ValidationError.

Functions:
    validate_destination_url(candidate) -> bool
        True iff candidate is a well-formed absolute URL (scheme + authority).
    validate_shortcode_format(candidate) -> bool
        True iff candidate is 3-10 characters drawn from [A-Za-z0-9].
    validate_validity_minutes(candidate) -> bool
        True iff candidate is a positive integer.

Example:
    >>> validate_destination_url('https://example.com/page?q=1')
    True
    >>> validate_destination_url('not-a-url')
    False
    >>> validate_shortcode_format('abc123')
    True
    >>> validate_shortcode_format('ab')
    False
"""

import re
import urllib.parse
from typing import Any

from localshortener.utils.constants import SHORTCODE_MIN_LENGTH, SHORTCODE_MAX_LENGTH


SHORTCODE_PATTERN = re.compile(rf'[A-Za-z0-9]{{{SHORTCODE_MIN_LENGTH},{SHORTCODE_MAX_LENGTH}}}')
WHITESPACE_PATTERN = re.compile(r'\s')


def validate_destination_url(candidate: Any) -> bool:
    if not isinstance(candidate, str) or not candidate:
        return False
    if WHITESPACE_PATTERN.search(candidate):
        return False

    try:
        components = urllib.parse.urlsplit(candidate)
        # Accessing .port validates it (raises ValueError when out of range or non-numeric)
        components.port
    except ValueError:
        return False

    return bool(components.scheme) and bool(components.netloc) and bool(components.hostname)


def validate_shortcode_format(candidate: Any) -> bool:
    return isinstance(candidate, str) and SHORTCODE_PATTERN.fullmatch(candidate) is not None


def validate_validity_minutes(candidate: Any) -> bool:
    # bool is a subclass of int; True must not pass as "1 minute"
    return isinstance(candidate, int) and not isinstance(candidate, bool) and candidate > 0
