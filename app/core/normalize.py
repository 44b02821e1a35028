"""
Field normalization helpers.

Pure functions turning raw client input into the canonical values that
get stored and compared.
"""

import re
import unicodedata
from typing import Any

COUNTRY_PREFIX = "961"
MIN_LOCAL_DIGITS = 8

CATEGORY_SWEETS = "sweets"
CATEGORY_DAILY = "daily-platters"
CATEGORIES = (CATEGORY_SWEETS, CATEGORY_DAILY)

_WHITESPACE = re.compile(r"\s+")
_NON_DIGIT = re.compile(r"\D")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_password(value: Any) -> str:
    """NFKC-normalize and drop every whitespace character."""
    return _WHITESPACE.sub("", unicodedata.normalize("NFKC", _text(value)))


def normalize_phone(value: Any) -> str:
    """
    Canonicalize a Lebanese phone number to ``+961<digits>``.

    Non-digits are stripped and a leading 961 country code is dropped.
    Returns an empty string when fewer than 8 digits remain.

    Example:
        >>> normalize_phone("03 123 456")
        '+96103123456'
        >>> normalize_phone("+961 3 123 456")
        ''
    """
    digits = _NON_DIGIT.sub("", _text(value))
    if not digits:
        return ""
    local = digits[len(COUNTRY_PREFIX):] if digits.startswith(COUNTRY_PREFIX) else digits
    if len(local) < MIN_LOCAL_DIGITS:
        return ""
    return f"+{COUNTRY_PREFIX}{local}"


def normalize_category(value: Any) -> str:
    """Map "sweets" to sweets and anything else to daily-platters."""
    if _text(value).strip().lower() == CATEGORY_SWEETS:
        return CATEGORY_SWEETS
    return CATEGORY_DAILY


def clip(value: Any, limit: int, strip: bool = False) -> str:
    """Coerce to string and cap the length."""
    text = _text(value)
    if strip:
        text = text.strip()
    return text[:limit]
